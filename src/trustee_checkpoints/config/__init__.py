"""Configuration for trustee-checkpoints."""
