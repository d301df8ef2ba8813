"""Command-line interface for trustee-checkpoints."""
