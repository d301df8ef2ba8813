"""
Shared type definitions for the trustee-checkpoints package.

Centralizes common type annotations used across multiple modules.
"""

from typing import Annotated

import pydantic

# Timezone-aware datetime for JSON serialization (allows string→datetime conversion)
JsonDatetime = Annotated[pydantic.AwareDatetime, pydantic.Field(strict=False)]

# Hex-encoded sha256 digest of a canonical project path
PROJECT_HASH_PATTERN = r'^[0-9a-f]{64}$'
ProjectHash = Annotated[str, pydantic.Field(pattern=PROJECT_HASH_PATTERN)]

NonNegativeInt = Annotated[int, pydantic.Field(ge=0)]
