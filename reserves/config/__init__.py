"""Runtime configuration."""
from .runtime import (
    GeneratorConfig,
    MerkleConfig,
    RuntimeConfig,
)

__all__ = [
    "GeneratorConfig",
    "MerkleConfig",
    "RuntimeConfig",
]
