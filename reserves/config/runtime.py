"""
Runtime Configuration

Central configuration for tree construction, proof generation and the
synthetic client generator.
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from reserves.crypto.hashing import DEFAULT_ALGORITHM, normalize_algorithm

load_dotenv()


ENV_PREFIX = "RESERVES_"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class MerkleConfig:
    """Configuration for hashing, tree building and proofs."""
    algorithm: str = DEFAULT_ALGORITHM
    validate_records: bool = True
    workers: int = 1
    skip_missing_siblings: bool = False

    def __post_init__(self):
        # Reject unknown digests as early as possible
        self.algorithm = normalize_algorithm(self.algorithm)
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


@dataclass
class GeneratorConfig:
    """Configuration for the synthetic client list generator."""
    max_tokens: int = 10
    min_amount: float = 1e-9
    max_amount: float = 1e9
    seed: Optional[int] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - RESERVES_ALGORITHM: Digest algorithm (e.g. sha256, SHA-512)
        - RESERVES_WORKERS: Thread pool size for hashing
        - RESERVES_VALIDATE_RECORDS: Check balance record shapes (true/false)
        - RESERVES_SKIP_MISSING_SIBLINGS: Literal sibling paths (true/false)
        - RESERVES_SEED: Seed for the synthetic client generator
        - RESERVES_LOG_LEVEL: Log level
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}ALGORITHM"):
            overrides.setdefault("merkle", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}WORKERS"):
            overrides.setdefault("merkle", {})["workers"] = int(os.getenv(f"{ENV_PREFIX}WORKERS", "1"))
        if os.getenv(f"{ENV_PREFIX}VALIDATE_RECORDS"):
            overrides.setdefault("merkle", {})["validate_records"] = _env_bool(
                f"{ENV_PREFIX}VALIDATE_RECORDS", "true"
            )
        if os.getenv(f"{ENV_PREFIX}SKIP_MISSING_SIBLINGS"):
            overrides.setdefault("merkle", {})["skip_missing_siblings"] = _env_bool(
                f"{ENV_PREFIX}SKIP_MISSING_SIBLINGS", "false"
            )

        if os.getenv(f"{ENV_PREFIX}SEED"):
            overrides.setdefault("generator", {})["seed"] = int(os.getenv(f"{ENV_PREFIX}SEED", "0"))

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        merkle_data = data.get("merkle", {})
        generator_data = data.get("generator", {})

        merkle = MerkleConfig(**merkle_data) if merkle_data else MerkleConfig()
        generator = GeneratorConfig(**generator_data) if generator_data else GeneratorConfig()

        return cls(
            merkle=merkle,
            generator=generator,
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        # replace() re-runs __post_init__, so overridden values are validated
        if "merkle" in overrides:
            new_config.merkle = replace(new_config.merkle, **overrides["merkle"])

        if "generator" in overrides:
            new_config.generator = replace(new_config.generator, **overrides["generator"])

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": asdict(self.merkle),
            "generator": asdict(self.generator),
            "log_level": self.log_level,
            "extra": self.extra,
        }
