"""
CLI Configuration

Configuration management for the reserves CLI.
Supports environment variables and JSON configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from reserves.config.runtime import ENV_PREFIX, RuntimeConfig


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree, proof and generator settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.runtime.to_dict(),
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_output_format": self.default_output_format,
        }


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = CLIConfig(runtime=RuntimeConfig.from_dict(data))
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get("default_output_format", config.default_output_format)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "reserves.json",
            Path.cwd() / ".reserves.json",
            Path.home() / ".config" / "reserves" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.runtime = config.runtime.with_env_overrides()

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "merkle": {
    "algorithm": "sha256",
    "validate_records": true,
    "workers": 1,
    "skip_missing_siblings": false
  },
  "generator": {
    "max_tokens": 10,
    "min_amount": 1e-9,
    "max_amount": 1e9,
    "seed": null
  },
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
