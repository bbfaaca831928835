"""
CLI command modules.
"""

from reserves_cli.commands import build, demo, verify

__all__ = ["build", "demo", "verify"]
