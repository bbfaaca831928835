"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m reserves_cli demo [--users N] [--seed S] [--json]
    python -m reserves_cli build <clients.json> [--algorithm A] [--proofs] [--json] [--debug]
    python -m reserves_cli verify <entry.json> --root ROOT --proof <proof.json> [--algorithm A] [--json]
    python -m reserves_cli config --init

Environment Variables:
    RESERVES_ALGORITHM              Digest algorithm (default: sha256)
    RESERVES_WORKERS                Thread pool size for hashing (default: 1)
    RESERVES_VALIDATE_RECORDS       Check balance record shapes (default: true)
    RESERVES_SKIP_MISSING_SIBLINGS  Literal sibling paths (default: false)
    RESERVES_SEED                   Seed for the demo client generator
    RESERVES_LOG_LEVEL              Log level (default: INFO)
    RESERVES_LOG_FILE               Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from reserves_cli import __version__
from reserves_cli.commands import build, demo, verify
from reserves_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="reserves",
        description="Merkle reserves CLI - Build balance commitments and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./reserves.json or ~/.config/reserves/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run an end-to-end demonstration on random clients",
        description="Generate random clients, build the tree, prove everyone and verify one client.",
    )
    demo_parser.add_argument(
        "--users", "-n",
        type=int,
        default=10000,
        help="Number of random clients to generate (default: 10000)",
    )
    demo_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random generator (default: from config, else random)",
    )
    demo_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build the Merkle tree of a client list",
        description="Read a JSON client list, print the root and depth, and optionally every proof.",
    )
    build_parser.add_argument(
        "clients",
        type=str,
        help="Path to a JSON array of client entries",
    )
    build_parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help="Digest algorithm (default: from config, else sha256)",
    )
    build_parser.add_argument(
        "--proofs",
        action="store_true",
        default=False,
        help="Include the proof of every client",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Raise errors with full tracebacks",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a client's inclusion proof",
        description="Recompute the root from a client entry and its proof and compare it to a published root.",
    )
    verify_parser.add_argument(
        "entry",
        type=str,
        help="Path to a JSON client entry ({\"Client 1\": [[\"Token 1\", 5]]})",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Published root hash",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        required=True,
        help="Path to the JSON proof (list of sibling entries or client path)",
    )
    verify_parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help="Digest algorithm (default: from config, else sha256)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Raise errors with full tracebacks",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="reserves.json",
        help="Path for config file (default: reserves.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (RESERVES_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: reserves config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
