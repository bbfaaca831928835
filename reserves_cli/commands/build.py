"""
CLI Build Command

Build the Merkle tree of a client list read from a JSON file and print
its root, depth and (optionally) every client's proof.

Usage:
    reserves build clients.json [--algorithm sha256] [--proofs] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from reserves.config.runtime import MerkleConfig
from reserves.merkle import MerkleProver
from reserves.schemas.errors import ReservesException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    source: str = ""
    algorithm: str = ""
    clients: int = 0
    depth: int = 0
    root: str = ""
    paths: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["paths"]:
            del d["paths"]
        return d


def load_json_file(path: Path) -> Any:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def merkle_settings(args: Namespace) -> MerkleConfig:
    """Merkle settings from config, with --algorithm applied on top."""
    cli_config = getattr(args, "cli_config", None)
    settings = cli_config.runtime.merkle if cli_config is not None else MerkleConfig()
    if getattr(args, "algorithm", None):
        settings = replace(settings, algorithm=args.algorithm)
    return settings


def print_error(message: str, output_json: bool, error: ReservesException | None = None) -> None:
    """Report a failure on stderr, or as a JSON error object on stdout."""
    if output_json:
        payload = error.to_error_model().model_dump() if error is not None else {"message": message}
        print(json.dumps({"error": payload}, indent=2))
    else:
        print(f"Error: {message}", file=sys.stderr)


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"source: {summary.source}")
    print(f"algorithm: {summary.algorithm}")
    print(f"clients: {summary.clients}")
    print(f"depth: {summary.depth}")
    print(f"root: {summary.root}")

    if summary.paths:
        print(f"\nproofs ({len(summary.paths)}):")
        for path in summary.paths:
            (client_id, proof), = path.items()
            print(f"  {client_id}:")
            for entry in proof:
                side = "right" if entry["isRight"] else "left"
                print(f"    {entry['hash']}  {side}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Returns:
        Exit code
    """
    source = Path(args.clients)
    output_json = args.json

    if not source.exists():
        print_error(f"Client list not found: {source}", output_json)
        return EXIT_RUNTIME_ERROR

    try:
        client_list = load_json_file(source)
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Cannot read client list: {e}", output_json)
        return EXIT_RUNTIME_ERROR

    if not isinstance(client_list, list):
        print_error("Client list must be a JSON array of client entries", output_json)
        return EXIT_RUNTIME_ERROR

    try:
        prover = MerkleProver.from_config(merkle_settings(args))
        logger.info(f"Building Merkle tree for {len(client_list)} clients from {source}")
        tree = prover.build(client_list)
        paths = prover.prove_all(client_list, tree) if args.proofs else []
    except ReservesException as e:
        if args.debug:
            raise
        print_error(e.message, output_json, e)
        return EXIT_RUNTIME_ERROR

    summary = BuildSummary(
        source=str(source),
        algorithm=tree.algorithm,
        clients=len(tree.leaves),
        depth=tree.depth,
        root=tree.root,
        paths=[path.to_dict() for path in paths],
    )

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
