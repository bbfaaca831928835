"""
CLI Verify Command

Check that one client entry is included under a published root.

The proof file holds either a list of sibling entries
([{"hash": ..., "isRight": ...}, ...]) or a client path as printed by
`reserves build --proofs --json` ({"Client 1": [...]}).

Usage:
    reserves verify entry.json --root <ROOT> --proof proof.json [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from reserves.merkle import MerkleVerifier
from reserves.schemas.clients import client_id_of, validate_client_entry
from reserves.schemas.errors import FormatError, ReservesException
from reserves_cli.commands.build import load_json_file, merkle_settings, print_error


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of an inclusion check for CLI output."""
    client_id: str = ""
    root: str = ""
    algorithm: str = ""
    proof_length: int = 0
    included: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def extract_proof(data: Any, client_id: str) -> list[Any]:
    """Accept a bare proof list or a {client_id: proof} mapping."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and len(data) == 1:
        (path_client, proof), = data.items()
        if path_client != client_id:
            raise FormatError(
                f"Proof belongs to {path_client!r}, not {client_id!r}",
                details={"client_id": client_id, "proof_client_id": path_client},
            )
        if isinstance(proof, list):
            return proof
    raise FormatError(
        "Invalid proof file: expected a list of sibling entries",
        details={"type": type(data).__name__},
    )


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (0 included, 2 not included, 1 error)
    """
    output_json = args.json
    entry_path = Path(args.entry)
    proof_path = Path(args.proof)

    for path in (entry_path, proof_path):
        if not path.exists():
            print_error(f"File not found: {path}", output_json)
            return EXIT_RUNTIME_ERROR

    try:
        entry = load_json_file(entry_path)
        proof_data = load_json_file(proof_path)
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Cannot read input: {e}", output_json)
        return EXIT_RUNTIME_ERROR

    try:
        validate_client_entry(entry, validate_records=False)
        client_id = client_id_of(entry)
        proof = extract_proof(proof_data, client_id)
        verifier = MerkleVerifier(merkle_settings(args).algorithm)
        logger.info(f"Verifying inclusion of {client_id} under root {args.root}")
        included = verifier.verify(entry, args.root, proof)
    except ReservesException as e:
        if args.debug:
            raise
        print_error(e.message, output_json, e)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        client_id=client_id,
        root=args.root,
        algorithm=verifier.algorithm,
        proof_length=len(proof),
        included=included,
    )

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"client: {summary.client_id}")
        print(f"root: {summary.root}")
        print(f"algorithm: {summary.algorithm}")
        print(f"proof_length: {summary.proof_length}")
        print(f"included: {str(summary.included).lower()}")

    return EXIT_SUCCESS if included else EXIT_VERIFICATION_FAILED
