"""
CLI Demo Command

End-to-end demonstration on a synthetic client list: build the tree,
prove every client, pick one client at random and check their inclusion.

Usage:
    reserves demo [--users 10000] [--seed 7] [--json]
"""

from __future__ import annotations

import json
import logging
import random
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from reserves.config.runtime import GeneratorConfig, MerkleConfig
from reserves.generator import generate_client_list
from reserves.merkle import MerkleProver, MerkleVerifier


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class DemoSummary:
    """Summary of a demo run for CLI output."""
    users: int = 0
    depth: int = 0
    root: str = ""
    client_id: str = ""
    balances: list[list[Any]] = field(default_factory=list)
    all_proofs_generated: bool = False
    proof: list[dict[str, Any]] = field(default_factory=list)
    included: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def run_demo(
    users: int,
    merkle: MerkleConfig,
    generator: GeneratorConfig,
    rng: random.Random,
) -> DemoSummary:
    """Generate clients, build, prove everyone and verify one client."""
    client_list = generate_client_list(
        users,
        rng=rng,
        max_tokens=generator.max_tokens,
        min_amount=generator.min_amount,
        max_amount=generator.max_amount,
    )

    prover = MerkleProver.from_config(merkle)
    tree = prover.build(client_list)
    paths = prover.prove_all(client_list, tree)

    chosen = rng.randrange(users)
    entry = client_list[chosen]
    path = paths[chosen]
    logger.info(f"Checking inclusion of {path.client_id}")

    included = MerkleVerifier(merkle.algorithm).verify_path(entry, tree.root, path)

    return DemoSummary(
        users=users,
        depth=tree.depth,
        root=tree.root,
        client_id=path.client_id,
        balances=[list(record) for record in entry[path.client_id]],
        all_proofs_generated=len(paths) == users,
        proof=[sibling.to_dict() for sibling in path.proof],
        included=included,
    )


def print_summary_human(summary: DemoSummary) -> None:
    """Print summary in human-readable format."""
    print(f"Random generated amount of users ({summary.users})")

    print("\nGenerated Merkle tree:")
    print(f"\tdepth {summary.depth}")
    print(f"\troot  {summary.root}")

    print(f"\nRandom user account: {summary.client_id}\n")
    for token, amount in summary.balances:
        print(f"\t{token}: {amount}")

    print("\nGenerating proof for every user:")
    print("\n\t" + ("✓ Success" if summary.all_proofs_generated else "✗ Fail"))

    print(f"\nProof path for the user: {summary.client_id}\n")
    width = max((len(entry["hash"]) for entry in summary.proof), default=len("hash"))
    print(f"\t{'hash'.ljust(width)}\tisRight")
    for entry in summary.proof:
        print(f"\t{entry['hash'].ljust(width)}\t{str(entry['isRight']).lower()}")

    print("\nWas the user included in the tree:")
    print("\n\t" + ("✓ true" if summary.included else "✗ false"))


def demo_cmd(args: Namespace) -> int:
    """
    Execute the demo command.

    Returns:
        Exit code
    """
    if args.users < 1:
        print("Error: --users must be at least 1", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    cli_config = getattr(args, "cli_config", None)
    merkle = cli_config.runtime.merkle if cli_config is not None else MerkleConfig()
    generator = cli_config.runtime.generator if cli_config is not None else GeneratorConfig()

    seed = args.seed if args.seed is not None else generator.seed
    summary = run_demo(args.users, merkle, generator, random.Random(seed))

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.included else EXIT_VERIFICATION_FAILED
