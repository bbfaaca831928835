"""
Reserves CLI

Command-line interface for building and checking balance commitments.

Usage:
    python -m reserves_cli demo --users 1000
    python -m reserves_cli build clients.json --proofs --json
    python -m reserves_cli verify entry.json --root <ROOT> --proof proof.json
    python -m reserves_cli config --show
"""

__version__ = "0.1.0"
