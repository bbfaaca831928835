"""
Merkle reserves: inclusion proofs for account-balance commitments.

Build a Merkle tree over a client list, hand every client their sibling
path, and let anyone check a client's balances against the published root.
"""

__version__ = "0.1.0"
