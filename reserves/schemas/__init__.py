"""
Schemas & Canonicalization

Purpose: Export the public API for the schemas module.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    encode_canonical,
    ensure_acyclic,
)

# Error models and exceptions
from .errors import (
    EmptyInputError,
    ErrorCodes,
    FormatError,
    ProofNotFoundError,
    ReservesError,
    ReservesException,
    SerializationError,
    UnsupportedAlgorithmError,
)

# Client lists and proof values
from .clients import (
    Amount,
    BalanceRecord,
    ClientEntry,
    ClientList,
    ClientPath,
    Found,
    Level,
    NotFound,
    Proof,
    ProofLookup,
    SiblingPathEntry,
    client_id_of,
    validate_client_entry,
    validate_client_list,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "encode_canonical",
    "ensure_acyclic",
    # Errors
    "EmptyInputError",
    "ErrorCodes",
    "FormatError",
    "ProofNotFoundError",
    "ReservesError",
    "ReservesException",
    "SerializationError",
    "UnsupportedAlgorithmError",
    # Clients
    "Amount",
    "BalanceRecord",
    "ClientEntry",
    "ClientList",
    "ClientPath",
    "Found",
    "Level",
    "NotFound",
    "Proof",
    "ProofLookup",
    "SiblingPathEntry",
    "client_id_of",
    "validate_client_entry",
    "validate_client_list",
]
