"""
Schemas & Canonicalization
File: clients.py

Purpose: Client list shapes and the value types produced by the prover.

A client list is plain data, e.g.:

    [
        {"Client 1": [("Token 1", 12.5), ("Token 2", 3)]},
        {"Client 2": [["Token 1", Decimal("0.000000001")]]},
    ]

Each entry maps exactly one client identifier to an ordered sequence of
(token, amount) balance records. List order fixes leaf order in the tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .canonical import ensure_acyclic
from .errors import FormatError


Amount = Union[int, float, Decimal]
BalanceRecord = tuple[str, Amount]
ClientEntry = Mapping[str, Sequence[BalanceRecord]]
ClientList = Sequence[ClientEntry]
Level = tuple[str, ...]


# =============================================================================
# Shape validation
# =============================================================================

def _is_amount(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def validate_client_entry(
    entry: Any,
    index: int | None = None,
    validate_records: bool = True,
) -> str:
    """
    Check that an entry is a single-key mapping of client id to records.

    Args:
        entry: The candidate client entry.
        index: Position in the client list, for error reporting.
        validate_records: Also check that the balances are a sequence of
            (str, number) pairs. Self-referencing balances are reported as
            SerializationError before any shape check.

    Returns:
        The entry's client identifier.

    Raises:
        FormatError: If the entry does not have the client entry shape.
        SerializationError: If validate_records is set and the balances
            contain a reference cycle.
    """
    if not isinstance(entry, Mapping):
        raise FormatError(
            "Invalid format for ClientList",
            index=index,
            details={"reason": f"entry is {type(entry).__name__}, expected a mapping"},
        )
    if len(entry) != 1:
        raise FormatError(
            "Invalid format for ClientList",
            index=index,
            details={"reason": f"entry has {len(entry)} keys, expected exactly 1"},
        )

    (client_id, records), = entry.items()
    if not isinstance(client_id, str):
        raise FormatError(
            "Invalid format for ClientList",
            index=index,
            details={"reason": "client identifier must be a string"},
        )

    if not validate_records:
        return client_id

    # A self-referencing entry has no canonical form at all
    ensure_acyclic(records, path=client_id)

    if not isinstance(records, (list, tuple)):
        raise FormatError(
            "Invalid format for ClientList",
            index=index,
            details={
                "reason": f"balances for {client_id!r} must be a sequence of records",
                "client_id": client_id,
            },
        )

    for position, record in enumerate(records):
        if (
            not isinstance(record, (list, tuple))
            or len(record) != 2
            or not isinstance(record[0], str)
            or not _is_amount(record[1])
        ):
            raise FormatError(
                "Invalid format for ClientList",
                index=index,
                details={
                    "reason": f"record {position} of {client_id!r} is not a (token, amount) pair",
                    "client_id": client_id,
                    "record": position,
                },
            )

    return client_id


def validate_client_list(
    client_list: Iterable[Any],
    validate_records: bool = True,
) -> list[str]:
    """
    Validate every entry of a client list before anything is hashed.

    Returns:
        Client identifiers in list order.

    Raises:
        FormatError: On the first malformed entry.
        SerializationError: On a self-referencing entry when validating records.
    """
    if isinstance(client_list, (str, bytes, Mapping)):
        raise FormatError(
            "Invalid format for ClientList",
            details={"reason": f"client list is {type(client_list).__name__}, expected a sequence"},
        )
    return [
        validate_client_entry(entry, index=i, validate_records=validate_records)
        for i, entry in enumerate(client_list)
    ]


def client_id_of(entry: ClientEntry) -> str:
    """Return the single client identifier of a well-formed entry."""
    return next(iter(entry))


# =============================================================================
# Proof values
# =============================================================================

class SiblingPathEntry(BaseModel):
    """
    One step of an inclusion proof.

    `is_right` is true when the sibling lies to the right of the node being
    proven, i.e. the parent is hash(node + sibling).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    hash: str = Field(..., min_length=1, description="Hex digest of the sibling node")
    is_right: bool = Field(..., alias="isRight", description="Sibling is the right child")

    @classmethod
    def parse(cls, value: Any, position: int | None = None) -> "SiblingPathEntry":
        """Accept an instance or a mapping with hash/is_right (or isRight)."""
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            raise FormatError(
                "Invalid proof entry",
                index=position,
                details={"reason": str(e)},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        return {"hash": self.hash, "isRight": self.is_right}


Proof = tuple[SiblingPathEntry, ...]


class ClientPath(BaseModel):
    """A client's identifier together with its inclusion proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    client_id: str
    proof: tuple[SiblingPathEntry, ...] = ()

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Render as {client_id: [{"hash": ..., "isRight": ...}, ...]}."""
        return {self.client_id: [entry.to_dict() for entry in self.proof]}


@dataclass(frozen=True)
class Found:
    """Result of a proof lookup whose leaf is present in the tree."""
    proof: Proof
    index: int

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """Result of a proof lookup whose leaf hash is absent from level 0."""
    leaf_hash: str

    def __bool__(self) -> bool:
        return False


ProofLookup = Union[Found, NotFound]
