"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for leaf hashing, tree construction and proofs.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input shape & canonicalization
    CLIENT_LIST_FORMAT_ERROR = "CLIENT_LIST_FORMAT_ERROR"
    EMPTY_INPUT = "EMPTY_INPUT"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"

    # Hashing configuration
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"

    # Merkle proofs
    PROOF_NOT_FOUND = "PROOF_NOT_FOUND"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ReservesError(BaseModel):
    """
    Error model for structured error communication.

    Lets callers pass a failure around (or print it as JSON) without
    carrying the exception object itself.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CLIENT_LIST_FORMAT_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ReservesException":
        """Convert this error model to a raisable exception."""
        return ReservesException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ReservesException(Exception):
    """
    Base exception for all reserves errors.

    Carries structured error information and can be converted to a
    ReservesError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "RESERVES_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ReservesError:
        """Convert this exception to a ReservesError model."""
        return ReservesError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class FormatError(ReservesException, ValueError):
    """Raised when a client list entry does not have the single-key entry shape."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.CLIENT_LIST_FORMAT_ERROR,
            details=full_details,
            retryable=False,
        )


class EmptyInputError(ReservesException, ValueError):
    """Raised when a tree is requested for an empty client list."""

    def __init__(
        self,
        message: str = "Empty array of clients.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class SerializationError(ReservesException, TypeError):
    """Raised when a value cannot be canonically serialized (cycles, NaN, ...)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SERIALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class UnsupportedAlgorithmError(ReservesException, ValueError):
    """Raised when a digest algorithm name is not in the supported set."""

    def __init__(
        self,
        algorithm: str,
        supported: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {"algorithm": algorithm}
        if supported is not None:
            details["supported"] = supported
        super().__init__(
            message=f"Unsupported digest algorithm: {algorithm!r}",
            code=ErrorCodes.UNSUPPORTED_ALGORITHM,
            details=details,
            retryable=False,
        )


class ProofNotFoundError(ReservesException, LookupError):
    """Raised when batch proof generation cannot locate a client's leaf."""

    def __init__(
        self,
        client_id: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["client_id"] = client_id
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=f"Proof not found for user {client_id}",
            code=ErrorCodes.PROOF_NOT_FOUND,
            details=full_details,
            retryable=False,
        )
        self.client_id = client_id
