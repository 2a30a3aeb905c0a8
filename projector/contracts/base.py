"""
Base Contracts and Shared Types

Foundational types used across all layers: error states, identifier
rendering, and the exceptions that are allowed to cross the boundary
to the ingestion host.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Errors are data (frozen dataclasses) so they can be stored and queried
- Only failures the host must act on are raised as exceptions
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple, Union
from enum import Enum, auto
import re


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes.

    Only STORE_WRITE_FAILED, MALFORMED_EVENT and UNSUPPORTED_EVENT ever
    surface as exceptions; the rest are recorded and the projector moves on.
    """
    # Projection conditions
    MISSING_REFERENCE = auto()

    # Metadata conditions
    METADATA_UNAVAILABLE = auto()
    METADATA_MALFORMED = auto()

    # Ingestion errors
    MALFORMED_EVENT = auto()
    UNSUPPORTED_EVENT = auto()

    # Storage errors
    STORE_WRITE_FAILED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str, **context: object) -> Error:
        return Error(
            code=code,
            message=message,
            timestamp=datetime.now(timezone.utc),
            context=tuple((key, str(value)) for key, value in context.items())
        )

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


class ProjectorError(Exception):
    """Base exception; always carries the structured Error."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class EntityStoreError(ProjectorError):
    """A store write failed. Must propagate so the host can redeliver."""


class MalformedEventError(ProjectorError):
    """An inbound record could not be decoded into a typed event."""


class UnsupportedEventError(ProjectorError):
    """No handler is registered for the event kind."""


# =============================================================================
# IDENTIFIER RENDERING
# =============================================================================

_HEX_RE = re.compile(r"^0x[0-9a-f]*$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")

HexLike = Union[str, bytes, bytearray, int]


def to_hex(value: HexLike) -> str:
    """
    Render an on-chain identifier as a lowercase 0x-prefixed hex string.

    Accepts raw bytes, non-negative ints, or hex strings with or without
    the prefix. Raises ValueError for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an identifier: {value!r}")
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Identifier must be non-negative: {value}")
        return hex(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if not text.startswith("0x"):
            text = "0x" + text
        if not _HEX_RE.match(text):
            raise ValueError(f"Not a hex string: {value!r}")
        return text
    raise ValueError(f"Not an identifier: {value!r}")


def to_quantity_hex(value: HexLike) -> str:
    """
    Render a uint256 identifier with no leading zero nibbles.

    0xc8, 0x00c8, 200 and b"\\x00\\xc8" all key the same row. Zero renders
    as 0x0.
    """
    text = to_hex(value)
    return "0x" + (text[2:].lstrip("0") or "0")


def is_address(value: str) -> bool:
    """True for a 20-byte account identifier in any hex casing."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value.strip().lower()))


def to_address(value: HexLike) -> str:
    """Render a 20-byte account identifier; raises ValueError otherwise."""
    text = to_hex(value)
    if not _ADDRESS_RE.match(text):
        raise ValueError(f"Not a 20-byte address: {value!r}")
    return text


def position_id(agreement_id: str, party: str) -> str:
    """AgreementPosition identity: agreement hex concatenated with party hex."""
    return agreement_id + party


def parse_uint(value: object) -> Optional[int]:
    """
    Parse a non-negative integer from an int or a decimal / 0x-hex string.

    Returns None when the value is not an unsigned integer. Booleans are
    rejected even though they are ints.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                parsed = int(text, 16)
            elif text.isdigit():
                parsed = int(text, 10)
            else:
                return None
        except ValueError:
            return None
        return parsed if parsed >= 0 else None
    return None
