"""
Metadata Contracts

Immutable data structures for off-chain agreement metadata.

BOUNDARY: Metadata Layer
Everything the projector learns from the content store arrives as one
of these types.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class FetchStatus(Enum):
    """Status of a fetch attempt."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class FetchResult:
    """
    Record of one fetch attempt, successful or not.

    Failed fetches are first-class data: the resolver keeps these so
    degraded enrichments can be inspected after a replay.
    """
    cid: str
    status: FetchStatus
    attempted_at: datetime
    completed_at: datetime
    byte_count: int = 0
    http_status: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS


@dataclass(frozen=True)
class ResolverEntry:
    """
    One party listed in the metadata document.

    balance is None when the document omits it or it is malformed;
    the projector reads that as a required collateral of zero.
    """
    party: str
    balance: Optional[int] = None


@dataclass(frozen=True)
class ParsedMetadata:
    """
    Typed view of an agreement metadata document.

    Only recognized keys survive parsing. An absent key and a key of
    the wrong type both come out as the same default.
    """
    title: Optional[str] = None
    resolvers: Tuple[ResolverEntry, ...] = field(default_factory=tuple)
    issues: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)
