"""
Projection Audit Trail

Bounded append-only record of the events a projector dropped or degraded.

A dropped event is not an error - late-starting checkpoints and
partially indexed frameworks make missing references routine - but it
must still be traceable. Each entry names the event kind, the entity
that was missing, and the ErrorCode explaining why.
"""

from __future__ import annotations
from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional

from ..contracts.base import ErrorCode
from ..contracts.entities import EntityKind
from ..contracts.events import EventKind

DEFAULT_AUDIT_LIMIT = 10000


@dataclass(frozen=True)
class AuditEntry:
    sequence: int
    event_kind: EventKind
    code: ErrorCode
    entity_kind: Optional[EntityKind]
    entity_id: Optional[str]
    message: str
    recorded_at: datetime
    block_number: Optional[int] = None


class ProjectionAudit:
    """
    Collector for AuditEntry records.

    Append-only: entries are never modified. Only the most recent
    max_entries are retained; per-code totals cover every entry ever
    recorded. reset() clears both before a full replay.
    """

    def __init__(self, max_entries: int = DEFAULT_AUDIT_LIMIT):
        self._entries: Deque[AuditEntry] = deque(maxlen=max_entries)
        self._totals: Counter = Counter()
        self._sequence = 0

    def record(
        self,
        event_kind: EventKind,
        code: ErrorCode,
        message: str,
        entity_kind: Optional[EntityKind] = None,
        entity_id: Optional[str] = None,
        block_number: Optional[int] = None
    ) -> AuditEntry:
        entry = AuditEntry(
            sequence=self._sequence + 1,
            event_kind=event_kind,
            code=code,
            entity_kind=entity_kind,
            entity_id=entity_id,
            message=message,
            recorded_at=datetime.now(timezone.utc),
            block_number=block_number
        )
        self._sequence = entry.sequence
        self._entries.append(entry)
        self._totals[code] += 1
        return entry

    def entries(
        self,
        code: Optional[ErrorCode] = None,
        event_kind: Optional[EventKind] = None
    ) -> List[AuditEntry]:
        """Get entries, optionally filtered."""
        entries = self._entries
        if code:
            entries = [e for e in entries if e.code == code]
        if event_kind:
            entries = [e for e in entries if e.event_kind == event_kind]
        return list(entries)

    def totals(self) -> Dict[ErrorCode, int]:
        """Entries recorded per ErrorCode, including ones no longer retained."""
        return dict(self._totals)

    def reset(self) -> None:
        self._entries.clear()
        self._totals.clear()
        self._sequence = 0

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def recorded_count(self) -> int:
        return self._sequence
