"""
Event Ingestion Adapter
=======================

Pure dispatch: each decoded event goes to exactly one projector
handler, chosen by its declared kind.

GUARANTEES:
===========
1. One event in, one handler call out
2. No retries, reordering or batching
3. Store failures propagate unchanged to the caller
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Mapping, Tuple

from ..contracts.base import Error, ErrorCode, UnsupportedEventError
from ..contracts.events import ChainEvent, EventKind
from ..projection import AgreementProjector, ArbitrationProjector
from .decoder import decode_event


class EventIngestionAdapter:

    def __init__(self, agreements: AgreementProjector, arbitration: ArbitrationProjector):
        self._handlers: Dict[EventKind, Callable[[Any], None]] = {
            EventKind.AGREEMENT_CREATED: agreements.handle_agreement_created,
            EventKind.AGREEMENT_JOINED: agreements.handle_agreement_joined,
            EventKind.AGREEMENT_POSITION_UPDATED: agreements.handle_position_updated,
            EventKind.AGREEMENT_FINALIZED: agreements.handle_agreement_finalized,
            EventKind.AGREEMENT_DISPUTED: agreements.handle_agreement_disputed,
            EventKind.FRAMEWORK_SETUP: agreements.handle_framework_setup,
            EventKind.RESOLUTION_SUBMITTED: arbitration.handle_resolution_submitted,
            EventKind.RESOLUTION_APPEALED: arbitration.handle_resolution_appealed,
            EventKind.RESOLUTION_ENDORSED: arbitration.handle_resolution_endorsed,
            EventKind.RESOLUTION_EXECUTED: arbitration.handle_resolution_executed,
        }
        self._dispatched: int = 0

    def dispatch(self, event: ChainEvent) -> None:
        handler = self._handlers.get(event.kind)
        if handler is None:
            raise UnsupportedEventError(Error.create(
                ErrorCode.UNSUPPORTED_EVENT,
                f"No handler for {event.kind.value}",
                kind=event.kind.value,
            ))
        handler(event)
        self._dispatched += 1

    def dispatch_record(self, record: Mapping[str, Any]) -> ChainEvent:
        """Decode a raw record and dispatch it. Returns the decoded event."""
        event = decode_event(record)
        self.dispatch(event)
        return event

    def ingest(self, events: Iterable[ChainEvent]) -> int:
        """Dispatch events in the given order. Returns how many were handled."""
        count = 0
        for event in events:
            self.dispatch(event)
            count += 1
        return count

    @property
    def supported_kinds(self) -> Tuple[EventKind, ...]:
        return tuple(self._handlers)

    @property
    def dispatched_count(self) -> int:
        return self._dispatched
