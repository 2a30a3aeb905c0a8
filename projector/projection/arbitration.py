"""
Arbitration Projector
=====================

Owns Settlement rows and their link back to Dispute.

STATE RULES:
- Settlements exist only for disputes the projector has already seen
- Dispute.resolution keeps the first submitted value
- Dispute.settlement always points at the latest submission
- Appeal / endorse / execute overwrite settlement status with no guard
"""

from __future__ import annotations

from ..contracts.entities import EntityKind, Settlement, SettlementStatus
from ..contracts.events import (
    ResolutionSubmitted, ResolutionAppealed, ResolutionEndorsed,
    ResolutionExecuted, ChainEvent
)
from .base import Projector
from .guards import set_once


class ArbitrationProjector(Projector):

    def handle_resolution_submitted(self, event: ResolutionSubmitted) -> None:
        dispute = self._store.load(EntityKind.DISPUTE, event.dispute)
        if dispute is None:
            self._missing(event, EntityKind.DISPUTE, event.dispute)
            return

        settlement = self._store.load(EntityKind.SETTLEMENT, event.settlement)
        if settlement is None:
            settlement = Settlement(
                id=event.settlement,
                dispute=dispute.id,
                status=SettlementStatus.SUBMITTED,
                submitted_at=event.context.timestamp,
            )
        settlement.submitted_at = event.context.timestamp
        settlement.status = SettlementStatus.SUBMITTED
        settlement.dispute = dispute.id
        self._store.upsert(settlement)

        set_once(dispute, "resolution", event.resolution)
        dispute.settlement = settlement.id
        self._store.upsert(dispute)

    def handle_resolution_appealed(self, event: ResolutionAppealed) -> None:
        self._set_status(event, event.settlement, SettlementStatus.APPEALED)

    def handle_resolution_endorsed(self, event: ResolutionEndorsed) -> None:
        self._set_status(event, event.settlement, SettlementStatus.ENDORSED)

    def handle_resolution_executed(self, event: ResolutionExecuted) -> None:
        self._set_status(event, event.settlement, SettlementStatus.EXECUTED)

    def _set_status(self, event: ChainEvent, settlement_id: str, status: SettlementStatus) -> None:
        settlement = self._store.load(EntityKind.SETTLEMENT, settlement_id)
        if settlement is None:
            self._missing(event, EntityKind.SETTLEMENT, settlement_id)
            return

        settlement.status = status
        self._store.upsert(settlement)
