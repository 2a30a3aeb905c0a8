"""
Projector base: shared store handle, audit trail and drop bookkeeping.
"""

from __future__ import annotations
from typing import Optional
import logging

from ..contracts.base import ErrorCode
from ..contracts.entities import EntityKind
from ..contracts.events import ChainEvent
from ..storage import EntityStore
from .audit import ProjectionAudit

logger = logging.getLogger(__name__)


class Projector:
    """
    A projector maps one inbound event to zero or more whole-row writes.

    Handlers never raise for data conditions. The only exception that
    escapes is EntityStoreError from the store itself.
    """

    def __init__(self, store: EntityStore, audit: Optional[ProjectionAudit] = None):
        self._store = store
        self._audit = audit if audit is not None else ProjectionAudit()

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def audit(self) -> ProjectionAudit:
        return self._audit

    def _missing(self, event: ChainEvent, entity_kind: EntityKind, entity_id: str) -> None:
        """Record that event referenced a row this store has never seen."""
        logger.debug(
            "%s at block %s: no %s %s, ignoring",
            event.kind.value, event.context.block_number, entity_kind.value, entity_id
        )
        self._audit.record(
            event_kind=event.kind,
            code=ErrorCode.MISSING_REFERENCE,
            message=f"{entity_kind.value} {entity_id} not found",
            entity_kind=entity_kind,
            entity_id=entity_id,
            block_number=event.context.block_number
        )
