"""
Agreement Projector
===================

Owns the AgreementFramework, Agreement, AgreementPosition and Dispute
rows. Consumes the five agreement events plus the SetUp call trace.

STATE RULES:
- Agreement Created -> Ongoing happens once, on the first join
- Finalized and Disputed overwrite agreement status unconditionally
- Position status is overwritten from the on-chain status code; the
  contract has already validated the transition
- Only AgreementDisputed creates a Dispute row, and only once; a
  position moving to Disputed touches the position alone

The projector trusts event order from the host and never re-validates
transitions beyond the two guarded fields.
"""

from __future__ import annotations
from typing import Dict, Optional
import logging

from ..contracts.base import ErrorCode, position_id
from ..contracts.entities import (
    Agreement, AgreementFramework, AgreementPosition, Dispute,
    AgreementStatus, PositionStatus, EntityKind, DEFAULT_AGREEMENT_TITLE
)
from ..contracts.events import (
    AgreementCreated, AgreementJoined, AgreementPositionUpdated,
    AgreementFinalized, AgreementDisputed, FrameworkSetup, BlockContext,
    ChainEvent
)
from ..metadata import MetadataResolver, ParsedMetadata
from ..storage import EntityStore
from .audit import ProjectionAudit
from .base import Projector
from .guards import advance_only

logger = logging.getLogger(__name__)

# AgreementPositionUpdated.status codes; anything else reads as Joined
POSITION_STATUS_CODES: Dict[int, PositionStatus] = {
    2: PositionStatus.FINALIZED,
    3: PositionStatus.WITHDRAWN,
    4: PositionStatus.DISPUTED,
}

# Statuses that release the party's deposit
DEPOSIT_RELEASING = (PositionStatus.WITHDRAWN, PositionStatus.DISPUTED)


def position_status_for(code: int) -> PositionStatus:
    return POSITION_STATUS_CODES.get(code, PositionStatus.JOINED)


class AgreementProjector(Projector):
    """
    Agreement lifecycle handlers.

    resolver is optional: without one (standalone contracts, or
    enrichment disabled) agreements keep the default title and no
    pending positions are created.
    """

    def __init__(
        self,
        store: EntityStore,
        resolver: Optional[MetadataResolver] = None,
        audit: Optional[ProjectionAudit] = None
    ):
        super().__init__(store, audit)
        self._resolver = resolver

    # =========================================================================
    # FRAMEWORK
    # =========================================================================

    def handle_framework_setup(self, call: FrameworkSetup) -> None:
        framework = self._store.load(EntityKind.AGREEMENT_FRAMEWORK, call.framework)
        if framework is None:
            framework = AgreementFramework(id=call.framework)

        framework.arbitrator = call.arbitrator
        framework.required_deposit = call.required_deposit
        self._store.upsert(framework)

    def _required_deposit(self, context: BlockContext) -> int:
        if context.address is None:
            return 0
        framework = self._store.load(EntityKind.AGREEMENT_FRAMEWORK, context.address)
        return framework.required_deposit if framework is not None else 0

    # =========================================================================
    # AGREEMENT LIFECYCLE
    # =========================================================================

    def handle_agreement_created(self, event: AgreementCreated) -> None:
        # Persisted with defaults before the metadata fetch starts
        agreement = Agreement(
            id=event.id,
            terms_hash=event.terms_hash,
            criteria=event.criteria,
            metadata_uri=event.metadata_uri,
            token=event.token,
            status=AgreementStatus.CREATED,
            created_at=event.context.timestamp,
            title=DEFAULT_AGREEMENT_TITLE,
            framework=event.context.address,
        )
        self._store.upsert(agreement)

        metadata = self._resolve_metadata(event)
        if metadata is None:
            return

        if metadata.title is not None and metadata.title != agreement.title:
            agreement.title = metadata.title
            self._store.upsert(agreement)

        for entry in metadata.resolvers:
            self._store.upsert(AgreementPosition(
                id=position_id(event.id, entry.party),
                agreement=event.id,
                party=entry.party,
                status=PositionStatus.PENDING,
                required_collateral=entry.balance if entry.balance is not None else 0,
                collateral=0,
                deposit=0,
            ))

    def handle_agreement_joined(self, event: AgreementJoined) -> None:
        deposit = self._required_deposit(event.context)
        pid = position_id(event.id, event.party)

        position = self._store.load(EntityKind.AGREEMENT_POSITION, pid)
        if position is not None:
            position.collateral = event.balance
            position.deposit = deposit
            position.status = PositionStatus.JOINED
        else:
            position = AgreementPosition(
                id=pid,
                agreement=event.id,
                party=event.party,
                status=PositionStatus.JOINED,
                required_collateral=event.balance,
                collateral=event.balance,
                deposit=deposit,
            )
        self._store.upsert(position)

        agreement = self._store.load(EntityKind.AGREEMENT, event.id)
        if agreement is None:
            self._missing(event, EntityKind.AGREEMENT, event.id)
            return

        if advance_only(agreement, "status", AgreementStatus.CREATED, AgreementStatus.ONGOING):
            self._store.upsert(agreement)

    def handle_position_updated(self, event: AgreementPositionUpdated) -> None:
        pid = position_id(event.id, event.party)
        position = self._store.load(EntityKind.AGREEMENT_POSITION, pid)
        if position is None:
            self._missing(event, EntityKind.AGREEMENT_POSITION, pid)
            return

        status = position_status_for(event.status)
        position.collateral = event.balance
        position.status = status
        if status in DEPOSIT_RELEASING:
            position.deposit = 0
        self._store.upsert(position)

    def handle_agreement_finalized(self, event: AgreementFinalized) -> None:
        agreement = self._store.load(EntityKind.AGREEMENT, event.id)
        if agreement is None:
            self._missing(event, EntityKind.AGREEMENT, event.id)
            return

        agreement.status = AgreementStatus.FINALIZED
        self._store.upsert(agreement)

    def handle_agreement_disputed(self, event: AgreementDisputed) -> None:
        dispute = self._store.load(EntityKind.DISPUTE, event.id)
        if dispute is None:
            dispute = Dispute(id=event.id, created_at=event.context.timestamp)

        agreement = self._store.load(EntityKind.AGREEMENT, event.id)
        if agreement is not None:
            dispute.agreement = agreement.id
            agreement.status = AgreementStatus.DISPUTED
            self._store.upsert(agreement)
        else:
            self._missing(event, EntityKind.AGREEMENT, event.id)

        # Saved even without an agreement, to tolerate partial history
        self._store.upsert(dispute)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_metadata(self, event: AgreementCreated) -> Optional[ParsedMetadata]:
        if self._resolver is None:
            return None

        metadata = self._resolver.resolve(event.metadata_uri)
        if metadata is None:
            self._degraded(event, ErrorCode.METADATA_UNAVAILABLE,
                           f"metadata {event.metadata_uri!r} unavailable, using defaults")
            return None

        if metadata.has_issues:
            self._degraded(event, ErrorCode.METADATA_MALFORMED,
                           "; ".join(metadata.issues))
        return metadata

    def _degraded(self, event: ChainEvent, code: ErrorCode, message: str) -> None:
        self._audit.record(
            event_kind=event.kind,
            code=code,
            message=message,
            entity_kind=EntityKind.AGREEMENT,
            entity_id=getattr(event, "id", None),
            block_number=event.context.block_number
        )
