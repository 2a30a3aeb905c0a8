"""
Inbound Event Contracts
=======================

Immutable, already-decoded chain events (and the one call trace) that
the projectors consume.

INVARIANTS:
- Frozen dataclasses; never mutated after decoding
- Identifiers are normalized lowercase 0x-hex strings
- Every event carries the BlockContext it was observed in
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class EventKind(Enum):
    """Declared kind of an inbound event. Values match the on-chain names."""
    AGREEMENT_CREATED = "AgreementCreated"
    AGREEMENT_JOINED = "AgreementJoined"
    AGREEMENT_POSITION_UPDATED = "AgreementPositionUpdated"
    AGREEMENT_FINALIZED = "AgreementFinalized"
    AGREEMENT_DISPUTED = "AgreementDisputed"
    FRAMEWORK_SETUP = "SetUp"
    RESOLUTION_SUBMITTED = "ResolutionSubmitted"
    RESOLUTION_APPEALED = "ResolutionAppealed"
    RESOLUTION_ENDORSED = "ResolutionEndorsed"
    RESOLUTION_EXECUTED = "ResolutionExecuted"


@dataclass(frozen=True)
class BlockContext:
    """
    Where an event was observed.

    address is the emitting contract (or the call target for SetUp).
    It is None for events from the standalone agreement contract, which
    has no framework row to reference.
    """
    block_number: int
    timestamp: int
    address: Optional[str] = None
    log_index: int = 0
    transaction_hash: Optional[str] = None


@dataclass(frozen=True)
class ChainEvent:
    KIND: ClassVar[EventKind]

    context: BlockContext

    @property
    def kind(self) -> EventKind:
        return self.KIND


# =============================================================================
# AGREEMENT FRAMEWORK EVENTS
# =============================================================================

@dataclass(frozen=True)
class AgreementCreated(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.AGREEMENT_CREATED

    id: str
    terms_hash: str
    criteria: int
    metadata_uri: str
    token: str


@dataclass(frozen=True)
class AgreementJoined(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.AGREEMENT_JOINED

    id: str
    party: str
    balance: int


@dataclass(frozen=True)
class AgreementPositionUpdated(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.AGREEMENT_POSITION_UPDATED

    id: str
    party: str
    balance: int
    status: int


@dataclass(frozen=True)
class AgreementFinalized(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.AGREEMENT_FINALIZED

    id: str


@dataclass(frozen=True)
class AgreementDisputed(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.AGREEMENT_DISPUTED

    id: str
    party: str


@dataclass(frozen=True)
class FrameworkSetup(ChainEvent):
    """
    SetUp call trace, not a log event.

    framework is the call target; deposit_token and deposit_arbitrator
    are carried for completeness but not projected.
    """
    KIND: ClassVar[EventKind] = EventKind.FRAMEWORK_SETUP

    framework: str
    arbitrator: str
    required_deposit: int
    deposit_token: Optional[str] = None
    deposit_arbitrator: Optional[str] = None


# =============================================================================
# ARBITRATOR EVENTS
# =============================================================================

@dataclass(frozen=True)
class ResolutionSubmitted(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.RESOLUTION_SUBMITTED

    framework: str
    dispute: str
    resolution: str
    settlement: str


@dataclass(frozen=True)
class ResolutionAppealed(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.RESOLUTION_APPEALED

    resolution: str
    settlement: str
    account: str


@dataclass(frozen=True)
class ResolutionEndorsed(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.RESOLUTION_ENDORSED

    resolution: str
    settlement: str


@dataclass(frozen=True)
class ResolutionExecuted(ChainEvent):
    KIND: ClassVar[EventKind] = EventKind.RESOLUTION_EXECUTED

    resolution: str
    settlement: str

