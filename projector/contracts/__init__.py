"""
Contracts Module

Explicit data types shared between layers: inbound chain events,
derived entities, and error states. No layer imports another layer's
implementation; they meet only here.

DESIGN PRINCIPLES:
==================
1. Inbound events are immutable (frozen dataclasses)
2. Entities are plain mutable rows, always written back whole
3. Errors are data; exceptions only for failures the host must see
4. All identifiers are normalized lowercase 0x-hex strings
"""

from .base import (
    Error,
    ErrorCode,
    ProjectorError,
    EntityStoreError,
    MalformedEventError,
    UnsupportedEventError,
    to_hex,
    to_address,
    is_address,
    position_id,
    parse_uint,
)
from .entities import (
    EntityKind,
    Entity,
    AgreementFramework,
    Agreement,
    AgreementPosition,
    Dispute,
    Settlement,
    AgreementStatus,
    PositionStatus,
    SettlementStatus,
    DEFAULT_AGREEMENT_TITLE,
)
from .events import (
    EventKind,
    BlockContext,
    ChainEvent,
    AgreementCreated,
    AgreementJoined,
    AgreementPositionUpdated,
    AgreementFinalized,
    AgreementDisputed,
    FrameworkSetup,
    ResolutionSubmitted,
    ResolutionAppealed,
    ResolutionEndorsed,
    ResolutionExecuted,
)

__all__ = [
    'Error',
    'ErrorCode',
    'ProjectorError',
    'EntityStoreError',
    'MalformedEventError',
    'UnsupportedEventError',
    'to_hex',
    'to_address',
    'is_address',
    'position_id',
    'parse_uint',
    'EntityKind',
    'Entity',
    'AgreementFramework',
    'Agreement',
    'AgreementPosition',
    'Dispute',
    'Settlement',
    'AgreementStatus',
    'PositionStatus',
    'SettlementStatus',
    'DEFAULT_AGREEMENT_TITLE',
    'EventKind',
    'BlockContext',
    'ChainEvent',
    'AgreementCreated',
    'AgreementJoined',
    'AgreementPositionUpdated',
    'AgreementFinalized',
    'AgreementDisputed',
    'FrameworkSetup',
    'ResolutionSubmitted',
    'ResolutionAppealed',
    'ResolutionEndorsed',
    'ResolutionExecuted',
]
