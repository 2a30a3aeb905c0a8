"""
Projection Layer

RESPONSIBILITY: Deterministically fold one inbound event into entity rows
ALLOWED INPUTS: Typed ChainEvents, an injected EntityStore, an optional
                MetadataResolver
OUTPUTS: Whole-row upserts; AuditEntry records for dropped events

WHAT THIS LAYER MUST NOT DO:
============================
- Raise on unknown references (those events are dropped and audited)
- Reorder, batch or retry events
- Hold state between events outside the store
"""

from .audit import AuditEntry, ProjectionAudit
from .base import Projector
from .guards import set_once, advance_only
from .agreement import AgreementProjector, POSITION_STATUS_CODES, position_status_for
from .arbitration import ArbitrationProjector

__all__ = [
    'AuditEntry',
    'ProjectionAudit',
    'Projector',
    'set_once',
    'advance_only',
    'AgreementProjector',
    'ArbitrationProjector',
    'POSITION_STATUS_CODES',
    'position_status_for',
]
