"""
Entity Contracts
================

The derived, queryable rows the projectors maintain.

Unlike the inbound event contracts these are MUTABLE: a handler loads
a full row, mutates it in place, and writes it back through the store.
No partial-field updates exist anywhere in the system.

Every entity serializes to a plain JSON-compatible dict (to_dict) and
back (from_dict). Integers are kept as Python ints so arbitrary
precision survives a round trip through JSON.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Optional, Type


# =============================================================================
# ENTITY KINDS AND STATUSES
# =============================================================================

class EntityKind(Enum):
    """One store table per kind. Values double as table and API names."""
    AGREEMENT_FRAMEWORK = "AgreementFramework"
    AGREEMENT = "Agreement"
    AGREEMENT_POSITION = "AgreementPosition"
    DISPUTE = "Dispute"
    SETTLEMENT = "Settlement"

    @classmethod
    def from_name(cls, name: str) -> EntityKind:
        """Resolve either the enum value ("Agreement") or name ("agreement")."""
        for kind in cls:
            if name == kind.value or name.upper() == kind.name:
                return kind
        raise ValueError(f"Unknown entity kind: {name}")


class AgreementStatus(Enum):
    CREATED = "Created"
    ONGOING = "Ongoing"
    FINALIZED = "Finalized"
    DISPUTED = "Disputed"


class PositionStatus(Enum):
    PENDING = "Pending"
    JOINED = "Joined"
    FINALIZED = "Finalized"
    WITHDRAWN = "Withdrawn"
    DISPUTED = "Disputed"


class SettlementStatus(Enum):
    SUBMITTED = "Submitted"
    APPEALED = "Appealed"
    ENDORSED = "Endorsed"
    EXECUTED = "Executed"


DEFAULT_AGREEMENT_TITLE = "Agreement"


# =============================================================================
# ENTITY BASE
# =============================================================================

class Entity:
    """
    Shared serialization for entity dataclasses.

    Enum-typed fields are stored by value; everything else is stored as-is.
    """
    KIND: ClassVar[EntityKind]
    id: str

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> Entity:
        kwargs = dict(data)
        for name, enum_type in cls._enum_fields().items():
            if kwargs.get(name) is not None:
                kwargs[name] = enum_type(kwargs[name])
        return cls(**kwargs)

    @classmethod
    def _enum_fields(cls) -> Dict[str, Type[Enum]]:
        return {}


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass
class AgreementFramework(Entity):
    """One row per deployed framework contract, keyed by its address."""
    KIND: ClassVar[EntityKind] = EntityKind.AGREEMENT_FRAMEWORK

    id: str
    arbitrator: Optional[str] = None
    required_deposit: int = 0


@dataclass
class Agreement(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.AGREEMENT

    id: str
    terms_hash: str
    criteria: int
    metadata_uri: str
    token: str
    status: AgreementStatus
    created_at: int
    title: str = DEFAULT_AGREEMENT_TITLE
    # None in the standalone-contract variant
    framework: Optional[str] = None

    @classmethod
    def _enum_fields(cls) -> Dict[str, Type[Enum]]:
        return {"status": AgreementStatus}


@dataclass
class AgreementPosition(Entity):
    """
    One party's stake in an agreement.

    id is the agreement id concatenated with the party address, so a
    party can hold at most one position per agreement.
    """
    KIND: ClassVar[EntityKind] = EntityKind.AGREEMENT_POSITION

    id: str
    agreement: str
    party: str
    status: PositionStatus
    required_collateral: int = 0
    collateral: int = 0
    deposit: int = 0

    @classmethod
    def _enum_fields(cls) -> Dict[str, Type[Enum]]:
        return {"status": PositionStatus}


@dataclass
class Dispute(Entity):
    """Shares its id with the disputed agreement."""
    KIND: ClassVar[EntityKind] = EntityKind.DISPUTE

    id: str
    created_at: int
    agreement: Optional[str] = None
    resolution: Optional[str] = None
    settlement: Optional[str] = None


@dataclass
class Settlement(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.SETTLEMENT

    id: str
    dispute: str
    status: SettlementStatus
    submitted_at: int

    @classmethod
    def _enum_fields(cls) -> Dict[str, Type[Enum]]:
        return {"status": SettlementStatus}


ENTITY_TYPES: Dict[EntityKind, Type[Entity]] = {
    EntityKind.AGREEMENT_FRAMEWORK: AgreementFramework,
    EntityKind.AGREEMENT: Agreement,
    EntityKind.AGREEMENT_POSITION: AgreementPosition,
    EntityKind.DISPUTE: Dispute,
    EntityKind.SETTLEMENT: Settlement,
}


def entity_from_dict(kind: EntityKind, data: Dict[str, object]) -> Entity:
    return ENTITY_TYPES[kind].from_dict(data)
