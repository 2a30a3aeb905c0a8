"""
API Mapper
==========

Transforms stored entity rows into JSON-safe DTOs.

Token amounts and criteria are uint256 on chain and routinely exceed
what JavaScript clients can hold in a double, so every integer field is
rendered as a decimal string.
"""
from typing import Any, Dict, List

from ..contracts.entities import Entity


def _render(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


def map_entity_to_dto(entity: Entity) -> Dict[str, Any]:
    return {name: _render(value) for name, value in entity.to_dict().items()}


def map_entities_to_dto(entities: List[Entity]) -> List[Dict[str, Any]]:
    return [map_entity_to_dto(e) for e in entities]
