"""
Guarded setters for the two ordering-dependent field rules.

- set_once: first writer wins (Dispute.resolution)
- advance_only: a single forward transition from one exact state
  (Agreement Created -> Ongoing)

Everything else in the projectors is a plain overwrite.
"""

from __future__ import annotations
from typing import Any


def set_once(entity: Any, field_name: str, value: Any) -> bool:
    """Set field_name only while it is still None. Returns True if written."""
    if getattr(entity, field_name) is not None:
        return False
    setattr(entity, field_name, value)
    return True


def advance_only(entity: Any, field_name: str, from_value: Any, to_value: Any) -> bool:
    """Move field_name to to_value only when it currently equals from_value."""
    if getattr(entity, field_name) != from_value:
        return False
    setattr(entity, field_name, to_value)
    return True
