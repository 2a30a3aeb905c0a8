"""
Ingestion Layer

RESPONSIBILITY: Decode inbound records and route them to projectors
ALLOWED INPUTS: JSON event records, typed ChainEvents
OUTPUTS: Handler calls on the projection layer

WHAT THIS LAYER MUST NOT DO:
============================
- Hold or interpret entity state
- Retry, reorder, batch or deduplicate events
"""

from .adapter import EventIngestionAdapter
from .decoder import decode_event, encode_event
from .journal import EventJournal

__all__ = [
    'EventIngestionAdapter',
    'decode_event',
    'encode_event',
    'EventJournal',
]
