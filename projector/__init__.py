"""
Collateral Agreement Projector

Folds on-chain events emitted by collateral agreement contracts into a
queryable entity store.

LAYERS:
=======
contracts   Event, entity and error types shared by every layer
ingestion   Record decoding, journal, dispatch to handlers
projection  Per-event state transitions over the store
metadata    Off-chain metadata fetch and parse
storage     Entity tables (memory, sqlite)
api         Read-only HTTP query surface
"""

from .engine import ProjectorBackend, ProjectorConfig, create_backend
from .logging_setup import configure_logging

__version__ = "0.1.0"

__all__ = [
    'ProjectorBackend',
    'ProjectorConfig',
    'create_backend',
    'configure_logging',
]
