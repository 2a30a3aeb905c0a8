"""
Engine Orchestration Module

Unified entry point that wires configuration into the store, metadata
resolver, projectors and ingestion adapter, and exposes the read-only
query interface downstream consumers use.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. The store handle is injected, never global
3. Events are processed strictly one at a time, in the order given
4. Store failures propagate to the caller; nothing else does
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging
import os

from .contracts.base import ErrorCode, ProjectorError
from .contracts.entities import Entity, EntityKind
from .contracts.events import ChainEvent
from .ingestion import EventIngestionAdapter, EventJournal, decode_event
from .metadata import FetchResult, MetadataConfig, MetadataResolver, create_resolver
from .projection import AgreementProjector, ArbitrationProjector, ProjectionAudit, AuditEntry
from .projection.audit import DEFAULT_AUDIT_LIMIT
from .storage import EntityStore, EntityStoreConfig, create_store

logger = logging.getLogger(__name__)

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ProjectorConfig:
    """Unified configuration for the projector."""
    store: EntityStoreConfig = None
    metadata: MetadataConfig = None
    journal_path: Optional[str] = None
    log_level: str = "INFO"
    audit_limit: int = DEFAULT_AUDIT_LIMIT

    def __post_init__(self):
        self.store = self.store or EntityStoreConfig()
        self.metadata = self.metadata or MetadataConfig()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ProjectorConfig:
        """
        Build configuration from environment variables.

        PROJECTOR_STORE_BACKEND   memory | sqlite (sqlite when only DB_PATH is set)
        PROJECTOR_DB_PATH         sqlite database file
        PROJECTOR_METADATA_ENABLED  0/false/no/off disables enrichment
        PROJECTOR_IPFS_GATEWAY    gateway base URL
        PROJECTOR_FETCH_TIMEOUT   seconds
        PROJECTOR_JOURNAL_PATH    JSONL journal of processed events
        PROJECTOR_AUDIT_LIMIT     audit entries retained
        LOG_LEVEL
        """
        env = os.environ if environ is None else environ

        db_path = env.get("PROJECTOR_DB_PATH")
        backend_type = env.get("PROJECTOR_STORE_BACKEND", "sqlite" if db_path else "memory")

        defaults = MetadataConfig()
        metadata = MetadataConfig(
            enabled=env.get("PROJECTOR_METADATA_ENABLED", "1").strip().lower() not in _FALSE_VALUES,
            gateway_url=env.get("PROJECTOR_IPFS_GATEWAY", defaults.gateway_url),
            timeout_seconds=float(env.get("PROJECTOR_FETCH_TIMEOUT", defaults.timeout_seconds)),
        )

        return cls(
            store=EntityStoreConfig(backend_type=backend_type, database_path=db_path),
            metadata=metadata,
            journal_path=env.get("PROJECTOR_JOURNAL_PATH"),
            log_level=env.get("LOG_LEVEL", "INFO"),
            audit_limit=int(env.get("PROJECTOR_AUDIT_LIMIT", DEFAULT_AUDIT_LIMIT)),
        )


class ProjectorBackend:
    """
    Collateral agreement projector.

    LAYER FLOW:
    ===========
    1. Ingestion: record -> typed ChainEvent -> handler
    2. Projection: handler -> whole-row upserts (+ metadata lookup on create)
    3. Storage: one table per entity kind
    4. Query: read-only lookups and counts

    A custom store or resolver can be injected; otherwise both are
    built from config.
    """

    def __init__(
        self,
        config: Optional[ProjectorConfig] = None,
        store: Optional[EntityStore] = None,
        resolver: Optional[MetadataResolver] = None
    ):
        self._config = config or ProjectorConfig()
        self._store = store if store is not None else create_store(self._config.store)
        self._resolver = resolver if resolver is not None else create_resolver(self._config.metadata)
        self._audit = ProjectionAudit(max_entries=self._config.audit_limit)

        self._agreements = AgreementProjector(self._store, self._resolver, self._audit)
        self._arbitration = ArbitrationProjector(self._store, self._audit)
        self._adapter = EventIngestionAdapter(self._agreements, self._arbitration)

        self._journal = EventJournal(self._config.journal_path) if self._config.journal_path else None

    # =========================================================================
    # INGESTION INTERFACE
    # =========================================================================

    def process(self, event: ChainEvent) -> None:
        """Project one event, then journal it if journaling is enabled."""
        self._adapter.dispatch(event)
        if self._journal is not None:
            self._journal.append_event(event)

    def process_record(self, record: Mapping[str, Any]) -> ChainEvent:
        """Decode and project one raw record."""
        event = decode_event(record)
        self._adapter.dispatch(event)
        if self._journal is not None:
            self._journal.append(record)
        return event

    def process_all(self, events: Iterable[ChainEvent]) -> int:
        count = 0
        for event in events:
            self.process(event)
            count += 1
        return count

    def replay_journal(self, path: str, reset: bool = True) -> int:
        """
        Replay a recorded journal into the store.

        With reset, the store and audit trail are cleared first so the
        result depends only on the journal contents.
        """
        if reset:
            self._store.clear()
            self._audit.reset()

        count = 0
        try:
            for event in EventJournal(path).events():
                self._adapter.dispatch(event)
                count += 1
        except ProjectorError as e:
            logger.error("Replay of %s stopped after %d events: %s", path, count, e)
            raise

        logger.info("Replayed %d events from %s", count, path)
        return count

    # =========================================================================
    # QUERY INTERFACE (read-only)
    # =========================================================================

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        return self._store.load(kind, entity_id)

    def count(self, kind: EntityKind) -> int:
        return self._store.count(kind)

    def list(self, kind: EntityKind, limit: int = 100, offset: int = 0) -> List[Entity]:
        return self._store.list(kind, limit=limit, offset=offset)

    def counts(self) -> Dict[str, int]:
        return self._store.counts()

    def get_audit_log(self, code: Optional[ErrorCode] = None) -> List[AuditEntry]:
        return self._audit.entries(code=code)

    def failed_fetches(self) -> List[FetchResult]:
        if self._resolver is None:
            return []
        return self._resolver.fetcher.failed_results()

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def config(self) -> ProjectorConfig:
        return self._config

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def audit(self) -> ProjectionAudit:
        return self._audit

    @property
    def adapter(self) -> EventIngestionAdapter:
        return self._adapter


def create_backend(config: Optional[ProjectorConfig] = None) -> ProjectorBackend:
    """Create a backend from config, or from the environment when omitted."""
    return ProjectorBackend(config or ProjectorConfig.from_env())
