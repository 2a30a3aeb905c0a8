"""
Collateral Agreement Projector: Query API Server
================================================

Read-only API over the derived entity store.

Endpoints:
- GET /health                                  -> Status and per-kind counts
- GET /api/v1/entities/{kind}/count            -> Row count for one kind
- GET /api/v1/entities/{kind}?limit&offset     -> Paged rows ordered by id
- GET /api/v1/entities/{kind}/{entity_id}      -> One row, 404 when absent

Usage:
    uvicorn projector.api.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..contracts.entities import EntityKind
from ..engine import ProjectorBackend, ProjectorConfig
from ..logging_setup import configure_logging
from .mapper import map_entity_to_dto, map_entities_to_dto

logger = logging.getLogger(__name__)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    counts: Dict[str, int]


class CountResponse(BaseModel):
    kind: str
    count: int


class ListResponse(BaseModel):
    kind: str
    limit: int
    offset: int
    items: List[Dict[str, Any]]


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_backend(request: Request) -> ProjectorBackend:
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(status_code=503, detail="Backend not initialized")
    return backend


def resolve_kind(kind: str) -> EntityKind:
    try:
        return EntityKind.from_name(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown entity kind: {kind}") from None


# =============================================================================
# ENDPOINTS
# =============================================================================

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(backend: ProjectorBackend = Depends(get_backend)):
    """System status."""
    return HealthResponse(status="online", counts=backend.counts())


@router.get("/api/v1/entities/{kind}/count", response_model=CountResponse)
async def count_entities(kind: str, backend: ProjectorBackend = Depends(get_backend)):
    entity_kind = resolve_kind(kind)
    return CountResponse(kind=entity_kind.value, count=backend.count(entity_kind))


@router.get("/api/v1/entities/{kind}", response_model=ListResponse)
async def list_entities(
    kind: str,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    backend: ProjectorBackend = Depends(get_backend)
):
    """Rows of one kind, ordered by id."""
    entity_kind = resolve_kind(kind)
    rows = backend.list(entity_kind, limit=limit, offset=offset)
    return ListResponse(
        kind=entity_kind.value,
        limit=limit,
        offset=offset,
        items=map_entities_to_dto(rows),
    )


@router.get("/api/v1/entities/{kind}/{entity_id}")
async def get_entity(kind: str, entity_id: str, backend: ProjectorBackend = Depends(get_backend)):
    entity_kind = resolve_kind(kind)
    # Ids are stored lowercase
    entity = backend.get(entity_kind, entity_id.lower())
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{entity_kind.value} {entity_id} not found")
    return map_entity_to_dto(entity)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(backend: Optional[ProjectorBackend] = None) -> FastAPI:
    """
    Build the API application.

    When no backend is given, one is created at startup from
    ProjectorConfig.from_env().
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.backend is None:
            config = ProjectorConfig.from_env()
            configure_logging(config.log_level)
            logger.info("Initializing projector backend (store=%s)", config.store.backend_type)
            try:
                app.state.backend = ProjectorBackend(config)
            except (ValueError, OSError) as e:
                logger.error("Failed to initialize backend: %s", e)
                raise
            if config.store.backend_type == "memory":
                logger.warning(
                    "Serving an in-memory store that nothing ingests into; "
                    "set PROJECTOR_DB_PATH to query a shared sqlite store"
                )
        yield
        logger.info("Shutting down projector backend")

    app = FastAPI(
        title="Collateral Agreement Projector API",
        version="0.1.0",
        description="Read-only view over projected agreement entities",
        lifespan=lifespan
    )
    app.state.backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
