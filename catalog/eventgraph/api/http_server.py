"""
HTTP API for eventgraph.

Read-only FastAPI application exposing:
- Per-entity graphs (nodes/edges with layout positions)
- Enriched collection listings
- Broken reference diagnostics
- The llms.txt text export

Invariants:
    - A missing focal record is an empty graph, not an error
    - Unknown graph kinds and collections are 404s
    - Graph responses are never cached; collection listings use the
      enrichment cache
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from .._version import __version__
from ..config import Settings
from ..content.base import ContentSource, create_content_source
from ..enrich.pipeline import CATALOG_TYPES, EnrichmentPipeline, validate_catalog
from ..errors import UnknownCollectionError, UnknownGraphKindError
from ..export.llms import build_llms_txt
from ..graph.service import GraphService
from ..model.types import to_collection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["eventgraph"])


# --- Response Models ---


class GraphResponse(BaseModel):
    """Nodes and edges around one record."""

    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]


class CollectionResponse(BaseModel):
    """Listing of one collection."""

    collection: str
    all_versions: bool
    items: list[dict[str, Any]]
    total: int


class DiagnosticsResponse(BaseModel):
    """Broken references and other resolution problems."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    broken_references: int = 0


# --- Dependencies ---


def get_source(request: Request) -> ContentSource:
    return request.app.state.source


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_graph_service(request: Request) -> GraphService:
    return request.app.state.graphs


def get_pipeline(request: Request) -> EnrichmentPipeline:
    return request.app.state.pipeline


# --- Routes ---


@router.get("/graphs/{kind}/{entity_id}/{version}", response_model=GraphResponse)
async def get_graph(
    kind: str,
    entity_id: str,
    version: str,
    mode: str = Query("simple", pattern="^(simple|full)$"),
    graphs: GraphService = Depends(get_graph_service),
) -> GraphResponse:
    """Graph around one record; version may be "latest".

    An unknown record yields an empty graph so the UI renders an empty canvas.
    """
    try:
        graph = await graphs.build(kind, entity_id, version, mode=mode)
    except UnknownGraphKindError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return GraphResponse(**graph.to_dict())


@router.get("/collections/{name}", response_model=CollectionResponse)
async def get_collection(
    name: str,
    all_versions: bool = Query(True, description="Include every version, not just the latest"),
    source: ContentSource = Depends(get_source),
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> CollectionResponse:
    try:
        collection = to_collection(name)
    except UnknownCollectionError as e:
        raise HTTPException(status_code=404, detail=e.message) from e

    if collection in CATALOG_TYPES:
        items = [item.to_dict() for item in await pipeline.enrich(collection, all_versions)]
    else:
        records = [record for record in await source.get_collection(collection) if not record.hidden]
        items = [record.model_dump(by_alias=True, mode="json") for record in records]

    return CollectionResponse(collection=collection.value, all_versions=all_versions, items=items, total=len(items))


@router.get("/diagnostics", response_model=DiagnosticsResponse)
async def get_diagnostics(
    source: ContentSource = Depends(get_source),
    settings: Settings = Depends(get_settings),
) -> DiagnosticsResponse:
    diagnostics = await validate_catalog(source, settings)
    return DiagnosticsResponse(
        items=diagnostics.to_list(), broken_references=len(diagnostics.broken_references)
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app.state.settings.log_config()
    logger.info("eventgraph HTTP API starting", extra={"version": __version__})
    yield
    logger.info("eventgraph HTTP API stopped")


def create_app(settings: Optional[Settings] = None, source: Optional[ContentSource] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration (default: loaded from environment)
        source: Content source (default: directory source at settings.content_dir)
    """
    settings = settings or Settings()
    source = source or create_content_source(settings)

    app = FastAPI(
        title="eventgraph",
        description="Relationship graphs and enriched collections for an event-driven architecture catalog.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.source = source
    app.state.pipeline = EnrichmentPipeline(source, settings=settings)
    app.state.graphs = GraphService(source, settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "eventgraph", "version": __version__}

    @app.get("/llms.txt", response_class=PlainTextResponse)
    async def llms_txt():
        return PlainTextResponse(await build_llms_txt(source, settings))

    return app
