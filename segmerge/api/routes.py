"""Extraction, merge and service endpoints."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from segmerge import service
from segmerge.api.deps import ConfigDep, RegistryDep, require_token
from segmerge.api.schemas import ExtractRequest, HealthStatus, MergeRequest, ServiceInfo
from segmerge.models.result import ExtractResult, MergeResult

router = APIRouter()


@router.get("/", response_model=ServiceInfo)
def service_info(config: ConfigDep) -> ServiceInfo:
    """Return basic service information."""
    return ServiceInfo(
        name=config.app.name,
        version=config.app.version,
        description=config.app.description,
    )


@router.get("/healthz", response_model=HealthStatus)
def health_check(request: Request, config: ConfigDep) -> HealthStatus:
    """Liveness probe."""
    return HealthStatus(
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=config.app.version,
    )


@router.post("/api/extract", response_model=ExtractResult, tags=["segments"])
def extract_segments(body: ExtractRequest, registry: RegistryDep) -> ExtractResult:
    """Extract translatable segments, keeping inline markup in their text."""
    return service.extract(body.html, body.options, registry=registry)


@router.post(
    "/api/merge",
    response_model=MergeResult,
    tags=["segments"],
    dependencies=[Depends(require_token)],
)
def merge_translations(body: MergeRequest, config: ConfigDep) -> MergeResult:
    """Write translated segments back into the original HTML."""
    return service.merge(
        body.html,
        body.translations,
        body.options,
        merge_config=config.merge,
    )
