# faber/api/preview.py
"""
Preview routes - sandboxed rendering of generated file sets.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from faber.api.deps import get_container
from faber.container import ServiceContainer
from faber.core.exceptions import SandboxError
from faber.core.types import GeneratedFile
from faber.sandbox.document import build_preview_document
from faber.telemetry.aggregator import describe_for_user

router = APIRouter(prefix="/api/preview", tags=["Preview"])


class FileModel(BaseModel):
    path: str
    content: str


class PreviewRequest(BaseModel):
    files: List[FileModel] = Field(min_length=1)
    version: Optional[int] = None


def _files(data: PreviewRequest) -> List[GeneratedFile]:
    return [GeneratedFile(path=f.path, content=f.content) for f in data.files]


def _session_response(session) -> dict:
    body = session.to_dict()
    if session.error_kind:
        body["hint"] = describe_for_user(session.error_kind)
        body["canRetry"] = True
    return body


@router.post("/document", response_class=HTMLResponse)
async def preview_document(data: PreviewRequest, container: ServiceContainer = Depends(get_container)):
    """The self-contained preview HTML for a file set."""
    return HTMLResponse(build_preview_document(_files(data), container.settings.preview))


@router.get("")
async def list_previews(container: ServiceContainer = Depends(get_container)):
    return container.previews.list_previews()


@router.post("/{project_id}")
async def run_preview(project_id: str, data: PreviewRequest, container: ServiceContainer = Depends(get_container)):
    """Render a new source version and wait for its terminal status."""
    engine = container.previews.engine_for(project_id)
    version = data.version if data.version is not None else container.studio.next_version(project_id)
    session = await engine.run(_files(data), version)
    return _session_response(session)


@router.post("/{project_id}/retry")
async def retry_preview(project_id: str, container: ServiceContainer = Depends(get_container)):
    """Re-run the current source in a fresh context."""
    engine = container.previews.get(project_id)
    if engine is None:
        raise HTTPException(status_code=404, detail=f"No preview for {project_id}")
    try:
        session = await engine.retry()
    except SandboxError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _session_response(await engine.wait(session))


@router.get("/{project_id}/timeline")
async def preview_timeline(
    project_id: str,
    limit: Optional[int] = None,
    container: ServiceContainer = Depends(get_container),
):
    """Bounded debug timeline of the project's preview telemetry."""
    engine = container.previews.get(project_id)
    if engine is None:
        raise HTTPException(status_code=404, detail=f"No preview for {project_id}")
    limit = limit or container.settings.telemetry.timeline_limit
    return {
        "projectId": project_id,
        "session": engine.active.to_dict() if engine.active else None,
        "timeline": engine.telemetry.timeline(limit),
        "blocking": [e.to_dict() for e in engine.telemetry.blocking_events()],
    }


@router.delete("/{project_id}")
async def stop_preview(project_id: str, container: ServiceContainer = Depends(get_container)):
    result = await container.previews.stop_preview(project_id)
    if not result["success"]:
        raise HTTPException(status_code=404, detail=result["error"])
    return result
