# faber/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from faber.api.deps import get_container
from faber.container import ServiceContainer

router = APIRouter(tags=["Health"])


@router.get("/healthz")
async def healthz():
    """Simple health check."""
    return {"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/api/health")
async def api_health(container: ServiceContainer = Depends(get_container)):
    """API health check with live preview count."""
    return {
        "status": "healthy",
        "provider": container.settings.llm.default_provider,
        "activePreviews": len(container.previews.active_previews),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
