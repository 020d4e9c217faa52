# faber/main.py
"""
Faber Studio Backend
"""
import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from starlette.middleware.cors import CORSMiddleware

# Rate limiting
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from faber import __version__
from faber.api.deps import get_container
from faber.core.config import settings
from faber.core.logging import log
from faber.lib.monitoring import register_monitoring

# Print environment status
print("🔑 Environment check:")
print(f"  OPENAI_API_KEY loaded: {bool(settings.llm.openai_api_key)}")
print(f"  Default provider: {settings.llm.default_provider}")
print(f"  Default model: {settings.llm.default_model}")
print(f"  Preview timeout: {settings.preview.timeout_ms}ms")


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    print("🚀 Faber Studio starting...")
    yield
    print("🔌 Shutting down...")
    container = getattr(app.state, "container", None)
    if container is not None:
        await container.shutdown()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Faber Studio",
    version=__version__,
    lifespan=lifespan,
)

# CORS: comma-separated CORS_ORIGINS, "*" by default
cors_origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]

if cors_origins == ["*"] and not settings.debug:
    print("⚠️ [CORS] Warning: Using allow_origins=['*'] - consider setting CORS_ORIGINS in production")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate Limiting - RATE_LIMIT env var, e.g. "50/minute"
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
print(f"🛡️ [SECURITY] Rate limiting enabled: {settings.rate_limit}")

# Prometheus metrics at /metrics
register_monitoring(app)


# ---------------------------------------------------------------------------
# WEBSOCKET
# ---------------------------------------------------------------------------

@app.websocket("/ws/{project_id}")
async def websocket_endpoint(websocket: WebSocket, project_id: str):
    manager = get_container(websocket).manager
    await manager.connect(websocket, project_id)
    try:
        while True:
            data = await websocket.receive_json()
            if data.get("type") == "PING":
                await websocket.send_json({"type": "PONG", "projectId": project_id})
    except WebSocketDisconnect:
        await manager.disconnect(websocket, project_id)
    except Exception as e:
        log("WS", f"❌ Socket error for {project_id}: {e}")
        await manager.disconnect(websocket, project_id)


# ---------------------------------------------------------------------------
# API ROUTES
# ---------------------------------------------------------------------------

from faber.api import health, validation, generation, preview  # noqa: E402

app.include_router(health.router)
app.include_router(validation.router)
app.include_router(generation.router)
app.include_router(preview.router)


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "faber.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
