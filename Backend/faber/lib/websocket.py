# faber/lib/websocket.py
"""
Per-project WebSocket fan-out for generation progress and preview status.
"""
import asyncio
from typing import Any, Dict, List

from fastapi import WebSocket

from faber.core.logging import log
from faber.core.types import utc_now


class ConnectionManager:
    """
    Each project_id has its own list of sockets.
    Sends take a snapshot under the lock; dead sockets are dropped afterwards.
    """

    def __init__(self) -> None:
        self.active_connections: Dict[str, List[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, project_id: str) -> None:
        await websocket.accept()
        async with self._lock:
            self.active_connections.setdefault(project_id, []).append(websocket)
        log("WS", f"🔌 Client connected to {project_id}")

    async def disconnect(self, websocket: WebSocket, project_id: str) -> None:
        async with self._lock:
            connections = self.active_connections.get(project_id, [])
            if websocket in connections:
                connections.remove(websocket)
            if not connections and project_id in self.active_connections:
                del self.active_connections[project_id]

    def count(self, project_id: str) -> int:
        return len(self.active_connections.get(project_id, []))

    async def send_to_project(self, project_id: str, message: Dict[str, Any]) -> None:
        async with self._lock:
            connections = list(self.active_connections.get(project_id, []))

        disconnected: List[WebSocket] = []
        for ws in connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                log("WS", f"⚠️ Dropping socket for {project_id}: {e}")
                disconnected.append(ws)

        for ws in disconnected:
            await self.disconnect(ws, project_id)

    # ─────────────────────────────────────────────────────────
    # Typed broadcasts
    # ─────────────────────────────────────────────────────────

    async def broadcast_progress(self, project_id: str, step: str, percent: int, message: str = "") -> None:
        await self.send_to_project(project_id, {
            "type": "GENERATION_PROGRESS",
            "projectId": project_id,
            "step": step,
            "progress": percent,
            "message": message,
            "timestamp": utc_now(),
        })

    async def broadcast_preview_status(self, project_id: str, session: Dict[str, Any]) -> None:
        await self.send_to_project(project_id, {
            "type": "PREVIEW_STATUS",
            "projectId": project_id,
            "session": session,
            "timestamp": utc_now(),
        })
