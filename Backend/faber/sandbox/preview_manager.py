# faber/sandbox/preview_manager.py
"""
Preview Manager

Tracks one PreviewEngine per project. Every engine shares the same
isolated runtime (one browser process) and its own telemetry log.
"""
from typing import Any, Callable, Dict, Optional

from faber.core.config import PreviewSettings, TelemetrySettings
from faber.core.logging import log
from faber.lib.monitoring import set_active_preview_engines
from faber.sandbox.engine import PreviewEngine, StatusCallback
from faber.sandbox.runtime import IsolatedRuntime
from faber.telemetry.aggregator import TelemetryLog


class PreviewManager:
    """Manages live preview engines keyed by project id"""

    def __init__(
        self,
        runtime: IsolatedRuntime,
        config: Optional[PreviewSettings] = None,
        telemetry_config: Optional[TelemetrySettings] = None,
        status_callback: Optional[Callable[[str], StatusCallback]] = None,
    ):
        self.runtime = runtime
        self.config = config or PreviewSettings()
        self.telemetry_config = telemetry_config or TelemetrySettings()
        self.status_callback = status_callback
        self.active_previews: Dict[str, PreviewEngine] = {}

    def engine_for(self, project_id: str) -> PreviewEngine:
        """Return the project's engine, creating it on first use."""
        engine = self.active_previews.get(project_id)
        if engine is None:
            engine = PreviewEngine(
                self.runtime,
                self.config,
                telemetry=TelemetryLog(self.telemetry_config.max_events),
                on_status=self.status_callback(project_id) if self.status_callback else None,
            )
            self.active_previews[project_id] = engine
            set_active_preview_engines(len(self.active_previews))
            log("PREVIEW", f"🆕 Preview engine created for {project_id}")
        return engine

    def get(self, project_id: str) -> Optional[PreviewEngine]:
        return self.active_previews.get(project_id)

    async def stop_preview(self, project_id: str) -> Dict[str, Any]:
        engine = self.active_previews.pop(project_id, None)
        if engine is None:
            return {"success": False, "error": f"Preview {project_id} not found"}
        set_active_preview_engines(len(self.active_previews))
        await engine.close()
        log("PREVIEW", f"🛑 Stopped preview for {project_id}")
        return {"success": True, "project_id": project_id}

    def list_previews(self) -> Dict[str, Any]:
        previews = {
            pid: engine.active.to_dict() if engine.active else None
            for pid, engine in self.active_previews.items()
        }
        return {"success": True, "previews": previews, "count": len(previews)}

    async def shutdown(self) -> None:
        for project_id in list(self.active_previews):
            await self.stop_preview(project_id)
        await self.runtime.shutdown()
