# faber/container.py
"""
Service wiring.

build_container() is the only place services are constructed. Each
service receives its settings group and collaborators explicitly, so
tests can swap in a fake generator or runtime.
"""
from dataclasses import dataclass
from typing import Any, Optional

from faber.core.config import Settings
from faber.core.config import settings as default_settings
from faber.generation.ladder import EscalationController
from faber.generation.progress import ProgressCallback
from faber.lib.websocket import ConnectionManager
from faber.llm.adapter import LLMGenerator
from faber.orchestration.studio import Studio
from faber.sandbox.engine import StatusCallback
from faber.sandbox.preview_manager import PreviewManager
from faber.sandbox.runtime import IsolatedRuntime, PlaywrightRuntime
from faber.sandbox.session import PreviewSession
from faber.validation.code_validator import CodeValidator


@dataclass
class ServiceContainer:
    settings: Settings
    validator: CodeValidator
    generator: Any
    controller: EscalationController
    runtime: IsolatedRuntime
    previews: PreviewManager
    studio: Studio
    manager: ConnectionManager

    def progress_callback(self, project_id: str) -> ProgressCallback:
        async def report(step: str, percent: int, message: str) -> None:
            await self.manager.broadcast_progress(project_id, step, percent, message)
        return report

    async def shutdown(self) -> None:
        await self.previews.shutdown()


def build_container(
    settings: Optional[Settings] = None,
    generator: Any = None,
    runtime: Optional[IsolatedRuntime] = None,
) -> ServiceContainer:
    settings = settings or default_settings
    manager = ConnectionManager()

    def status_callback(project_id: str) -> StatusCallback:
        async def report(session: PreviewSession) -> None:
            await manager.broadcast_preview_status(project_id, session.to_dict())
        return report

    validator = CodeValidator(settings.validation)
    generator = generator or LLMGenerator(settings.llm)
    controller = EscalationController(generator, validator, settings.generation)
    runtime = runtime or PlaywrightRuntime(settings.preview)
    previews = PreviewManager(runtime, settings.preview, settings.telemetry, status_callback)
    studio = Studio(controller, previews, settings.generation)

    return ServiceContainer(
        settings=settings,
        validator=validator,
        generator=generator,
        controller=controller,
        runtime=runtime,
        previews=previews,
        studio=studio,
        manager=manager,
    )
