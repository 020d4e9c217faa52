# faber/orchestration/studio.py
"""
Studio - generation and preview wired into one feedback loop.

    prompt -> ladder -> preview session
                 ^            |
                 +-- repair --+   (sandbox error, bounded rounds)

Every round is a fresh ladder run and a fresh preview version; nothing
from a failed session is reused except its error text.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from faber.core.config import GenerationSettings
from faber.core.logging import log, log_section
from faber.core.types import GenerationOutcome, SessionStatus
from faber.generation.ladder import EscalationController, GenerationOptions
from faber.generation.progress import ProgressCallback
from faber.generation.prompts import build_repair_prompt
from faber.sandbox.preview_manager import PreviewManager
from faber.sandbox.session import PreviewSession


@dataclass
class StudioResult:
    outcome: GenerationOutcome
    session: PreviewSession
    feedback_rounds: int = 0
    failures: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.outcome.to_dict(),
            "preview": self.session.to_dict(),
            "feedbackRounds": self.feedback_rounds,
            "failures": list(self.failures),
        }


class Studio:
    def __init__(
        self,
        controller: EscalationController,
        previews: PreviewManager,
        config: Optional[GenerationSettings] = None,
    ):
        self.controller = controller
        self.previews = previews
        self.config = config or GenerationSettings()

    def next_version(self, project_id: str) -> int:
        engine = self.previews.get(project_id)
        if engine is None or engine.active is None:
            return 1
        return engine.active.version + 1

    async def generate_and_preview(
        self,
        project_id: str,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> StudioResult:
        """
        Generate, preview, and on a sandbox failure feed the error back
        as a repair prompt, up to `max_feedback_rounds` times.
        """
        log_section("STUDIO", f"Project {project_id}")
        engine = self.previews.engine_for(project_id)

        outcome = await self.controller.run(prompt, options, on_progress, engine.telemetry)
        session = await engine.run(outcome.files, self.next_version(project_id))

        rounds = 0
        failures: List[Dict[str, Any]] = []
        while (
            session.status == SessionStatus.ERROR
            and not session.superseded
            and rounds < self.config.max_feedback_rounds
        ):
            rounds += 1
            failures.append({"version": session.version, "kind": session.error_kind, "error": session.error})
            log("STUDIO", f"🔁 Feedback round {rounds}: {session.error_kind} - {session.error}")
            engine.telemetry.info(
                f"Regenerating after preview {session.error_kind} error",
                {"round": rounds, "version": session.version},
                source="studio",
            )

            repair_prompt = build_repair_prompt(prompt, session.error, session.error_kind)
            outcome = await self.controller.run(repair_prompt, options, on_progress, engine.telemetry)
            session = await engine.run(outcome.files, self.next_version(project_id))

        log("STUDIO", f"🏁 Preview {session.status.value} after {rounds} feedback round(s)")
        return StudioResult(outcome, session, rounds, failures)
