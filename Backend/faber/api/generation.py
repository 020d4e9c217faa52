# faber/api/generation.py
"""
Generation routes - run the escalation ladder, optionally straight into a preview.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from faber.api.deps import get_container
from faber.container import ServiceContainer
from faber.core.logging import log
from faber.generation.ladder import GenerationOptions

router = APIRouter(prefix="/api", tags=["Generation"])


class GenerateRequest(BaseModel):
    prompt: str = Field(min_length=1)
    projectId: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    complexity: Optional[str] = None
    style: Optional[str] = None
    context: Optional[Dict[str, Any]] = None
    preview: bool = False

    def options(self) -> GenerationOptions:
        return GenerationOptions(
            model=self.model,
            provider=self.provider,
            complexity=self.complexity,
            style=self.style,
            context=self.context,
        )


@router.post("/generate")
async def generate(data: GenerateRequest, container: ServiceContainer = Depends(get_container)):
    """
    Generate UI code for a prompt.

    With `preview=true` (requires projectId) the result is also rendered and
    sandbox failures are fed back for a bounded number of repair rounds.
    """
    if not data.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be blank")

    on_progress = container.progress_callback(data.projectId) if data.projectId else None
    log("GENERATE", f"📝 Generate request ({len(data.prompt)} chars, preview={data.preview})")

    if data.preview:
        if not data.projectId:
            raise HTTPException(status_code=400, detail="projectId is required when preview is requested")
        result = await container.studio.generate_and_preview(
            data.projectId, data.prompt, data.options(), on_progress
        )
        return result.to_dict()

    outcome = await container.controller.run(data.prompt, data.options(), on_progress)
    return outcome.to_dict()
