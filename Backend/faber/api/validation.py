# faber/api/validation.py
"""
Code validation route.
"""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from faber.api.deps import get_container
from faber.container import ServiceContainer
from faber.validation.service import run_validation

router = APIRouter(prefix="/api", tags=["Validation"])


class FileModel(BaseModel):
    path: str
    content: str


class ValidateRequest(BaseModel):
    files: List[FileModel] = Field(default_factory=list)
    skipTypeCheck: bool = False


@router.post("/validate-code")
async def validate_code(data: ValidateRequest, container: ServiceContainer = Depends(get_container)):
    """Auto-fix then validate a file set."""
    files = [f.model_dump() for f in data.files]
    return run_validation(container.validator, files, skip_type_check=data.skipTypeCheck)
