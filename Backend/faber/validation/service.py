# faber/validation/service.py
"""
Validation request/response boundary.

Request:  {files: [{path, content}], skipTypeCheck: bool}
Response: {success, errors: [...], fixes: [...], fixedFiles?: [...], score, suggestions}

Fixes are applied before validation, so the reported issues describe the
files the caller gets back.
"""
from typing import Any, Dict, Sequence

from faber.core.types import GeneratedFile
from faber.validation.code_validator import CodeValidator


def run_validation(
    validator: CodeValidator,
    files: Sequence[Dict[str, Any]],
    skip_type_check: bool = False,
) -> Dict[str, Any]:
    """Validate a raw file list and report fixes in the wire shape."""
    generated = [GeneratedFile.from_dict(f) for f in files]
    fixed, fixes = validator.auto_fix_with_report(generated)
    result = validator.validate(fixed, skip_type_check=skip_type_check)

    response: Dict[str, Any] = {
        "success": result.is_valid,
        "errors": [issue.to_dict() for issue in result.issues],
        "fixes": [fix.to_dict() for fix in fixes],
        "score": result.score,
        "suggestions": result.suggestions,
    }
    if fixes:
        response["fixedFiles"] = [f.to_dict() for f in fixed]
    return response

