# faber/core/logging.py
import sys
import os
from datetime import datetime
from typing import Any, List, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level.
# Everything else is gated behind FABER_DEBUG.

INFO_SCOPES = {
    "LADDER",      # Escalation decisions
    "GENERATE",    # Generator boundary
    "EXTRACT",     # Extraction outcome
    "VALIDATE",    # Validation verdict
    "PREVIEW",     # Session lifecycle
    "STUDIO",      # Feedback loop
    "LLM",         # Provider calls
}

DEBUG_SCOPES = {
    "SANDBOX",
    "PROTOCOL",
    "TELEMETRY",
    "ROUTE",
    "AUTOFIX",
    "WS",
    "MONITORING",
}

DEBUG_MODE = os.getenv("FABER_DEBUG", "false").lower() == "true"


def log(scope: str, message: str, data: Any = None, session_id: Optional[str] = None) -> None:
    """
    Unified logging function for Faber Studio.

    Only INFO_SCOPES are shown by default.
    Set FABER_DEBUG=true to see all scopes.
    """
    if not DEBUG_MODE and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if session_id:
        prefix += f" [{session_id[:8]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str, session_id: Optional[str] = None) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    if session_id:
        print(f"[{timestamp}] [{scope}] [{session_id[:8]}] {title}")
    else:
        print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()


def log_result(scope: str, accepted: bool, score: int, issues: List[str] = None, session_id: Optional[str] = None) -> None:
    """
    Log a validation verdict with its score.
    """
    if not DEBUG_MODE and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"
    if session_id:
        prefix += f" [{session_id[:8]}]"

    if accepted:
        print(f"{prefix} ✅ ACCEPTED - Score: {score}/100")
    else:
        print(f"{prefix} ⚠️ REJECTED - Score: {score}/100")
        if issues:
            print(f"{prefix} Issues found:")
            for i, issue in enumerate(issues[:5]):
                print(f"  {i+1}. {issue}")

    sys.stdout.flush()
