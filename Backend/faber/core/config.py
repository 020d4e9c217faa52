# faber/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


DEFAULT_ALLOWED_IMPORTS: Tuple[str, ...] = (
    "react",
    "react-dom",
    "react-router-dom",
    "zustand",
    "react-hook-form",
    "zod",
    "@hookform/resolvers",
    "framer-motion",
    "lucide-react",
    "@radix-ui/",
    "@mui/",
    "@mantine/",
    "@chakra-ui/",
    "@headlessui/react",
    "tailwindcss",
    "class-variance-authority",
    "tailwind-merge",
    "clsx",
    "date-fns",
    "uuid",
    "@/",
)

# Points subtracted from 100 per issue code
DEFAULT_ISSUE_WEIGHTS: Dict[str, int] = {
    "PLACEHOLDER_CODE": 30,
    "DANGEROUS_CODE": 25,
    "MISSING_ENTRY": 25,
    "MISSING_EXPORT": 25,
    "MISSING_RETURN": 25,
    "UNBALANCED_BRACES": 25,
    "UNBALANCED_PARENS": 25,
    "NO_FILES": 100,
    "DISALLOWED_IMPORT": 20,
    "NETWORK_ACCESS": 5,
    "MISSING_HOOK_IMPORT": 5,
    "MISSING_ALT": 4,
    "MISSING_LABEL": 4,
    "NON_SEMANTIC_INTERACTIVE": 4,
    "HARDCODED_COLOR": 3,
    "INLINE_STYLE": 3,
    "ANY_TYPE": 2,
}


@dataclass
class LLMSettings:
    """LLM provider configuration."""
    default_provider: str = field(default_factory=lambda: os.getenv("DEFAULT_LLM_PROVIDER", "openai"))
    default_model: str = field(default_factory=lambda: os.getenv("DEFAULT_LLM_MODEL", "gpt-4o-mini"))
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    ollama_base_url: str = field(default_factory=lambda: os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"))
    request_timeout_s: int = field(default_factory=lambda: int(os.getenv("LLM_REQUEST_TIMEOUT", "120")))


@dataclass
class GenerationSettings:
    """Escalation ladder configuration."""
    primary_temperature: float = 0.3
    primary_max_tokens: int = 4000
    retry_temperature: float = 0.7
    retry_max_tokens: int = 2000
    # Caller-side budget for one generator call
    call_timeout_s: float = field(default_factory=lambda: float(os.getenv("GENERATION_CALL_TIMEOUT", "90")))
    # Valid results scoring below this escalate to the next strategy
    acceptance_score: int = field(default_factory=lambda: int(os.getenv("ACCEPTANCE_SCORE", "60")))
    validate_results: bool = field(default_factory=lambda: _env_bool("VALIDATE_RESULTS", "true"))
    fallback_score: int = 75
    # Nominal scores reported when validation is disabled
    primary_score: int = 90
    retry_score: int = 85
    max_feedback_rounds: int = field(default_factory=lambda: int(os.getenv("MAX_FEEDBACK_ROUNDS", "1")))


@dataclass
class ValidationSettings:
    """Import allowlist and scoring weights."""
    allowed_imports: Tuple[str, ...] = DEFAULT_ALLOWED_IMPORTS
    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_ISSUE_WEIGHTS))
    default_weight: int = 5


@dataclass
class PreviewSettings:
    """Sandboxed preview configuration."""
    timeout_ms: int = field(default_factory=lambda: int(os.getenv("PREVIEW_TIMEOUT_MS", "15000")))
    headless: bool = field(default_factory=lambda: _env_bool("PREVIEW_HEADLESS", "true"))
    react_url: str = "https://unpkg.com/react@18/umd/react.development.js"
    react_dom_url: str = "https://unpkg.com/react-dom@18/umd/react-dom.development.js"
    babel_url: str = "https://unpkg.com/@babel/standalone/babel.min.js"
    tailwind_url: str = "https://cdn.tailwindcss.com"
    # Only subresources from these hosts may load inside the sandbox
    allowed_hosts: Tuple[str, ...] = ("unpkg.com", "cdn.tailwindcss.com")


@dataclass
class TelemetrySettings:
    """Telemetry log bounds."""
    max_events: int = field(default_factory=lambda: int(os.getenv("TELEMETRY_MAX_EVENTS", "200")))
    timeline_limit: int = 50


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    generation: GenerationSettings = field(default_factory=GenerationSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    preview: PreviewSettings = field(default_factory=PreviewSettings)
    telemetry: TelemetrySettings = field(default_factory=TelemetrySettings)
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 8000)))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    cors_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))
    rate_limit: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "100/minute"))


settings = Settings()
