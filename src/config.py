"""
Environment-driven settings for Vital Canvas.

Values are read from the process environment; entry points call
``load_dotenv()`` first so a local ``.env`` file is honoured.
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, Field


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8501",
]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings(BaseModel):
    """Runtime configuration shared by the API and the dashboard."""

    openai_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None

    match_model: str = "gpt-4o-mini"
    grouping_model: str = "gpt-4o-mini"
    medication_model: str = "gpt-4o-mini"
    criteria_model: str = "gpt-4"

    llm_timeout_seconds: float = Field(default=30.0, gt=0)
    llm_max_attempts: int = Field(default=1, ge=1, le=5)

    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None

    log_level: str = "INFO"
    log_file: Optional[str] = None

    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    unrecognized_criterion_policy: Literal["pass", "fail"] = "pass"

    @property
    def llm_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.getenv("CORS_ORIGINS")
        policy = os.getenv("UNRECOGNIZED_CRITERION_POLICY", "pass").strip().lower()

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or os.getenv("OPENROUTER_API_KEY"),
            llm_base_url=os.getenv("LLM_BASE_URL") or None,
            match_model=os.getenv("MATCH_MODEL", "gpt-4o-mini"),
            grouping_model=os.getenv("GROUPING_MODEL", "gpt-4o-mini"),
            medication_model=os.getenv("MEDICATION_MODEL", "gpt-4o-mini"),
            criteria_model=os.getenv("CRITERIA_MODEL", "gpt-4"),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", 30.0),
            llm_max_attempts=min(max(_env_int("LLM_MAX_ATTEMPTS", 1), 1), 5),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            cors_origins=(
                [origin.strip() for origin in origins.split(",") if origin.strip()]
                if origins
                else list(DEFAULT_CORS_ORIGINS)
            ),
            unrecognized_criterion_policy="fail" if policy == "fail" else "pass",
        )
