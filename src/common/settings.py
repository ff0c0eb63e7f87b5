from __future__ import annotations
from typing import List, Optional
import os
from pydantic import BaseModel, Field

DEFAULT_API_BASE = "https://api.docuseal.com"


def _opt_int(name: str) -> Optional[int]:
    v = os.getenv(name)
    if v is None or not v.strip():
        return None
    return int(v)


class Settings(BaseModel):
    """
    Process-wide configuration, built once at startup and passed by reference.
    Nothing reads the environment after this object exists.
    """
    api_base: str = DEFAULT_API_BASE
    api_key: Optional[str] = None
    timeout: float = 30.0

    host: str = "0.0.0.0"
    port: int = 3001
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_body_bytes: int = 50 * 1024 * 1024

    rate_limit_config: str = "configs/rate_limits.yaml"
    rate_limit_window_ms: Optional[int] = None
    rate_limit_max_requests: Optional[int] = None

    @classmethod
    def from_env(cls) -> "Settings":
        key = (os.getenv("DOCUSEAL_API_KEY") or "").strip()
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        return cls(
            api_base=os.getenv("DOCUSEAL_API_BASE", DEFAULT_API_BASE),
            api_key=key or None,
            timeout=float(os.getenv("DOCUSEAL_TIMEOUT", "30")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV") or "development",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=origins or ["*"],
            max_body_bytes=_opt_int("MAX_BODY_BYTES") or 50 * 1024 * 1024,
            rate_limit_config=os.getenv("RATE_LIMIT_CONFIG", "configs/rate_limits.yaml"),
            rate_limit_window_ms=_opt_int("RATE_LIMIT_WINDOW_MS"),
            rate_limit_max_requests=_opt_int("RATE_LIMIT_MAX_REQUESTS"),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def is_development(self) -> bool:
        return self.environment.lower() == "development"
