from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEVELOPMENT = "development"
PRODUCTION = "production"

DEFAULT_SESSION_KEY = "vscode-blog-tabs"
DEFAULT_MANIFEST_PATH = "/data/pageconfig.json"
DEFAULT_REVALIDATE_SECONDS = 5.0
DEFAULT_FETCH_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration resolved from the environment."""

    runtime_mode: str = PRODUCTION
    site_url: str = "http://localhost:3000"
    site_root: Path | None = None
    manifest_path: str = DEFAULT_MANIFEST_PATH
    session_root: Path = field(default_factory=lambda: _default_session_root())
    session_key: str = DEFAULT_SESSION_KEY
    revalidate_seconds: float = DEFAULT_REVALIDATE_SECONDS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")

    @property
    def is_development(self) -> bool:
        return self.runtime_mode == DEVELOPMENT


def _default_session_root() -> Path:
    return Path(__file__).resolve().parents[2] / "sessions"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def load_settings() -> Settings:
    mode = (os.getenv("BLOG_RUNTIME_MODE") or PRODUCTION).strip().lower()
    if mode not in {DEVELOPMENT, PRODUCTION}:
        mode = PRODUCTION

    site_root_env = os.getenv("BLOG_SITE_ROOT")
    session_root_env = os.getenv("BLOG_SESSION_ROOT")

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = tuple(origin.strip() for origin in origins_env.split(",") if origin.strip())

    defaults = Settings()
    return Settings(
        runtime_mode=mode,
        site_url=os.getenv("BLOG_SITE_URL") or defaults.site_url,
        site_root=Path(site_root_env).expanduser().resolve() if site_root_env else None,
        manifest_path=os.getenv("BLOG_MANIFEST_PATH") or DEFAULT_MANIFEST_PATH,
        session_root=Path(session_root_env).expanduser().resolve() if session_root_env else defaults.session_root,
        session_key=os.getenv("BLOG_SESSION_KEY") or DEFAULT_SESSION_KEY,
        revalidate_seconds=_float_env("BLOG_MANIFEST_REVALIDATE_SECONDS", DEFAULT_REVALIDATE_SECONDS),
        fetch_timeout=_float_env("BLOG_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
        log_level=os.getenv("BLOG_LOG_LEVEL") or "INFO",
        cors_origins=origins or defaults.cors_origins,
    )
