import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once from the environment."""

    store_backend: str = "rest"
    store_url: Optional[str] = None
    store_key: Optional[str] = None
    store_timeout: float = 10.0
    local_content_dir: str = "locales"
    change_poll_seconds: int = 0
    admin_enabled: bool = False
    admin_token: Optional[str] = None


def load_settings() -> Settings:
    return Settings(
        store_backend=os.getenv("CONTENT_STORE_BACKEND", "rest").strip().lower(),
        store_url=os.getenv("CONTENT_STORE_URL") or None,
        store_key=os.getenv("CONTENT_STORE_KEY") or None,
        store_timeout=float(os.getenv("CONTENT_STORE_TIMEOUT", "10")),
        local_content_dir=os.getenv("LOCAL_CONTENT_DIR", "locales"),
        change_poll_seconds=max(0, int(os.getenv("CONTENT_CHANGE_POLL_SECONDS", "0"))),
        admin_enabled=_env_flag("ADMIN_ENABLED"),
        admin_token=os.getenv("ADMIN_TOKEN") or None,
    )
