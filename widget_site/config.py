import os
from dataclasses import dataclass
from typing import Optional

from widget_site.errors import SiteConfigError


def _number(name, default, kind=float):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise SiteConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Static server
    HOST: str = "localhost"
    PORT: int = 5000

    # Readiness check, same knobs as `wait-on --delay 1000 --httpTimeout 30000`
    WAIT_DELAY: float = 1.0
    HTTP_TIMEOUT: float = 30.0
    POLL_INTERVAL: float = 0.25

    # Optional JSON file describing the dropdowns and rows
    SITE_CONFIG: Optional[str] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.HOST}:{self.PORT}"

    @classmethod
    def from_env(cls) -> "Settings":
        port = _number("WIDGET_SITE_PORT", cls.PORT, int)
        if not 0 <= port <= 65535:
            raise SiteConfigError(f"WIDGET_SITE_PORT out of range: {port}")
        return cls(
            HOST=os.environ.get("WIDGET_SITE_HOST") or cls.HOST,
            PORT=port,
            WAIT_DELAY=_number("WIDGET_SITE_DELAY", cls.WAIT_DELAY),
            HTTP_TIMEOUT=_number("WIDGET_SITE_HTTP_TIMEOUT", cls.HTTP_TIMEOUT),
            SITE_CONFIG=os.environ.get("WIDGET_SITE_CONFIG") or None,
        )


SETTINGS = Settings()
