"""Runtime settings for the counter end-to-end suite."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8282
DEFAULT_HOST = "localhost"
# Raise this to slow down visually run tests.
DEFAULT_SLOW_MO_MS = 100
DEFAULT_SCREENSHOT_DIR = Path("screens")
DEFAULT_BROWSER = "chromium"

SHOW_BROWSER_ENV = "SHOW_BROWSER"
PORT_ENV = "COUNTER_E2E_PORT"
HOST_ENV = "COUNTER_E2E_HOST"
SITE_ROOT_ENV = "COUNTER_E2E_SITE_ROOT"
SLOW_MO_ENV = "COUNTER_E2E_SLOW_MO"
SCREENSHOT_DIR_ENV = "COUNTER_E2E_SCREENSHOT_DIR"
BROWSER_ENV = "COUNTER_E2E_BROWSER"


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Where the site is served and how the browser is launched."""

    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    site_root: Optional[Path] = None
    show_browser: bool = False
    slow_mo_ms: int = DEFAULT_SLOW_MO_MS
    screenshot_dir: Path = DEFAULT_SCREENSHOT_DIR
    browser_name: str = DEFAULT_BROWSER

    @property
    def test_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Any non-empty ``SHOW_BROWSER`` value switches to a visible, slowed-down browser.
        """
        if environ is None:
            environ = os.environ

        site_root = environ.get(SITE_ROOT_ENV)
        settings = cls(
            port=_int_from_env(environ, PORT_ENV, DEFAULT_PORT),
            host=environ.get(HOST_ENV) or DEFAULT_HOST,
            site_root=Path(site_root) if site_root else None,
            show_browser=bool(environ.get(SHOW_BROWSER_ENV)),
            slow_mo_ms=_int_from_env(environ, SLOW_MO_ENV, DEFAULT_SLOW_MO_MS),
            screenshot_dir=Path(environ.get(SCREENSHOT_DIR_ENV) or DEFAULT_SCREENSHOT_DIR),
            browser_name=environ.get(BROWSER_ENV) or DEFAULT_BROWSER,
        )
        logger.debug(f"Resolved {settings=}")
        return settings

    def browser_launch_args(self) -> dict[str, Any]:
        """Playwright launch keyword arguments; empty means the library defaults (headless)."""
        if not self.show_browser:
            return {}
        return {"headless": False, "slow_mo": self.slow_mo_ms}

    def screenshot_path(self, name: str) -> Path:
        return self.screenshot_dir / f"{name}.png"
