"""Configuration loader for uireplay using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags (where applicable)
  2. Environment variables (UIREPLAY_* with __ for nesting)
  3. settings.local.toml
  4. settings.<env>.toml
  5. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("UIREPLAY_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "UIREPLAY_ENV"
DEFAULT_ENV = "local"

_BROWSER_ALIASES = {
    "chrome": "chromium",
    "edge": "chromium",
    "msedge": "chromium",
    "ff": "firefox",
    "safari": "webkit",
}
_SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class BrowserSettings(BaseSettings):
    """Browser launch settings for the replay session."""

    model_config = SettingsConfigDict(env_prefix="UIREPLAY_BROWSER__")

    browser_type: str = "chromium"
    executable_path: str = ""
    proxy_host: str = ""
    proxy_port: int = Field(default=0, ge=0, le=65535)
    headless: bool = True
    navigation_timeout_ms: int = 30_000

    @field_validator("browser_type")
    @classmethod
    def normalize_browser_type(cls, v: str) -> str:
        """Map common browser names onto Playwright engine names."""
        name = v.strip().lower()
        name = _BROWSER_ALIASES.get(name, name)
        if name not in _SUPPORTED_BROWSERS:
            raise ValueError(f"Unsupported browser type {v!r}; expected one of {_SUPPORTED_BROWSERS}")
        return name


class PlaybackSettings(BaseSettings):
    """Timing and failure policy for the playback loop."""

    model_config = SettingsConfigDict(env_prefix="UIREPLAY_PLAYBACK__")

    async_requests_timeout_sec: int = Field(default=60, ge=0)
    ui_check_interval_ms: int = Field(default=500, ge=1)
    ui_shown_timeout_sec: int = Field(default=10, ge=0)
    use_random_chars: bool = False
    close_sessions_on_error: bool = True
    form_or_dialog_xpath: str = ""


class ScreenshotSettings(BaseSettings):
    """Per-step screenshot capture."""

    model_config = SettingsConfigDict(env_prefix="UIREPLAY_SCREENSHOTS__")

    enabled: bool = False
    directory: str = "data/screenshots"


class ScriptsSettings(BaseSettings):
    """Hook script identifiers. Empty means the built-in default behaviour."""

    model_config = SettingsConfigDict(env_prefix="UIREPLAY_SCRIPTS__")

    url_replacement: str = ""
    templating: str = ""
    duplicate_handler: str = ""
    is_async_requests_completed: str = ""
    is_browser_have_error: str = ""
    is_select_element: str = ""
    should_skip_keyboard: str = ""
    wait_after_event: str = ""
    step_pre_post: str = ""
    script_event_handler: str = ""
    element_lookup: str = ""
    is_ui_shown: str = ""


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root uireplay settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="UIREPLAY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)
    debug: bool = False
    log_level: str = "INFO"

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    screenshots: ScreenshotSettings = Field(default_factory=ScreenshotSettings)
    scripts: ScriptsSettings = Field(default_factory=ScriptsSettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_files(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files before env var overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Normalize relative paths against project_root."""
        if not Path(self.screenshots.directory).is_absolute():
            self.screenshots.directory = str(self.project_root / self.screenshots.directory)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
