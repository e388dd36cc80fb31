"""Unit tests for uireplay settings.

Covers default loading, env var overrides, the ci profile, path
resolution, and validation of the browser section.
"""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError


class TestSettings:
    """Core settings loading and override mechanics."""

    def test_default_settings_load(self):
        """Settings should load without any env overrides."""
        from uireplay.settings import get_settings

        s = get_settings()
        assert s.env == "local"
        assert s.log_level == "INFO"
        assert s.browser.browser_type == "chromium"

    def test_get_settings_is_cached(self):
        from uireplay.settings import get_settings

        assert get_settings() is get_settings()

    def test_env_override(self, monkeypatch):
        """UIREPLAY_BROWSER__BROWSER_TYPE should override the default."""
        monkeypatch.setenv("UIREPLAY_BROWSER__BROWSER_TYPE", "firefox")
        from uireplay.settings.config import Settings

        s = Settings()
        assert s.browser.browser_type == "firefox"

    def test_multiple_section_overrides(self, monkeypatch):
        """Multiple env overrides across sections should all apply."""
        monkeypatch.setenv("UIREPLAY_PLAYBACK__UI_SHOWN_TIMEOUT_SEC", "3")
        monkeypatch.setenv("UIREPLAY_SCREENSHOTS__ENABLED", "true")
        monkeypatch.setenv("UIREPLAY_SCRIPTS__TEMPLATING", "myhooks:render")
        from uireplay.settings.config import Settings

        s = Settings()
        assert s.playback.ui_shown_timeout_sec == 3
        assert s.screenshots.enabled is True
        assert s.scripts.templating == "myhooks:render"

    def test_ci_profile(self, monkeypatch):
        """UIREPLAY_ENV=ci should layer settings.ci.toml over the defaults."""
        monkeypatch.setenv("UIREPLAY_ENV", "ci")
        from uireplay.settings.config import Settings

        s = Settings()
        assert s.env == "ci"
        assert s.screenshots.enabled is True
        assert s.playback.async_requests_timeout_sec == 15
        assert s.playback.ui_check_interval_ms == 500
        assert s.screenshots.directory.endswith(os.path.join("data", "ci-screenshots"))

    def test_explicit_values_win_over_toml(self):
        from uireplay.settings.config import Settings

        s = Settings(playback={"use_random_chars": True})
        assert s.playback.use_random_chars is True
        # Sibling keys from the TOML layers survive the merge.
        assert s.playback.close_sessions_on_error is True

    def test_paths_resolved_relative_to_project_root(self):
        from uireplay.settings.config import Settings

        s = Settings()
        assert os.path.isabs(s.screenshots.directory)

    def test_absolute_screenshot_dir_kept(self, tmp_path):
        from uireplay.settings.config import Settings

        s = Settings(screenshots={"directory": str(tmp_path)})
        assert s.screenshots.directory == str(tmp_path)


class TestBrowserSettings:
    """Browser launch settings section."""

    def test_defaults(self):
        from uireplay.settings.config import Settings

        s = Settings()
        assert s.browser.headless is True
        assert s.browser.navigation_timeout_ms == 30_000
        assert s.browser.executable_path == ""
        assert s.browser.proxy_host == ""
        assert s.browser.proxy_port == 0

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("chrome", "chromium"),
            ("Edge", "chromium"),
            ("FF", "firefox"),
            ("safari", "webkit"),
            (" webkit ", "webkit"),
        ],
    )
    def test_browser_aliases(self, name, expected):
        from uireplay.settings.config import BrowserSettings

        assert BrowserSettings(browser_type=name).browser_type == expected

    def test_unknown_browser_rejected(self):
        from uireplay.settings.config import BrowserSettings

        with pytest.raises(ValidationError):
            BrowserSettings(browser_type="netscape")

    def test_proxy_port_range(self):
        from uireplay.settings.config import BrowserSettings

        with pytest.raises(ValidationError):
            BrowserSettings(proxy_port=70000)


class TestPlaybackSettings:
    """Playback timing and failure policy section."""

    def test_defaults(self):
        from uireplay.settings.config import Settings

        s = Settings()
        assert s.playback.async_requests_timeout_sec == 60
        assert s.playback.ui_check_interval_ms == 500
        assert s.playback.ui_shown_timeout_sec == 10
        assert s.playback.use_random_chars is False
        assert s.playback.close_sessions_on_error is True

    def test_interval_must_be_positive(self):
        from uireplay.settings.config import PlaybackSettings

        with pytest.raises(ValidationError):
            PlaybackSettings(ui_check_interval_ms=0)


class TestScriptsSettings:
    """Hook script identifiers section."""

    def test_all_hooks_default_to_builtin(self):
        from uireplay.settings.config import Settings

        s = Settings()
        assert all(value == "" for value in s.scripts.model_dump().values())
        assert len(s.scripts.model_dump()) == 12
