"""Unit tests for uireplay.browser.navigation: step URL goto with fallback."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from uireplay.browser.navigation import FALLBACK_CHAIN, goto_step_url, same_document
from uireplay.exceptions import NavigationError


def _page(current: str = "about:blank") -> MagicMock:
    page = MagicMock()
    page.url = current
    return page


# ---------------------------------------------------------------------------
# same_document
# ---------------------------------------------------------------------------

class TestSameDocument:
    """Fragment-insensitive URL comparison."""

    def test_identical(self) -> None:
        assert same_document("https://a.test/x", "https://a.test/x")

    def test_fragment_ignored(self) -> None:
        assert same_document("https://a.test/app#/list", "https://a.test/app#/detail/3")

    def test_different_query(self) -> None:
        assert not same_document("https://a.test/x?page=1", "https://a.test/x?page=2")


# ---------------------------------------------------------------------------
# goto_step_url
# ---------------------------------------------------------------------------

class TestGotoStepUrl:
    """Tests for goto_step_url."""

    def test_chain_order(self) -> None:
        assert FALLBACK_CHAIN == ("networkidle", "load", "domcontentloaded")

    def test_success_on_first_try(self) -> None:
        """Returns immediately when networkidle succeeds."""
        page = _page()
        sentinel = MagicMock(name="response")
        page.goto.return_value = sentinel

        result = goto_step_url(page, "https://example.com", timeout_ms=5000)

        assert result is sentinel
        page.goto.assert_called_once_with("https://example.com", wait_until="networkidle", timeout=5000)

    def test_no_navigation_for_empty_url(self) -> None:
        page = _page()
        assert goto_step_url(page, "") is None
        page.goto.assert_not_called()

    def test_no_navigation_on_same_document(self) -> None:
        """Steps recorded on the current page keep in-page state."""
        page = _page("https://app.test/#/cart")
        assert goto_step_url(page, "https://app.test/#/checkout") is None
        page.goto.assert_not_called()

    def test_fallback_to_load_on_timeout(self) -> None:
        """Falls back to 'load' when 'networkidle' times out."""
        page = _page()
        sentinel = MagicMock(name="response")
        page.goto.side_effect = [PlaywrightTimeout("timeout"), sentinel]

        result = goto_step_url(page, "https://example.com", timeout_ms=5000)

        assert result is sentinel
        assert page.goto.call_count == 2
        page.goto.assert_any_call("https://example.com", wait_until="load", timeout=5000)

    def test_raises_when_all_strategies_fail(self) -> None:
        """Raises PlaywrightTimeout if every strategy times out."""
        page = _page()
        page.goto.side_effect = PlaywrightTimeout("all failed")

        with pytest.raises(PlaywrightTimeout):
            goto_step_url(page, "https://example.com")

        assert page.goto.call_count == 3

    def test_non_retryable_error(self) -> None:
        page = _page()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED at https://nope.invalid")

        with pytest.raises(NavigationError, match="name not resolved") as exc_info:
            goto_step_url(page, "https://nope.invalid")

        assert exc_info.value.url == "https://nope.invalid"
        assert page.goto.call_count == 1

    def test_other_playwright_error_propagates(self) -> None:
        page = _page()
        page.goto.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(PlaywrightError, match="has been closed"):
            goto_step_url(page, "https://example.com")
