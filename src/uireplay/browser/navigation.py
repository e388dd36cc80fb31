"""Step URL navigation with automatic wait-strategy fallback.

Replayed applications often never reach ``networkidle`` (long-polling,
websockets, analytics beacons). Navigation therefore tries ``networkidle``
first and falls back to ``load`` and then ``domcontentloaded`` on timeout.
Steps recorded on the page the browser is already showing do not navigate
at all, so in-page state built by earlier steps survives.
"""

from __future__ import annotations

import logging
from typing import Literal

from playwright.sync_api import Error as PlaywrightError, Page, Response, TimeoutError as PlaywrightTimeout

from uireplay.exceptions import NavigationError

logger = logging.getLogger(__name__)

# Playwright error substrings that indicate non-retryable navigation failures.
_NON_RETRYABLE_ERRORS: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_CERT_AUTHORITY_INVALID",
    "ERR_PROXY_CONNECTION_FAILED",
    "ERR_ADDRESS_UNREACHABLE",
)

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]

FALLBACK_CHAIN: tuple[WaitUntil, ...] = ("networkidle", "load", "domcontentloaded")


def same_document(current: str, target: str) -> bool:
    """True when *target* differs from *current* at most by its fragment."""
    return current.split("#", 1)[0] == target.split("#", 1)[0]


def goto_step_url(page: Page, url: str, *, timeout_ms: int = 30_000) -> Response | None:
    """Navigate *page* to a step URL unless it is already showing that document.

    Returns:
        The main-frame ``Response``, or ``None`` when no navigation happened.

    Raises:
        NavigationError: On a non-retryable network failure.
        PlaywrightTimeout: If every wait strategy times out.
    """
    if not url or same_document(page.url, url):
        return None

    last_error: PlaywrightTimeout | None = None
    for strategy in FALLBACK_CHAIN:
        try:
            logger.debug("goto %s (wait_until=%s, timeout=%dms)", url, strategy, timeout_ms)
            return page.goto(url, wait_until=strategy, timeout=timeout_ms)
        except PlaywrightTimeout as exc:
            logger.warning("Navigation to %s timed out with wait_until=%s", url, strategy)
            last_error = exc
        except PlaywrightError as exc:
            reason = _non_retryable_reason(str(exc))
            if reason is None:
                raise
            raise NavigationError(url, reason) from exc

    raise last_error  # type: ignore[misc]


def _non_retryable_reason(message: str) -> str | None:
    for pattern in _NON_RETRYABLE_ERRORS:
        if pattern in message:
            return pattern.replace("ERR_", "").replace("_", " ").lower()
    return None
