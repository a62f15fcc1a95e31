from __future__ import annotations

import asyncio
import logging
import re
import time
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from comment_scraper.config import settings
from comment_scraper.dom_extractor import extract_dom_comments
from comment_scraper.errors import NavigationError, NavigationTimeoutError
from comment_scraper.interceptor import CommentAccumulator, NetworkInterceptor
from comment_scraper.models import Comment, ExtractionResult, Provenance


logger = logging.getLogger("comment-scraper.session")

NAVIGATION_TIMEOUT_MS = 60000
SETTLE_DELAY_MS = 6000
POST_ACTION_WAIT_MS = 2000
CLOSE_TIMEOUT_S = 3.0
VIEWPORT = {"width": 1920, "height": 1080}
ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
EXPAND_COMMENTS_RE = re.compile(r"View (?:more|all) comments|Ver (?:más|todos los) comentarios", re.IGNORECASE)


def _debug(step: str, message: str) -> None:
    logger.debug("[ig-crawl][%s] %s", step, message)


class SessionState(str, Enum):
    CREATED = "created"
    NAVIGATED = "navigated"
    SCRAPED = "scraped"
    FAILED = "failed"
    CLOSED = "closed"


async def _safe_close_with_timeout(awaitable: Awaitable[Any], *, label: str, timeout_s: float = CLOSE_TIMEOUT_S) -> None:
    try:
        await asyncio.wait_for(awaitable, timeout=max(0.5, timeout_s))
    except Exception as exc:  # noqa: BLE001
        logger.warning("[close] %s failed: %s", label, str(exc)[:160])


class BrowserSession:
    """One headless browser, one context and one page owned by a single extraction call."""

    def __init__(self, playwright: Any, browser: Any, context: Any, page: Any) -> None:
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self.state = SessionState.CREATED
        self.error: Optional[BaseException] = None

    async def close(self) -> None:
        if self.state == SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        await _safe_close_with_timeout(self.page.close(), label="page")
        await _safe_close_with_timeout(self.context.close(), label="context")
        await _safe_close_with_timeout(self.browser.close(), label="browser")
        await _safe_close_with_timeout(self.playwright.stop(), label="playwright")
        _debug("close", "session closed")


async def open_browser_session() -> BrowserSession:
    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=settings.comment_scraper_headless,
            args=settings.browser_args(),
        )
    except Exception:
        await _safe_close_with_timeout(playwright.stop(), label="playwright")
        raise
    try:
        context = await browser.new_context(
            user_agent=settings.comment_scraper_user_agent,
            viewport=VIEWPORT,
            locale=settings.comment_scraper_locale,
            extra_http_headers={
                "Accept-Language": settings.comment_scraper_accept_language,
                "Accept": ACCEPT_HEADER,
            },
        )
        page = await context.new_page()
    except Exception:
        await _safe_close_with_timeout(browser.close(), label="browser")
        await _safe_close_with_timeout(playwright.stop(), label="playwright")
        raise
    _debug("browser", "launch_started")
    return BrowserSession(playwright, browser, context, page)


def is_post_url(url: str) -> bool:
    return "/p/" in url or "/reel/" in url


async def _goto(page: Any, url: str, timeout_ms: int = NAVIGATION_TIMEOUT_MS) -> None:
    try:
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise NavigationTimeoutError(f"goto_timeout_{timeout_ms}ms:{str(exc)[:160]}") from exc
    except Exception as exc:  # noqa: BLE001
        raise NavigationError(f"goto_failed:{str(exc)[:220]}") from exc


async def expand_comments(page: Any) -> bool:
    button = page.get_by_role("button", name=EXPAND_COMMENTS_RE).first
    if await button.count() == 0:
        return False
    await button.click(timeout=POST_ACTION_WAIT_MS)
    await page.wait_for_timeout(POST_ACTION_WAIT_MS)
    return True


async def scroll_comments(page: Any) -> bool:
    scrolled = await page.evaluate(
        """
        () => {
          const section = document.querySelector('article, [role="main"]');
          if (!section) return false;
          section.scrollTo(0, section.scrollHeight);
          return true;
        }
        """
    )
    await page.wait_for_timeout(POST_ACTION_WAIT_MS)
    return bool(scrolled)


PostLoadAction = Tuple[str, Callable[[Any], Awaitable[bool]]]

POST_LOAD_ACTIONS: List[PostLoadAction] = [
    ("expand_comments", expand_comments),
    ("scroll_comments", scroll_comments),
]


async def run_post_load_actions(page: Any, actions: List[PostLoadAction], errors: List[str]) -> None:
    for label, action in actions:
        try:
            done = await action(page)
            _debug(label, "ok" if done else "skipped")
        except Exception as exc:  # noqa: BLE001
            err = f"action_failed:{label}:{str(exc)[:140]}"
            errors.append(err)
            logger.info("[%s] %s", label, err)


async def crawl_instagram(url: str) -> ExtractionResult:
    started = time.time()
    errors: List[str] = []
    accumulator = CommentAccumulator()
    interceptor = NetworkInterceptor(url, accumulator)
    comments: List[Comment] = []
    provenance: Provenance = "dom"

    session = await open_browser_session()
    try:
        try:
            session.page.on("response", interceptor.on_response)
            _debug("goto", url)
            await _goto(session.page, url)
            await session.page.wait_for_timeout(SETTLE_DELAY_MS)
            session.state = SessionState.NAVIGATED

            post = is_post_url(url)
            if post:
                await run_post_load_actions(session.page, POST_LOAD_ACTIONS, errors)
            await interceptor.drain()

            if accumulator.structured_found:
                # Intercepted data wins even when it holds fewer comments than the DOM would.
                comments = list(accumulator.comments)
                provenance = "intercepted"
            else:
                comments = await extract_dom_comments(session.page, is_post=post)
            session.state = SessionState.SCRAPED
        except Exception as exc:
            session.state = SessionState.FAILED
            session.error = exc
            raise
    finally:
        await session.close()
        interceptor.cancel_pending()

    logger.info(
        "[ig-crawl] url=%s provenance=%s comments=%d responses=%d matched=%d",
        url,
        provenance,
        len(comments),
        accumulator.responses_seen,
        accumulator.responses_matched,
    )
    return ExtractionResult(
        url=url,
        strategy="instagram",
        provenance=provenance,
        comments=comments,
        errors=errors,
        latency_ms=int((time.time() - started) * 1000),
    )
