from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from comment_scraper import browser_scraper
from comment_scraper.miner import COMMENTS_CONNECTION_KEY


def edge(username: str, text: str) -> Dict[str, Any]:
    return {"node": {"text": text, "user": {"username": username}}}


def bootstrap_payload(edges: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Instagram-style bootstrap envelope carrying a comments connection."""
    next_item = ["adp_PolarisPostCommentsContainerQuery", {"__bbox": {"result": {"data": {COMMENTS_CONNECTION_KEY: {"edges": edges}}}}}]
    bbox_require = ["RelayPrefetchedStreamCache", "next", [], [next_item]]
    return {"require": [["ScheduledServerJS", "handle", None, [{"__bbox": {"require": [bbox_require]}}]]]}


class FakeResponse:
    def __init__(self, url: str, body: str = "", fail: bool = False) -> None:
        self.url = url
        self._body = body
        self._fail = fail
        self.text_calls = 0

    async def text(self) -> str:
        self.text_calls += 1
        if self._fail:
            raise RuntimeError("Response body is unavailable for redirect responses")
        return self._body

    @classmethod
    def json_body(cls, url: str, payload: Any) -> "FakeResponse":
        return cls(url, json.dumps(payload))


class FakeLocator:
    def __init__(self, count: int = 0) -> None:
        self._count = count
        self.clicks = 0

    @property
    def first(self) -> "FakeLocator":
        return self

    async def count(self) -> int:
        return self._count

    async def click(self, timeout: Optional[int] = None) -> None:
        self.clicks += 1


class FakePage:
    def __init__(
        self,
        responses: Optional[List[FakeResponse]] = None,
        selector_texts: Optional[Dict[str, List[str]]] = None,
        goto_error: Optional[BaseException] = None,
        scroll_error: Optional[BaseException] = None,
    ) -> None:
        self.responses = responses or []
        self.selector_texts = selector_texts or {}
        self.goto_error = goto_error
        self.scroll_error = scroll_error
        self.handlers: Dict[str, List[Callable[[Any], Any]]] = {}
        self.goto_calls: List[Dict[str, Any]] = []
        self.evaluated_selectors: List[List[str]] = []
        self.close_calls = 0

    def on(self, event: str, handler: Callable[[Any], Any]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    async def goto(self, url: str, wait_until: str = "load", timeout: int = 0) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        for response in self.responses:
            for handler in self.handlers.get("response", []):
                handler(response)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_timeout(self, ms: int) -> None:
        return None

    def get_by_role(self, role: str, name: Any = None) -> FakeLocator:
        return FakeLocator(0)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if isinstance(arg, list) and arg and isinstance(arg[0], list):
            selectors = arg[0]
            self.evaluated_selectors.append(list(selectors))
            return [list(self.selector_texts.get(selector, [])) for selector in selectors]
        if self.scroll_error is not None:
            raise self.scroll_error
        return True

    async def close(self) -> None:
        self.close_calls += 1


class FakeClosable:
    def __init__(self) -> None:
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1

    async def stop(self) -> None:
        self.close_calls += 1


def make_session(page: FakePage) -> browser_scraper.BrowserSession:
    return browser_scraper.BrowserSession(FakeClosable(), FakeClosable(), FakeClosable(), page)


@pytest.fixture(autouse=True)
def no_real_browser(monkeypatch):
    """Fail loudly if a test would launch chromium."""

    launches: List[str] = []

    async def refuse() -> browser_scraper.BrowserSession:
        launches.append("launch")
        raise RuntimeError("browser launch disabled in tests")

    monkeypatch.setattr(browser_scraper, "open_browser_session", refuse)
    return launches


@pytest.fixture
def use_page(monkeypatch):
    """Route the session driver to a fake page; returns the created sessions."""

    sessions: List[browser_scraper.BrowserSession] = []

    def install(page: FakePage) -> List[browser_scraper.BrowserSession]:
        async def opener() -> browser_scraper.BrowserSession:
            session = make_session(page)
            sessions.append(session)
            return session

        monkeypatch.setattr(browser_scraper, "open_browser_session", opener)
        return sessions

    return install
