from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from comment_scraper import miner
from comment_scraper.errors import PayloadParseError
from comment_scraper.models import Comment


logger = logging.getLogger("comment-scraper.interceptor")

INSPECT_URL_MARKERS = ("/comments", "comment", "PolarisPostComments", "graphql", "/api/")
REQUIRE_MARKER = '"require"'
TEXT_MARKER = '"text"'
COMMENT_MARKER = "comment"


@dataclass
class CommentAccumulator:
    """Comments captured from network traffic during one extraction call."""

    comments: List[Comment] = field(default_factory=list)
    structured_found: bool = False
    responses_seen: int = 0
    responses_matched: int = 0

    def add(self, found: List[Comment]) -> None:
        if not found:
            return
        self.comments.extend(found)
        self.structured_found = True


def _parse_json(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as exc:
        raise PayloadParseError(f"json_parse_failed:{str(exc)[:120]}") from exc


def _has_require_and_text(body: str) -> bool:
    return REQUIRE_MARKER in body and TEXT_MARKER in body


def _has_connection_marker(body: str) -> bool:
    return miner.COMMENTS_CONNECTION_KEY in body


def _has_comment_marker(body: str) -> bool:
    return COMMENT_MARKER in body


def _walk_connection(body: str) -> List[Comment]:
    return miner.walk_comment_connection(_parse_json(body))


def _mine_tree(body: str) -> List[Comment]:
    return miner.search(_parse_json(body))


# First matching rule wins for each response body.
PAYLOAD_RULES: List[Tuple[str, Callable[[str], bool], Callable[[str], List[Comment]]]] = [
    ("bootstrap", _has_require_and_text, _mine_tree),
    ("comments_connection", _has_connection_marker, _walk_connection),
    ("generic_comment", _has_comment_marker, _mine_tree),
]


def mine_payload(body: str) -> Tuple[str, List[Comment]]:
    """Apply the first matching payload rule; returns ``(rule_name, comments)``.

    Raises PayloadParseError when the matching rule cannot parse the body.
    """
    for name, predicate, handler in PAYLOAD_RULES:
        if predicate(body):
            return name, handler(body)
    return "ignored", []


def mine_document(html: str) -> List[Comment]:
    """Mine JSON script blocks embedded in the post's HTML document."""
    found: List[Comment] = []
    for blob in miner.extract_embedded_json(html):
        if not _has_require_and_text(blob):
            continue
        try:
            found.extend(miner.search(_parse_json(blob)))
        except PayloadParseError as exc:
            logger.debug("[document] skip embedded json: %s", exc)
    return found


class NetworkInterceptor:
    def __init__(self, target_url: str, accumulator: CommentAccumulator) -> None:
        self.target_url = target_url
        self.accumulator = accumulator
        self._tasks: List[asyncio.Task[Any]] = []

    def _is_document(self, url: str) -> bool:
        if url.rstrip("/") == self.target_url.rstrip("/"):
            return True
        return "instagram.com/p/" in url and "?" not in url

    def should_inspect(self, url: str) -> bool:
        if self._is_document(url):
            return True
        return any(marker in url for marker in INSPECT_URL_MARKERS)

    def on_response(self, response: Any) -> None:
        self._tasks.append(asyncio.create_task(self.handle_response(response)))

    async def handle_response(self, response: Any) -> None:
        url = str(getattr(response, "url", "") or "")
        self.accumulator.responses_seen += 1
        if not self.should_inspect(url):
            return
        try:
            body = await response.text()
        except Exception as exc:  # noqa: BLE001
            # Redirects and preflight responses have no readable body.
            logger.debug("[response] body unavailable %s: %s", url[:120], str(exc)[:160])
            return

        found: List[Comment] = []
        if self._is_document(url):
            found.extend(mine_document(body))
        try:
            rule, mined = mine_payload(body)
        except PayloadParseError as exc:
            logger.debug("[response] %s %s", exc, url[:120])
            rule, mined = "parse_failed", []
        except Exception as exc:  # noqa: BLE001
            logger.warning("[response] mining failed %s: %s", url[:120], str(exc)[:160])
            rule, mined = "mine_failed", []
        found.extend(mined)

        if found:
            self.accumulator.responses_matched += 1
            self.accumulator.add(found)
            logger.info("[response] rule=%s comments=%d url=%s", rule, len(found), url[:120])

    async def drain(self) -> None:
        while self._tasks:
            pending, self._tasks = self._tasks, []
            await asyncio.gather(*pending, return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in self._tasks:
            if not task.done():
                task.cancel()
        self._tasks = []
