"""Structural search for comment records inside schema-less JSON payloads.

Instagram ships comments in two places: a bootstrap envelope
(``require`` -> ``handle`` -> ``__bbox.require`` -> ``next`` -> result data)
and plain GraphQL or ``/comments/`` connections whose ``edges`` hold
``{node: {text, user}}`` (or ``owner`` in place of ``user``).
Nothing here raises on unexpected shapes; mismatches are skipped.
"""

from __future__ import annotations

import re
from typing import Any, List

from comment_scraper.models import Comment


COMMENTS_CONNECTION_KEY = "xdt_api__v1__media__media_id__comments__connection"
MAX_DEPTH = 64

_JSON_SCRIPT_RE = re.compile(
    r"<script[^>]*type=[\"']application/json[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)


def _at(value: Any, *path: Any) -> Any:
    """Follow ``path`` through dicts (str keys) and lists (int indices)."""
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _non_empty_str(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return ""


def comment_from_edge(edge: Any) -> Comment | None:
    text = _non_empty_str(_at(edge, "node", "text"))
    # /comments/ endpoints put the author under "owner" instead of "user".
    username = _non_empty_str(_at(edge, "node", "user", "username")) or _non_empty_str(
        _at(edge, "node", "owner", "username")
    )
    if not text or not username:
        return None
    return Comment(author=username, text=text)


def walk_comment_connection(tree: Any) -> List[Comment]:
    """Walk the fixed bootstrap path down to the comments connection edges."""
    found: List[Comment] = []
    for require_item in _as_list(_at(tree, "require")):
        if _at(require_item, 1) != "handle":
            continue
        for handle_item in _as_list(_at(require_item, 3)):
            for bbox_require in _as_list(_at(handle_item, "__bbox", "require")):
                if _at(bbox_require, 1) != "next":
                    continue
                for next_item in _as_list(_at(bbox_require, 3)):
                    connection = _at(next_item, 1, "__bbox", "result", "data", COMMENTS_CONNECTION_KEY)
                    for edge in _as_list(_at(connection, "edges")):
                        comment = comment_from_edge(edge)
                        if comment is not None:
                            found.append(comment)
    return found


def search(tree: Any) -> List[Comment]:
    found: List[Comment] = []
    _search(tree, found, 0)
    return found


def _search(current: Any, found: List[Comment], depth: int) -> None:
    if depth > MAX_DEPTH:
        return
    if isinstance(current, dict):
        if isinstance(current.get("require"), list):
            found.extend(walk_comment_connection(current))
        for value in current.values():
            if isinstance(value, (dict, list)):
                _search(value, found, depth + 1)
    elif isinstance(current, list):
        for item in current:
            comment = comment_from_edge(item)
            if comment is not None:
                found.append(comment)
            if isinstance(item, (dict, list)):
                _search(item, found, depth + 1)


def extract_embedded_json(html: str) -> List[str]:
    """Return the bodies of ``<script type="application/json">`` blocks."""
    return [match.strip() for match in _JSON_SCRIPT_RE.findall(html or "") if match.strip()]
