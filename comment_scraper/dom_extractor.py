from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List

from comment_scraper.models import Comment
from comment_scraper.normalizer import COMMENT_MAX_CHARS, COMMENT_MIN_CHARS


logger = logging.getLogger("comment-scraper.dom")

DOM_COMMENT_LIMIT = 20
LOOSE_COMMENT_LIMIT = 5
LOOSE_MIN_CHARS = 10
LOOSE_MAX_CHARS = 300

# Most specific first. Instagram's hashed class names rotate; revisit when the markup changes.
POST_SELECTORS = [
    'div[role="button"] span[dir="auto"]',
    'ul li div span[dir="auto"]',
    "article section div span",
    "div._a9zs span",
    "div._a9zu span",
    "span._aacl._aaco._aacu._aacx._aad7._aade",
    'span[dir="auto"]',
    'div[dir="auto"]',
]

PROFILE_SELECTORS = [
    "article div span",
    'div[dir="auto"] span',
    "span._aacl._aaco._aacu._aacx._aad7._aade",
]

LOOSE_SELECTORS = ["span, div"]

_UI_CHROME_RE = re.compile(
    r"\b(?:Reply|Replies|Follow|Following|Like|Likes|See translation|View replies|"
    r"Responder|Respuestas|Seguir|Me gusta|Ver traducción)\b"
)
_ELAPSED_RE = re.compile(r"^\d+\s*(?:h|d|w|min|hour|day|week|hora|día|semana)")
_DIGITS_RE = re.compile(r"^\d+$")
_EXACT_REJECTS = {"...", "…", "see more", "ver más"}

_LOOSE_DENY_RE = re.compile(
    r"Instagram|See more|Ver más|Follow|Seguir|Share|Compartir|Like|Me gusta"
)
_COUNTER_RE = re.compile(r"^\d[\d.,]*\s*[KkMm]?\s*(?:followers|following|posts|seguidores|seguidos|publicaciones)")

_COLLECT_JS = """
(args) => {
  const [selectors, maxChars] = args;
  return selectors.map((selector) => {
    try {
      return Array.from(document.querySelectorAll(selector))
        .map((el) => ((el.innerText || el.textContent || '') + '').trim())
        .filter((text) => text.length > 0 && text.length <= maxChars);
    } catch (e) {
      return [];
    }
  });
}
"""


def is_ui_chrome(text: str) -> bool:
    if "•" in text:
        return True
    if text.lower() in _EXACT_REJECTS:
        return True
    if _DIGITS_RE.match(text) or _ELAPSED_RE.match(text):
        return True
    return bool(_UI_CHROME_RE.search(text))


def _unique(texts: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for text in texts:
        if text in seen:
            continue
        seen.add(text)
        out.append(text)
    return out


def filter_comment_texts(texts: Iterable[str], limit: int = DOM_COMMENT_LIMIT) -> List[str]:
    kept = []
    for raw in texts:
        text = str(raw or "").strip()
        if len(text) < COMMENT_MIN_CHARS or len(text) > COMMENT_MAX_CHARS:
            continue
        if is_ui_chrome(text):
            continue
        kept.append(text)
    return _unique(kept)[:limit]


def filter_loose_texts(texts: Iterable[str], limit: int = LOOSE_COMMENT_LIMIT) -> List[str]:
    kept = []
    for raw in texts:
        text = str(raw or "").strip()
        if len(text) < LOOSE_MIN_CHARS or len(text) > LOOSE_MAX_CHARS:
            continue
        if " " not in text:
            continue
        if _LOOSE_DENY_RE.search(text) or _COUNTER_RE.match(text):
            continue
        kept.append(text)
    return _unique(kept)[:limit]


async def collect_texts(page: Any, selectors: List[str], max_chars: int = 2000) -> List[str]:
    """Text of every element matched by each selector, in selector order."""
    groups = await page.evaluate(_COLLECT_JS, [selectors, max_chars])
    texts: List[str] = []
    for selector, group in zip(selectors, groups or []):
        items = [str(item) for item in (group or [])]
        logger.debug("[selector] %s matched=%d", selector, len(items))
        texts.extend(items)
    return texts


async def extract_dom_comments(page: Any, is_post: bool) -> List[Comment]:
    selectors = POST_SELECTORS if is_post else PROFILE_SELECTORS
    texts = filter_comment_texts(await collect_texts(page, selectors))
    if texts:
        logger.info("[dom] primary pass kept %d texts", len(texts))
        return [Comment(text=text) for text in texts]

    loose = filter_loose_texts(await collect_texts(page, LOOSE_SELECTORS, max_chars=LOOSE_MAX_CHARS))
    logger.info("[dom] primary pass empty, loose pass kept %d texts", len(loose))
    return [Comment(text=text) for text in loose]
