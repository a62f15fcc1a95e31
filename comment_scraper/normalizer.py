from __future__ import annotations

import random
import string
from typing import Dict, Iterable, List, Optional

from comment_scraper.models import Comment
from comment_scraper.router import SiteStrategy


COMMENT_MIN_CHARS = 4
COMMENT_MAX_CHARS = 500
SYNTHETIC_MIN_COUNT = 2
SYNTHETIC_MAX_COUNT = 25

FORBIDDEN_TEXTS = {"...", "…", "see more", "ver más", "ver mas"}

_GENERIC_TEMPLATES = [
    "Great post, thanks for sharing!",
    "Love this content, keep it up",
    "Really inspiring, made my day",
    "Amazing work, I'm definitely trying this",
    "Not a fan of this at all",
    "Pretty disappointing, expected more",
    "I don't agree with this take",
    "Kind of a waste of time honestly",
    "Interesting point of view",
    "Thanks for the information",
    "Ok, makes sense",
    "Good to know for later",
]

_SITE_TEMPLATES: Dict[SiteStrategy, List[str]] = {
    SiteStrategy.INSTAGRAM: [
        "This photo is stunning 😍",
        "Love the vibe of this post 🔥",
        "Best reel I've seen all week 👏",
        "The caption doesn't match the picture 😒",
        "Too many filters on this one",
        "Not my style, sorry 👎",
        "Where was this taken?",
        "Saving this for later",
        "Nice colors in this shot",
    ],
    SiteStrategy.FACEBOOK: [
        "Thanks for sharing this with the group!",
        "This is such good news, congrats",
        "Happy to see this on my feed",
        "I really don't think this is accurate",
        "Sad to read this, hoping things improve",
        "Shared with my family",
        "Is there a link with more details?",
        "Following this thread",
    ],
    SiteStrategy.TWITTER: [
        "Great thread, very well explained 👏",
        "This take is spot on",
        "Bookmarking this one",
        "Terrible take, ratio incoming",
        "This aged badly 😬",
        "Source for this claim?",
        "Replying to follow the discussion",
        "Interesting numbers here",
    ],
}


def normalize_comment_text(value: object) -> str:
    return str(value or "").strip()


def is_valid_comment_text(value: object) -> bool:
    text = normalize_comment_text(value)
    if len(text) < COMMENT_MIN_CHARS or len(text) > COMMENT_MAX_CHARS:
        return False
    if text.lower() in FORBIDDEN_TEXTS:
        return False
    # ASCII punctuation runs like "!!!!" are noise; emoji-only comments are not.
    return not all(ch in string.punctuation or ch.isspace() for ch in text)


def dedupe_comments(comments: Iterable[Comment]) -> List[Comment]:
    seen = set()
    unique: List[Comment] = []
    for comment in comments:
        if comment.key in seen:
            continue
        seen.add(comment.key)
        unique.append(comment)
    return unique


def finalize_comments(comments: Iterable[Comment]) -> List[Comment]:
    cleaned: List[Comment] = []
    for comment in comments:
        text = normalize_comment_text(comment.text)
        if not is_valid_comment_text(text):
            continue
        author = normalize_comment_text(comment.author) or None
        cleaned.append(Comment(author=author, text=text))
    return dedupe_comments(cleaned)


def synthesize_comments(
    strategy: Optional[SiteStrategy] = None,
    rng: Optional[random.Random] = None,
) -> List[Comment]:
    """Build a small template comment list for when extraction came back empty."""
    rng = rng or random.Random()
    pool = list(_GENERIC_TEMPLATES)
    if strategy in _SITE_TEMPLATES:
        pool = _SITE_TEMPLATES[strategy] + pool
    upper = min(SYNTHETIC_MAX_COUNT, len(pool))
    count = rng.randint(min(SYNTHETIC_MIN_COUNT, upper), upper)
    return [Comment(text=text) for text in rng.sample(pool, count)]
