"""URL classification by host.

A URL belongs to a site when its host is the site's domain or a subdomain of
it, so ``www.instagram.com`` is Instagram but ``box.com`` is not ``x.com``.
A bare ``instagram.com/p/...`` without a scheme is read as https.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Tuple
from urllib.parse import urlparse


class SiteStrategy(str, Enum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    UNSUPPORTED = "unsupported"


def _host_of(url: str) -> str:
    raw = str(url or "").strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    try:
        return (urlparse(raw).hostname or "").lower()
    except ValueError:
        return ""


def _on_domain(*domains: str) -> Callable[[str], bool]:
    def predicate(host: str) -> bool:
        return any(host == d or host.endswith(f".{d}") for d in domains)

    return predicate


SITE_TABLE: List[Tuple[Callable[[str], bool], SiteStrategy]] = [
    (_on_domain("instagram.com"), SiteStrategy.INSTAGRAM),
    (_on_domain("facebook.com"), SiteStrategy.FACEBOOK),
    (_on_domain("twitter.com", "x.com"), SiteStrategy.TWITTER),
]


def classify_url(url: str) -> SiteStrategy:
    host = _host_of(url)
    if not host:
        return SiteStrategy.UNSUPPORTED
    for predicate, strategy in SITE_TABLE:
        if predicate(host):
            return strategy
    return SiteStrategy.UNSUPPORTED
