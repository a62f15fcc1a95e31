from typing import Dict

from comment_scraper.adapters.base import BaseAdapter
from comment_scraper.adapters.instagram_adapter import InstagramAdapter
from comment_scraper.adapters.stub_adapters import FacebookAdapter, TwitterAdapter, UnsupportedAdapter
from comment_scraper.router import SiteStrategy

ADAPTERS: Dict[SiteStrategy, type[BaseAdapter]] = {
    SiteStrategy.INSTAGRAM: InstagramAdapter,
    SiteStrategy.FACEBOOK: FacebookAdapter,
    SiteStrategy.TWITTER: TwitterAdapter,
    SiteStrategy.UNSUPPORTED: UnsupportedAdapter,
}


def build_adapter(strategy: SiteStrategy) -> BaseAdapter:
    return ADAPTERS.get(strategy, UnsupportedAdapter)()


__all__ = [
    "ADAPTERS",
    "BaseAdapter",
    "FacebookAdapter",
    "InstagramAdapter",
    "TwitterAdapter",
    "UnsupportedAdapter",
    "build_adapter",
]
