"""Sites recognised by the router but without a working scraper.

Each stub fails before any browser is launched.
"""

from __future__ import annotations

from comment_scraper.adapters.base import BaseAdapter
from comment_scraper.errors import UnsupportedSiteError
from comment_scraper.models import ExtractionResult


class _FailFastAdapter(BaseAdapter):
    reason: str

    async def crawl(self, url: str) -> ExtractionResult:
        raise UnsupportedSiteError(self.platform, self.reason)


class FacebookAdapter(_FailFastAdapter):
    platform = "facebook"
    reason = "facebook_requires_login"


class TwitterAdapter(_FailFastAdapter):
    platform = "twitter"
    reason = "twitter_blocks_automation"


class UnsupportedAdapter(_FailFastAdapter):
    platform = "unsupported"
    reason = "no_strategy_for_host"
