from __future__ import annotations

from comment_scraper.adapters.base import BaseAdapter
from comment_scraper.browser_scraper import crawl_instagram
from comment_scraper.models import ExtractionResult


class InstagramAdapter(BaseAdapter):
    platform = "instagram"

    async def crawl(self, url: str) -> ExtractionResult:
        return await crawl_instagram(url)
