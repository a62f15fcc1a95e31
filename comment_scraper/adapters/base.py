from __future__ import annotations

from abc import ABC, abstractmethod

from comment_scraper.models import ExtractionResult


class BaseAdapter(ABC):
    platform: str

    @abstractmethod
    async def crawl(self, url: str) -> ExtractionResult:
        raise NotImplementedError
