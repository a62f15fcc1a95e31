from __future__ import annotations


class ScraperError(Exception):
    """Base class for every failure raised while extracting comments."""


class UnsupportedSiteError(ScraperError):
    def __init__(self, strategy: str, reason: str) -> None:
        super().__init__(f"unsupported_site:{strategy}:{reason}")
        self.strategy = strategy
        self.reason = reason


class NavigationError(ScraperError):
    pass


class NavigationTimeoutError(NavigationError):
    pass


class PayloadParseError(ScraperError):
    pass


class ExtractionEmptyError(ScraperError):
    pass
