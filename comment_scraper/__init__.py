"""Best-effort comment extraction from social media posts."""

from comment_scraper.extractor import extract_comments, run_extraction
from comment_scraper.models import Comment, ExtractionResult

__all__ = ["Comment", "ExtractionResult", "extract_comments", "run_extraction"]
