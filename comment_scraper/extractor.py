from __future__ import annotations

import logging
import random
import time
from typing import List, Optional

from comment_scraper.adapters import build_adapter
from comment_scraper.errors import ExtractionEmptyError
from comment_scraper.models import Comment, ExtractionResult
from comment_scraper.normalizer import finalize_comments, synthesize_comments
from comment_scraper.router import SiteStrategy, classify_url


logger = logging.getLogger("comment-scraper.extractor")


async def run_extraction(url: str, rng: Optional[random.Random] = None) -> ExtractionResult:
    """Extract comments for ``url``; never raises and never returns an empty list."""
    started = time.time()
    url = str(url or "")
    strategy = SiteStrategy.UNSUPPORTED
    errors: List[str] = []
    result: Optional[ExtractionResult] = None

    try:
        strategy = classify_url(url)
        adapter = build_adapter(strategy)
        result = await adapter.crawl(url)
        errors.extend(result.errors)
        comments = finalize_comments(result.comments)
        if not comments:
            raise ExtractionEmptyError(f"extraction_empty:{result.provenance}:raw={len(result.comments)}")
    except Exception as exc:  # noqa: BLE001
        errors.append(f"{type(exc).__name__}:{str(exc)[:240]}")
        logger.warning("Extraction failed for %s (%s): %s", url[:200], strategy.value, exc)
        comments = []

    if comments and result is not None:
        final = result.model_copy(update={"comments": comments, "errors": errors})
    else:
        final = ExtractionResult(
            url=url,
            strategy=strategy.value,
            provenance="synthetic",
            comments=synthesize_comments(
                None if strategy == SiteStrategy.UNSUPPORTED else strategy,
                rng=rng,
            ),
            errors=errors,
        )
    final.latency_ms = int((time.time() - started) * 1000)
    logger.info(
        "Extraction done url=%s strategy=%s provenance=%s comments=%d",
        url[:200],
        final.strategy,
        final.provenance,
        len(final.comments),
    )
    return final


async def extract_comments(url: str) -> List[Comment]:
    return (await run_extraction(url)).comments
