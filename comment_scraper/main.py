from __future__ import annotations

from fastapi import Depends, FastAPI, Header, HTTPException

from comment_scraper.config import settings
from comment_scraper.extractor import run_extraction
from comment_scraper.logging_config import setup_logging
from comment_scraper.models import ExtractionResult, ExtractRequest

app = FastAPI(title="Comment Scraper", version="0.1.0")


@app.on_event("startup")
async def configure_logging() -> None:
    setup_logging(settings.comment_scraper_log_level, settings.comment_scraper_log_file or None)


def verify_token(authorization: str | None = Header(default=None)) -> None:
    if not settings.comment_scraper_api_token:
        return
    expected = f"Bearer {settings.comment_scraper_api_token}"
    if authorization != expected:
        raise HTTPException(status_code=401, detail="Unauthorized")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/internal/v1/comments/extract", dependencies=[Depends(verify_token)])
async def extract(req: ExtractRequest) -> ExtractionResult:
    return await run_extraction(req.url)
