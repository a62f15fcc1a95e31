import argparse
import asyncio
import json

from comment_scraper.config import settings
from comment_scraper.extractor import run_extraction
from comment_scraper.logging_config import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract comments from a social media post URL")
    parser.add_argument("url", help="post URL, e.g. https://www.instagram.com/p/<shortcode>/")
    parser.add_argument("--log-level", default=settings.comment_scraper_log_level)
    args = parser.parse_args()

    setup_logging(args.log_level, settings.comment_scraper_log_file or None)
    result = asyncio.run(run_extraction(args.url))
    print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
