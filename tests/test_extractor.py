import random

import pytest

from comment_scraper import extract_comments, run_extraction
from comment_scraper.dom_extractor import POST_SELECTORS
from comment_scraper.normalizer import COMMENT_MAX_CHARS, COMMENT_MIN_CHARS, FORBIDDEN_TEXTS
from tests.conftest import FakePage, FakeResponse, bootstrap_payload, edge


def _garbage_urls():
    rng = random.Random(1234)
    alphabet = "abcxyz:/.?#[]@!$&'()*+,;=%-_~ \t\n\x00üñ"
    fuzzed = ["".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40))) for _ in range(40)]
    return fuzzed + [
        "",
        "   ",
        "http://",
        "https://[::1",
        "://::",
        "ftp://files.example.com/a",
        "https://example.com",
        "https://facebook.com/post/1",
        "https://x.com/someone/status/1",
        "https://www.instagram.com/p/XYZ/",
        "instagram.com",
    ]


def assert_valid_output(comments):
    assert len(comments) >= 1
    for comment in comments:
        text = comment.text.strip()
        assert COMMENT_MIN_CHARS <= len(text) <= COMMENT_MAX_CHARS
        assert text.lower() not in FORBIDDEN_TEXTS


@pytest.mark.asyncio
@pytest.mark.parametrize("url", _garbage_urls())
async def test_extract_comments_never_empty_never_raises(url):
    comments = await extract_comments(url)

    assert_valid_output(comments)


@pytest.mark.asyncio
async def test_unsupported_site_falls_back_to_synthetic_without_browser(no_real_browser):
    result = await run_extraction("https://facebook.com/post/1")

    assert result.strategy == "facebook"
    assert result.provenance == "synthetic"
    assert any("facebook_requires_login" in err for err in result.errors)
    assert no_real_browser == []
    assert_valid_output(result.comments)


@pytest.mark.asyncio
async def test_instagram_launch_failure_falls_back_to_synthetic(no_real_browser):
    result = await run_extraction("https://www.instagram.com/p/XYZ/")

    assert result.strategy == "instagram"
    assert result.provenance == "synthetic"
    assert no_real_browser == ["launch"]


@pytest.mark.asyncio
async def test_navigation_failure_falls_back_and_closes_once(use_page):
    sessions = use_page(FakePage(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED")))

    result = await run_extraction("https://www.instagram.com/p/XYZ/")

    assert result.provenance == "synthetic"
    assert any(err.startswith("NavigationError:goto_failed") for err in result.errors)
    assert sessions[0].page.close_calls == 1
    assert sessions[0].browser.close_calls == 1


@pytest.mark.asyncio
async def test_intercepted_duplicates_are_removed(use_page):
    payload = bootstrap_payload([edge("u1", "Great shot!"), edge("u2", "Love it so much"), edge("u1", "Great shot!")])
    use_page(FakePage(responses=[FakeResponse.json_body("https://www.instagram.com/graphql/query", payload)]))

    result = await run_extraction("https://www.instagram.com/p/XYZ/")

    assert result.provenance == "intercepted"
    assert [c.key for c in result.comments] == [("u1", "Great shot!"), ("u2", "Love it so much")]


@pytest.mark.asyncio
async def test_empty_extraction_is_treated_as_failure(use_page):
    use_page(FakePage(selector_texts={POST_SELECTORS[0]: ["Reply", "2h"]}))

    result = await run_extraction("https://www.instagram.com/p/XYZ/")

    assert result.provenance == "synthetic"
    assert any(err.startswith("ExtractionEmptyError") for err in result.errors)
    assert_valid_output(result.comments)


@pytest.mark.asyncio
async def test_intercepted_emoji_comments_are_returned(use_page):
    payload = bootstrap_payload([edge("u1", "😍😍😍😍"), edge("u2", "❤️❤️")])
    use_page(FakePage(responses=[FakeResponse.json_body("https://www.instagram.com/graphql/query", payload)]))

    result = await run_extraction("https://www.instagram.com/p/XYZ/")

    assert result.provenance == "intercepted"
    assert result.errors == []
    assert [c.key for c in result.comments] == [("u1", "😍😍😍😍"), ("u2", "❤️❤️")]
