import pytest

from comment_scraper.models import Comment
from comment_scraper.sentiment import build_sentiment_prompt, classify_comments


def test_prompt_is_newline_joined():
    prompt = build_sentiment_prompt([Comment(text="Love it"), Comment(author="u", text=" Not for me ")])

    assert "Love it\nNot for me" in prompt
    assert '"positive"' in prompt


def test_empty_list_is_refused():
    with pytest.raises(ValueError):
        build_sentiment_prompt([Comment(text="   ")])


@pytest.mark.asyncio
async def test_classifier_gets_prompt_and_raw_text_is_returned():
    seen = []

    async def classify(prompt):
        seen.append(prompt)
        return '```json\n{"positive": 1}\n```'

    raw = await classify_comments([Comment(text="Great post today!")], classify)

    assert raw == '```json\n{"positive": 1}\n```'
    assert "Great post today!" in seen[0]
