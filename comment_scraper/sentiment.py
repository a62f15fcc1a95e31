"""Hand-off from extracted comments to the external sentiment classifier.

The classifier is any coroutine taking a prompt and returning the model's raw
text. Interpreting that text is the caller's job.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable, List

from comment_scraper.models import Comment


Classifier = Callable[[str], Awaitable[str]]

PROMPT_TEMPLATE = """Analyze the following social media comments and classify each one by sentiment.
Provide a statistical breakdown and a short summary.

Comments:
{comments}

Reply in JSON with exactly this structure:
{{
  "positive": number of positive comments,
  "negative": number of negative comments,
  "neutral": number of neutral comments,
  "total": total number of comments,
  "summary": "a detailed summary of the sentiment and the trends observed"
}}
"""


def comment_texts(comments: Iterable[Comment]) -> List[str]:
    return [c.text.strip() for c in comments if c.text and c.text.strip()]


def build_sentiment_prompt(comments: Iterable[Comment]) -> str:
    texts = comment_texts(comments)
    if not texts:
        raise ValueError("cannot build a sentiment prompt from an empty comment list")
    return PROMPT_TEMPLATE.format(comments="\n".join(texts))


async def classify_comments(comments: Iterable[Comment], classify: Classifier) -> str:
    prompt = build_sentiment_prompt(comments)
    return await classify(prompt)
