"""Prompt templates for web content analysis.

Each ``build_*`` function truncates the content to the operation's limit
and renders the matching template. Truncation is a plain character slice.

WEB_CONTENT_ANALYSIS — SUMMARY/SENTIMENT/TOPICS/CATEGORY line format.
    Variables: {url}, {title}, {content}.
SENTIMENT_ANALYSIS — JSON object with label/confidence/explanation.
    Variables: {text}.
SUMMARIZE — Variables: {max_sentences}, {content}.
EXTRACT_TOPICS — one topic per line. Variables: {max_topics}, {content}.
CLASSIFY — single category label. Variables: {categories}, {title}, {content}.
RELEVANCE — bare 0-100 number. Variables: {keywords}, {content}.
"""

from __future__ import annotations

from collections.abc import Iterable

WEB_CONTENT_LIMIT = 3000
SUMMARY_LIMIT = 4000
TOPICS_LIMIT = 4000
CLASSIFY_LIMIT = 2000
RELEVANCE_LIMIT = 3000

CATEGORIES: tuple[str, ...] = (
    "Technology",
    "News",
    "Business",
    "Education",
    "Entertainment",
    "Sports",
    "Health",
    "Science",
    "Politics",
    "Lifestyle",
    "Other",
)

WEB_CONTENT_ANALYSIS = """\
Analyze this web content and provide structured analysis:

URL: {url}
Title: {title}
Content: {content}

Please provide analysis in this exact format:
SUMMARY: [2-3 sentence summary]
SENTIMENT: [POSITIVE/NEGATIVE/NEUTRAL with brief explanation]
TOPICS: [comma-separated key topics/themes]
CATEGORY: [main category like Technology, News, Business, Education, etc.]

Be concise and accurate."""

SENTIMENT_ANALYSIS = '''\
Analyze the sentiment of the following text. Return your analysis as a JSON object \
with three keys: "label" (string: "POSITIVE", "NEGATIVE", or "NEUTRAL"), \
"confidence" (float: a score between 0.0 and 1.0 indicating certainty), \
and "explanation" (string: a brief explanation of the sentiment).

Text: "{text}"'''

SUMMARIZE = """\
Summarize the following content in exactly {max_sentences} sentences. \
Focus on the most important information:

{content}"""

EXTRACT_TOPICS = """\
Extract the top {max_topics} key topics or themes from this content. \
Return only the topics, one per line:

{content}"""

CLASSIFY = """\
Classify this web content into one main category. Choose from: {categories}

Title: {title}
Content: {content}

Return only the category name:"""

RELEVANCE = """\
Rate how relevant this content is to these keywords: {keywords}
Content: {content}

Provide a relevance score from 0-100 where:
0 = Not relevant at all
50 = Somewhat relevant
100 = Highly relevant

Return only the number:"""

CONNECTION_TEST_PROMPT = "Reply with 'OK' if you receive this message."

MODEL_INFO_PROMPT = "What model are you and what are your capabilities?"


def truncate(content: str, limit: int) -> str:
    """Return at most the first *limit* characters of *content*."""
    return content[:limit] if len(content) > limit else content


def build_web_content_prompt(title: str, content: str, url: str) -> str:
    return WEB_CONTENT_ANALYSIS.format(
        url=url,
        title=title,
        content=truncate(content, WEB_CONTENT_LIMIT),
    )


def build_sentiment_prompt(text: str) -> str:
    # No truncation: callers pass short snippets.
    return SENTIMENT_ANALYSIS.format(text=text)


def build_summary_prompt(content: str, max_sentences: int) -> str:
    return SUMMARIZE.format(
        max_sentences=max_sentences,
        content=truncate(content, SUMMARY_LIMIT),
    )


def build_topics_prompt(content: str, max_topics: int) -> str:
    return EXTRACT_TOPICS.format(
        max_topics=max_topics,
        content=truncate(content, TOPICS_LIMIT),
    )


def build_classification_prompt(title: str, content: str) -> str:
    return CLASSIFY.format(
        categories=", ".join(CATEGORIES),
        title=title,
        content=truncate(content, CLASSIFY_LIMIT),
    )


def build_relevance_prompt(content: str, keywords: Iterable[str]) -> str:
    return RELEVANCE.format(
        keywords=", ".join(keywords),
        content=truncate(content, RELEVANCE_LIMIT),
    )
