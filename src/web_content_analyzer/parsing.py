"""Response parsers for raw LLM completions.

Parsers never raise on malformed completions. Each returns either
``Parsed(value)`` when the completion had the requested structure or
``Fallback(value, reason)`` when defaults were substituted, so callers
always get a usable value and tests can tell which branch was taken.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from pydantic import BaseModel, ValidationError, field_validator

from .models.analysis import ContentAnalysis, SentimentLabel, SentimentResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SENTIMENT = "NEUTRAL"
DEFAULT_TOPICS = "General"
DEFAULT_CATEGORY = "General"
FALLBACK_CONFIDENCE = 50.0

# Prefix -> ContentAnalysis field.
LINE_PREFIXES: dict[str, str] = {
    "SUMMARY:": "summary",
    "SENTIMENT:": "sentiment",
    "TOPICS:": "key_topics",
    "CATEGORY:": "category",
}

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """The completion had the expected structure."""

    value: T

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    """Structure was missing; *value* holds documented defaults."""

    value: T
    reason: str

    @property
    def is_fallback(self) -> bool:
        return True


ParseResult = Union[Parsed[T], Fallback[T]]


def parse_content_analysis(completion: str) -> ParseResult[ContentAnalysis]:
    """Parse ``SUMMARY:``/``SENTIMENT:``/``TOPICS:``/``CATEGORY:`` lines.

    Lines are trimmed before matching; unrelated lines are ignored and the
    last occurrence of a repeated prefix wins. Fields still empty after the
    scan get their defaults: the whole completion for the summary,
    ``NEUTRAL`` for the sentiment and ``General`` for topics and category.
    """
    fields = {name: "" for name in LINE_PREFIXES.values()}
    for raw_line in completion.splitlines():
        line = raw_line.strip()
        for prefix, name in LINE_PREFIXES.items():
            if line.startswith(prefix):
                fields[name] = line[len(prefix):].strip()
                break

    missing = [name for name, value in fields.items() if not value]
    analysis = ContentAnalysis(
        summary=fields["summary"] or completion,
        sentiment=fields["sentiment"] or DEFAULT_SENTIMENT,
        key_topics=fields["key_topics"] or DEFAULT_TOPICS,
        category=fields["category"] or DEFAULT_CATEGORY,
    )
    if missing:
        return Fallback(analysis, f"missing fields: {', '.join(missing)}")
    return Parsed(analysis)


class _SentimentPayload(BaseModel):
    """JSON object the sentiment prompt asks for."""

    label: SentimentLabel
    confidence: float
    explanation: str

    @field_validator("label", mode="before")
    @classmethod
    def normalize_label(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1).strip() if match else stripped


def _label_from_text(text: str) -> SentimentLabel:
    lowered = text.lower()
    if "positive" in lowered:
        return SentimentLabel.POSITIVE
    if "negative" in lowered:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def _scale_confidence(raw: float) -> float:
    """Rescale a 0-1 confidence to a percentage, clamped to [0, 100]."""
    scaled = raw * 100.0
    if not 0.0 <= scaled <= 100.0:
        logger.warning("Sentiment confidence %r out of range, clamping", raw)
        scaled = min(max(scaled, 0.0), 100.0)
    return scaled


def parse_sentiment(completion: str) -> ParseResult[SentimentResult]:
    """Decode the sentiment JSON object, falling back to keyword search.

    On success confidence is rescaled from [0, 1] to [0, 100]. When the
    completion is not a valid object the label comes from a
    case-insensitive search for "positive" then "negative", confidence is
    50 and the explanation is the raw completion.
    """
    try:
        payload = _SentimentPayload.model_validate(json.loads(_strip_code_fence(completion)))
    except (json.JSONDecodeError, RecursionError, ValidationError) as exc:
        reason = f"{type(exc).__name__}: {exc}".splitlines()[0]
        return Fallback(
            SentimentResult(
                label=_label_from_text(completion),
                confidence=FALLBACK_CONFIDENCE,
                explanation=completion,
            ),
            reason,
        )

    if math.isnan(payload.confidence):
        return Fallback(
            SentimentResult(
                label=payload.label,
                confidence=FALLBACK_CONFIDENCE,
                explanation=payload.explanation,
            ),
            "confidence is NaN",
        )
    return Parsed(
        SentimentResult(
            label=payload.label,
            confidence=_scale_confidence(payload.confidence),
            explanation=payload.explanation,
        )
    )


def parse_topics(completion: str, max_topics: int) -> ParseResult[list[str]]:
    """Return the first *max_topics* non-blank lines, trimmed, in order."""
    topics = [line.strip() for line in completion.splitlines() if line.strip()]
    return Parsed(topics[:max(max_topics, 0)])


def parse_relevance(completion: str) -> ParseResult[float]:
    """Parse a bare number and clamp it to [0, 100]; unparseable -> 0.0."""
    text = completion.strip()
    try:
        score = float(text)
    except ValueError:
        return Fallback(0.0, f"not a number: {text[:50]!r}")
    if math.isnan(score):
        return Fallback(0.0, "score is NaN")
    return Parsed(min(max(score, 0.0), 100.0))


def parse_connection_check(completion: str) -> bool:
    return "OK" in completion.upper()
