"""Analysis result models returned by AnalysisClient operations.

Every model is frozen: results are created fresh per call and never mutated.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SentimentLabel(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


class ContentAnalysis(BaseModel):
    """Output of analyze_web_content.

    All four fields are always populated; missing values are replaced by
    the parser's defaults rather than left empty.
    """

    model_config = ConfigDict(frozen=True)

    summary: str
    sentiment: str
    key_topics: str
    category: str


class SentimentResult(BaseModel):
    """Output of analyze_sentiment."""

    model_config = ConfigDict(frozen=True)

    label: SentimentLabel
    confidence: float = Field(ge=0.0, le=100.0, description="Certainty as a percentage")
    explanation: str


class PageContent(BaseModel):
    """Text extracted from a fetched page by the scraper."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = "Unknown"
    content: str
