"""Wire envelope for the Gemini ``generateContent`` REST endpoint.

Request: ``{"contents": [{"parts": [{"text": ...}]}]}``.
Response: ``{"candidates": [{"content": {"parts": [{"text": ...}]}}]}``.
Unknown response keys (usageMetadata, finishReason, ...) are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Part(BaseModel):
    # Non-text parts (functionCall, inlineData) carry no text.
    text: str | None = None


class Content(BaseModel):
    parts: list[Part] = Field(default_factory=list)


class GenerateContentRequest(BaseModel):
    """POST body carrying a single text prompt."""

    contents: list[Content]

    @classmethod
    def from_prompt(cls, prompt: str) -> GenerateContentRequest:
        return cls(contents=[Content(parts=[Part(text=prompt)])])


class Candidate(BaseModel):
    # Blocked candidates come back without content.
    content: Content | None = None


class GenerateContentResponse(BaseModel):
    """Decoded response envelope."""

    candidates: list[Candidate] = Field(default_factory=list)

    def first_text(self) -> str | None:
        """Return the first text fragment of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
