"""Response models for the Generative Language REST API."""

from typing import Any

from pydantic import BaseModel, Field

from ..errors import ResponseError
from .request import Content, FunctionCall


class SafetyRating(BaseModel):
    """Safety rating of a candidate or prompt."""

    category: str = Field(..., description="Safety category")
    probability: str = Field(..., description="Harm probability")
    blocked: bool | None = Field(default=None, description="Whether this rating blocked")


class Candidate(BaseModel):
    """Candidate response from the model."""

    content: Content | None = Field(default=None, description="Content of the candidate")
    finishReason: str | None = Field(default=None, description="Reason for finishing")
    index: int = Field(default=0, description="Index of the candidate")
    safetyRatings: list[SafetyRating] | None = Field(
        default=None, description="Safety ratings"
    )
    citationMetadata: dict[str, Any] | None = Field(
        default=None, description="Citation sources"
    )


class PromptFeedback(BaseModel):
    """Feedback about the prompt, set when the prompt itself was blocked."""

    blockReason: str | None = Field(default=None, description="Why the prompt was blocked")
    safetyRatings: list[SafetyRating] | None = Field(
        default=None, description="Safety ratings"
    )


class UsageMetadata(BaseModel):
    """Usage metadata for the response."""

    promptTokenCount: int = Field(default=0, description="Prompt token count")
    candidatesTokenCount: int = Field(default=0, description="Candidates token count")
    totalTokenCount: int = Field(default=0, description="Total token count")


class GenerateContentResponse(BaseModel):
    """Response model for the generateContent endpoint."""

    candidates: list[Candidate] = Field(
        default_factory=list, description="Candidates from generation"
    )
    promptFeedback: PromptFeedback | None = Field(
        default=None, description="Prompt feedback"
    )
    usageMetadata: UsageMetadata | None = Field(
        default=None, description="Usage metadata"
    )

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate.

        Raises ResponseError when there is no candidate to read from.
        """
        if not self.candidates:
            reason = self.promptFeedback.blockReason if self.promptFeedback else None
            if reason:
                raise ResponseError(f"Prompt was blocked due to {reason}", self)
            raise ResponseError("Response has no candidates", self)
        content = self.candidates[0].content
        if content is None:
            return ""
        return "".join(getattr(part, "text", None) or "" for part in content.parts)

    @property
    def function_calls(self) -> list[FunctionCall]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        return [
            part.functionCall
            for part in self.candidates[0].content.parts
            if getattr(part, "functionCall", None) is not None
        ]


class CountTokensResponse(BaseModel):
    """Response model for the countTokens endpoint."""

    totalTokens: int = Field(..., description="Number of tokens in the prompt")


class ContentEmbedding(BaseModel):
    values: list[float] = Field(default_factory=list, description="Embedding vector")


class EmbedContentResponse(BaseModel):
    """Response model for the embedContent endpoint."""

    embedding: ContentEmbedding = Field(..., description="The embedding")


class BatchEmbedContentsResponse(BaseModel):
    """Response model for the batchEmbedContents endpoint."""

    embeddings: list[ContentEmbedding] = Field(
        default_factory=list, description="One embedding per request"
    )


class ErrorDetail(BaseModel):
    """Error detail in response."""

    code: int | None = Field(default=None, description="Error code")
    message: str = Field(default="", description="Error message")
    status: str | None = Field(default=None, description="Error status")
    details: Any = Field(default=None, description="Structured error details")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail = Field(..., description="Error details")
