"""Request models for the Generative Language REST API."""

from collections.abc import Sequence
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
)


PART_KEYS = ("text", "inlineData", "functionCall", "functionResponse")


class InlineData(BaseModel):
    """Inline data for binary content."""

    mimeType: str = Field(..., description="MIME type of the data")
    data: str = Field(..., description="Base64 encoded data")


class FunctionCall(BaseModel):
    """A function call predicted by the model."""

    name: str = Field(..., description="Name of the declared function")
    args: dict[str, Any] = Field(default_factory=dict, description="Call arguments")


class FunctionResponse(BaseModel):
    """The result of a function call, sent back to the model."""

    name: str = Field(..., description="Name of the called function")
    response: dict[str, Any] = Field(..., description="Function output")


class TextPart(BaseModel):
    text: str = Field(..., description="Text content")


class InlineDataPart(BaseModel):
    inlineData: InlineData = Field(..., description="Inline data")


class FunctionCallPart(BaseModel):
    functionCall: FunctionCall = Field(..., description="Function call")


class FunctionResponsePart(BaseModel):
    functionResponse: FunctionResponse = Field(..., description="Function response")


def part_kind(value: Any) -> str | None:
    """Return the single populated part key, or None if not exactly one is set."""
    if isinstance(value, dict):
        present = [key for key in PART_KEYS if value.get(key) is not None]
    else:
        present = [key for key in PART_KEYS if getattr(value, key, None) is not None]
    return present[0] if len(present) == 1 else None


Part = Annotated[
    Union[
        Annotated[TextPart, Tag("text")],
        Annotated[InlineDataPart, Tag("inlineData")],
        Annotated[FunctionCallPart, Tag("functionCall")],
        Annotated[FunctionResponsePart, Tag("functionResponse")],
    ],
    Discriminator(
        part_kind,
        custom_error_type="invalid_part",
        custom_error_message=(
            "A part must have exactly one of text, inlineData, "
            "functionCall or functionResponse"
        ),
    ),
]

Role = Literal["user", "model", "function", "system"]


class Content(BaseModel):
    """Content with role and parts."""

    role: Role = Field(default="user", description="Role of the content")
    parts: list[Part] = Field(default_factory=list, description="Parts of the content")


def as_parts(value: str | Any | Sequence[Any]) -> list[Any]:
    """Expand the shorthand forms accepted for a message into a list of parts.

    A bare string becomes one text part; a list may mix strings and parts.
    """
    if isinstance(value, str):
        return [TextPart(text=value)]
    if isinstance(value, (BaseModel, dict)):
        return [value]
    return [TextPart(text=item) if isinstance(item, str) else item for item in value]


class FunctionCallingMode(str, Enum):
    MODE_UNSPECIFIED = "MODE_UNSPECIFIED"
    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"


class FunctionCallingConfig(BaseModel):
    """How the model may call the declared functions."""

    mode: FunctionCallingMode | None = Field(default=None, description="Calling mode")
    allowedFunctionNames: list[str] | None = Field(
        default=None, description="Functions the model may call in ANY mode"
    )


class ToolConfig(BaseModel):
    """Tool configuration shared by all tools in a request."""

    functionCallingConfig: FunctionCallingConfig = Field(
        ..., description="Function calling configuration"
    )


class FunctionDeclaration(BaseModel):
    """A function the model may ask the caller to run."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Function name")
    description: str | None = Field(default=None, description="What the function does")
    parameters: dict[str, Any] | None = Field(
        default=None, description="OpenAPI style parameter schema, sent verbatim"
    )


class Tool(BaseModel):
    """Tool configuration."""

    model_config = ConfigDict(extra="allow")

    functionDeclarations: list[FunctionDeclaration] | None = Field(
        default=None, description="Function declarations offered to the model"
    )


class GenerationConfig(BaseModel):
    """Generation configuration."""

    model_config = ConfigDict(extra="allow")

    candidateCount: int | None = Field(default=None, description="Number of candidates")
    stopSequences: list[str] | None = Field(default=None, description="Stop sequences")
    maxOutputTokens: int | None = Field(default=None, description="Maximum output tokens")
    temperature: float | None = Field(default=None, description="Sampling temperature")
    topP: float | None = Field(default=None, description="Top P for generation")
    topK: int | None = Field(default=None, description="Top K for generation")
    responseMimeType: str | None = Field(default=None, description="Output MIME type")
    responseSchema: dict[str, Any] | None = Field(
        default=None, description="Output schema when responseMimeType is JSON"
    )


class SafetySetting(BaseModel):
    """Safety setting for content generation."""

    model_config = ConfigDict(extra="allow")

    category: str = Field(..., description="Safety category")
    threshold: str = Field(..., description="Blocking threshold")


class GenerationParams(BaseModel):
    """Settings that may be given on the model and overridden per call.

    A ``systemInstruction`` may be given as a bare string, a part, or a list
    of them; it is always stored as a ``system`` role :class:`Content`.
    """

    model_config = ConfigDict(frozen=True)

    tools: list[Tool] | None = Field(default=None, description="Tools configuration")
    toolConfig: ToolConfig | None = Field(default=None, description="Tool configuration")
    systemInstruction: Content | None = Field(
        default=None, description="System instruction"
    )
    generationConfig: GenerationConfig | None = Field(
        default=None, description="Generation configuration"
    )
    safetySettings: list[SafetySetting] | None = Field(
        default=None, description="Safety settings"
    )

    @field_validator("systemInstruction", mode="before")
    @classmethod
    def _normalize_system_instruction(cls, value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, Content):
            return value.model_copy(update={"role": "system"})
        if isinstance(value, dict) and "parts" in value:
            return {**value, "role": "system"}
        return Content(role="system", parts=as_parts(value))


class ModelParams(GenerationParams):
    """Parameters a GenerativeModel is created with."""

    model: str = Field(..., description="Model name, with or without the models/ prefix")


class StartChatParams(GenerationParams):
    """Parameters for starting a chat session."""

    history: list[Content] | None = Field(default=None, description="Starting history")


class GenerateContentRequest(GenerationParams):
    """Request model for the generateContent endpoint."""

    contents: list[Content] = Field(..., description="Contents to generate from")


class CountTokensRequest(BaseModel):
    """Request model for the countTokens endpoint."""

    contents: list[Content] = Field(..., description="Contents to count")


class TaskType(str, Enum):
    TASK_TYPE_UNSPECIFIED = "TASK_TYPE_UNSPECIFIED"
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    SEMANTIC_SIMILARITY = "SEMANTIC_SIMILARITY"
    CLASSIFICATION = "CLASSIFICATION"
    CLUSTERING = "CLUSTERING"


class EmbedContentRequest(BaseModel):
    """Request model for the embedContent endpoint."""

    content: Content = Field(..., description="Content to embed")
    taskType: TaskType | None = Field(default=None, description="Embedding task type")
    title: str | None = Field(
        default=None, description="Document title, only for RETRIEVAL_DOCUMENT"
    )
    model: str | None = Field(
        default=None, description="Model name, filled in for batch requests"
    )


class BatchEmbedContentsRequest(BaseModel):
    """Request model for the batchEmbedContents endpoint."""

    requests: list[EmbedContentRequest] = Field(..., description="Embedding requests")
