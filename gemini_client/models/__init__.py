"""Data models for the client library."""

from .request import (
    BatchEmbedContentsRequest,
    Content,
    CountTokensRequest,
    EmbedContentRequest,
    FunctionCall,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionCallPart,
    FunctionDeclaration,
    FunctionResponse,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerationConfig,
    GenerationParams,
    InlineData,
    InlineDataPart,
    ModelParams,
    Part,
    SafetySetting,
    StartChatParams,
    TaskType,
    TextPart,
    Tool,
    ToolConfig,
)
from .response import (
    BatchEmbedContentsResponse,
    Candidate,
    ContentEmbedding,
    CountTokensResponse,
    EmbedContentResponse,
    ErrorDetail,
    ErrorResponse,
    GenerateContentResponse,
    PromptFeedback,
    SafetyRating,
    UsageMetadata,
)
from .files import (
    FileMetadata,
    FileRecord,
    ListFilesResponse,
    ListParams,
    UploadFileResponse,
)

__all__ = [
    "BatchEmbedContentsRequest",
    "Content",
    "CountTokensRequest",
    "EmbedContentRequest",
    "FunctionCall",
    "FunctionCallingConfig",
    "FunctionCallingMode",
    "FunctionCallPart",
    "FunctionDeclaration",
    "FunctionResponse",
    "FunctionResponsePart",
    "GenerateContentRequest",
    "GenerationConfig",
    "GenerationParams",
    "InlineData",
    "InlineDataPart",
    "ModelParams",
    "Part",
    "SafetySetting",
    "StartChatParams",
    "TaskType",
    "TextPart",
    "Tool",
    "ToolConfig",
    "BatchEmbedContentsResponse",
    "Candidate",
    "ContentEmbedding",
    "CountTokensResponse",
    "EmbedContentResponse",
    "ErrorDetail",
    "ErrorResponse",
    "GenerateContentResponse",
    "PromptFeedback",
    "SafetyRating",
    "UsageMetadata",
    "FileMetadata",
    "FileRecord",
    "ListFilesResponse",
    "ListParams",
    "UploadFileResponse",
]
