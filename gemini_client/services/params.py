"""Merging of model defaults with call overrides, and request formatting."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from gemini_client.errors import UserInputError
from gemini_client.models.request import (
    Content,
    GenerateContentRequest,
    GenerationParams,
    as_parts,
    part_kind,
)


OVERRIDABLE_FIELDS = (
    "tools",
    "toolConfig",
    "systemInstruction",
    "generationConfig",
    "safetySettings",
)

# Part kinds each history role may carry
VALID_PARTS_PER_ROLE = {
    "user": {"text", "inlineData"},
    "function": {"functionResponse"},
    "model": {"text", "functionCall"},
}

# Roles that may directly precede each role in a history
VALID_PREVIOUS_ROLES = {
    "user": {"model"},
    "function": {"model"},
    "model": {"user", "function"},
}


def normalize_model_name(model: str) -> str:
    """Prefix a bare model name with ``models/``; namespaced names are kept."""
    if "/" in model:
        return model
    return f"models/{model}"


def resolve_params(
    defaults: GenerationParams, overrides: GenerationParams | None
) -> GenerationParams:
    """Combine model-level defaults with call-level overrides.

    Each overridable field is taken whole from ``overrides`` when it is set
    there and from ``defaults`` otherwise. Values are never merged key by key.
    The result owns copies of the nested values it was built from.
    """
    values = {}
    for name in OVERRIDABLE_FIELDS:
        value = getattr(overrides, name, None) if overrides is not None else None
        values[name] = value if value is not None else getattr(defaults, name)
    return GenerationParams(**values).model_copy(deep=True)


def format_new_content(request: str | Any | Sequence[Any]) -> Content:
    """Wrap a message into a Content with the role its parts call for.

    Function responses go out under the ``function`` role and cannot be
    mixed with other parts in one message. The result never shares objects
    with ``request``.
    """
    if isinstance(request, Content):
        return request.model_copy(deep=True)
    if isinstance(request, dict) and "parts" in request:
        return Content.model_validate(request)
    parts = Content(parts=as_parts(request)).parts
    function_parts = [
        part for part in parts if part_kind(part) == "functionResponse"
    ]
    if function_parts and len(function_parts) != len(parts):
        raise UserInputError(
            "Within a single message, FunctionResponse cannot be mixed with "
            "other type of part in the request for sending chat message."
        )
    role = "function" if function_parts else "user"
    return Content(role=role, parts=parts).model_copy(deep=True)


def format_generate_content_input(
    request: str | Any | Sequence[Any] | GenerateContentRequest,
) -> GenerateContentRequest:
    if isinstance(request, GenerateContentRequest):
        return request
    if isinstance(request, dict) and "contents" in request:
        return GenerateContentRequest.model_validate(request)
    return GenerateContentRequest(contents=[format_new_content(request)])


def build_generate_content_body(
    contents: list[Content], params: GenerationParams
) -> str:
    """Serialize contents plus effective params into a JSON request body."""
    request = GenerateContentRequest(
        contents=contents,
        **{name: getattr(params, name) for name in OVERRIDABLE_FIELDS},
    )
    return request.model_dump_json(exclude_none=True)


def validate_chat_history(history: Sequence[Content | dict] | None) -> list[Content]:
    """
    Check a starting chat history and return it as Content models.

    Raises:
        UserInputError: if roles, their order, or their parts are invalid
    """
    if not history:
        return []
    try:
        contents = [
            item if isinstance(item, BaseModel) else Content.model_validate(item)
            for item in history
        ]
    except ValidationError as e:
        raise UserInputError(f"Invalid chat history: {e}") from e
    previous: Content | None = None
    for index, content in enumerate(contents):
        if content.role not in VALID_PARTS_PER_ROLE:
            raise UserInputError(
                f"Role should be one of {', '.join(VALID_PARTS_PER_ROLE)} "
                f"but got '{content.role}'"
            )
        if not content.parts:
            raise UserInputError(f"Content at index {index} must have parts")
        for part in content.parts:
            kind = part_kind(part)
            if kind not in VALID_PARTS_PER_ROLE[content.role]:
                raise UserInputError(
                    f"Content with role '{content.role}' can't contain '{kind}' part"
                )
        if previous is None:
            if content.role not in ("user", "function"):
                raise UserInputError(
                    f"First content should be with role 'user', got {content.role}"
                )
        elif previous.role not in VALID_PREVIOUS_ROLES[content.role]:
            raise UserInputError(
                f"Content with role '{content.role}' can't follow "
                f"'{previous.role}'. Valid previous roles: "
                f"{sorted(VALID_PREVIOUS_ROLES[content.role])}"
            )
        previous = content
    return contents
