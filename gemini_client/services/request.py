"""Request URLs and the single dispatch point for outbound calls."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from curl_cffi.requests.exceptions import RequestException
from loguru import logger
from pydantic import BaseModel, ValidationError

from gemini_client import __version__
from gemini_client.config import DEFAULT_API_VERSION, DEFAULT_BASE_URL, settings
from gemini_client.errors import RequestError, ResponseError
from gemini_client.models.response import ErrorResponse


OBSCURED_API_KEY = "__API_KEY__"
CLIENT_HEADER = "genai-py"


class Task(str, Enum):
    GENERATE_CONTENT = "generateContent"
    STREAM_GENERATE_CONTENT = "streamGenerateContent"
    COUNT_TOKENS = "countTokens"
    EMBED_CONTENT = "embedContent"
    BATCH_EMBED_CONTENTS = "batchEmbedContents"


class Url(Protocol):
    def to_string(self, api_key: str | None = None) -> str: ...

    def to_obscured_string(self) -> str: ...


@dataclass(frozen=True, repr=False)
class RequestUrl:
    """Endpoint of a model task.

    ``str()`` renders the real URL including the API key; ``repr()`` and
    :meth:`to_obscured_string` hide the key and are what logs and errors use.
    """

    model: str
    task: Task
    api_key: str
    stream: bool = False
    api_version: str = DEFAULT_API_VERSION
    base_url: str = DEFAULT_BASE_URL

    def to_string(self, api_key: str | None = None) -> str:
        key = self.api_key if api_key is None else api_key
        # Namespaced names (models/x, tunedModels/x) are already resource paths
        resource = self.model if "/" in self.model else f"models/{self.model}"
        url = f"{self.base_url}/{self.api_version}/{resource}:{self.task.value}?key={key}"
        if self.stream and self.task is Task.STREAM_GENERATE_CONTENT:
            url += "&alt=sse"
        return url

    def to_obscured_string(self) -> str:
        return self.to_string(OBSCURED_API_KEY)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"RequestUrl({self.to_obscured_string()!r})"


def get_client_headers() -> str:
    return f"{CLIENT_HEADER}/{__version__}"


def default_headers() -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-goog-api-client": get_client_headers(),
    }


async def _read_error_message(response: Any, stream: bool) -> tuple[str, Any]:
    """Pull ``error.message`` (plus serialized details) out of a failed reply.

    An absent or malformed body yields an empty message.
    """
    try:
        raw = await response.acontent() if stream else response.content
        error = ErrorResponse.model_validate_json(raw).error
    except (ValidationError, ValueError, TypeError):
        return "", None
    message = error.message
    if error.details is not None:
        message += f" {json.dumps(error.details)}"
    return message, error.details


async def make_request(
    session: Any,
    url: Url,
    body: str | bytes | None = None,
    *,
    method: str = "POST",
    headers: dict[str, str] | None = None,
    stream: bool = False,
) -> Any:
    """
    Perform one outbound call and classify any failure.

    Args:
        session: curl_cffi AsyncSession (or a compatible object)
        url: RequestUrl or another URL value with an obscured rendering
        body: Encoded request body
        method: HTTP method
        headers: Headers replacing the default JSON header set
        stream: Whether to leave the body unread for incremental parsing

    Returns:
        The raw transport response, for the caller to decode

    Raises:
        RequestError: on transport failure or any non-2xx status
    """
    obscured = url.to_obscured_string()
    logger.debug(f"{method} {obscured}")

    try:
        response = await session.request(
            method,
            url.to_string(),
            headers=headers if headers is not None else default_headers(),
            data=body,
            stream=stream,
            timeout=settings.timeout,
            proxy=settings.proxy,
        )
    except RequestException as e:
        logger.error(f"Request to {obscured} failed: {e}")
        raise RequestError(f"Error fetching from {obscured}: {e}") from e

    if not 200 <= response.status_code < 300:
        message, details = await _read_error_message(response, stream)
        if stream:
            await response.aclose()
        status_text = response.reason or ""
        logger.error(
            f"API request failed - status: {response.status_code}, message: {message}"
        )
        raise RequestError(
            f"Error fetching from {obscured}: "
            f"[{response.status_code} {status_text}] {message}",
            status_code=response.status_code,
            status_text=status_text,
            error_details=details,
        )

    return response


def read_json(response: Any, url: Url) -> Any:
    """Decode a successful reply body, classifying malformed JSON."""
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as e:
        text = response.text[:500] if response.text else "empty"
        logger.error(f"JSON decode error: {e}, response text: {text}")
        raise RequestError(
            f"Error parsing response from {url.to_obscured_string()}: {e}"
        ) from e


def parse_response(payload: Any, model_cls: type[BaseModel], url: Url) -> Any:
    """Validate a decoded reply into ``model_cls``; a shape mismatch is a ResponseError."""
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Unexpected response shape from {url.to_obscured_string()}: {e}")
        raise ResponseError(f"Unexpected {model_cls.__name__} payload: {e}") from e
