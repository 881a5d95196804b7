"""Parsing of server-sent event streams and aggregation of streamed chunks."""

import json
from collections.abc import AsyncIterator
from typing import Any

from curl_cffi.requests.exceptions import RequestException
from loguru import logger
from pydantic import ValidationError

from gemini_client.errors import RequestError, ResponseError
from gemini_client.models.request import Content
from gemini_client.models.response import Candidate, GenerateContentResponse
from gemini_client.services.request import Url


DATA_PREFIX = "data:"


async def iter_sse_payloads(response: Any, url: Url) -> AsyncIterator[dict]:
    """Yield each JSON document carried by a ``data:`` event line.

    A transport failure while reading is raised as RequestError.
    """
    try:
        async for line in response.aiter_lines():
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            line = line.strip()
            if not line.startswith(DATA_PREFIX):
                continue
            payload = line[len(DATA_PREFIX):].strip()
            try:
                yield json.loads(payload)
            except json.JSONDecodeError as e:
                logger.error(f"JSON decode error in stream: {e}, line: {line[:500]}")
                raise RequestError(f"Error parsing JSON response: {payload[:500]}") from e
    except RequestException as e:
        obscured = url.to_obscured_string()
        logger.error(f"Stream from {obscured} failed: {e}")
        raise RequestError(f"Error fetching from {obscured}: {e}") from e


async def iter_chunks(response: Any, url: Url) -> AsyncIterator[GenerateContentResponse]:
    """Yield streamed chunks as response models, closing the response at the end."""
    try:
        async for payload in iter_sse_payloads(response, url):
            try:
                yield GenerateContentResponse.model_validate(payload)
            except ValidationError as e:
                raise ResponseError(f"Unexpected chunk in stream: {e}") from e
    finally:
        await response.aclose()


def aggregate_responses(
    responses: list[GenerateContentResponse],
) -> GenerateContentResponse:
    """
    Fold streamed chunks into one response.

    Parts are concatenated per candidate index in arrival order; finish
    reason, safety ratings and usage come from the latest chunk carrying them.
    """
    candidates: dict[int, Candidate] = {}
    aggregated = GenerateContentResponse()

    for response in responses:
        if response.promptFeedback is not None:
            aggregated.promptFeedback = response.promptFeedback
        if response.usageMetadata is not None:
            aggregated.usageMetadata = response.usageMetadata
        for candidate in response.candidates:
            current = candidates.setdefault(
                candidate.index,
                Candidate(index=candidate.index, content=Content(role="model")),
            )
            if candidate.content is not None:
                current.content.role = candidate.content.role
                current.content.parts.extend(candidate.content.parts)
            if candidate.finishReason is not None:
                current.finishReason = candidate.finishReason
            if candidate.safetyRatings is not None:
                current.safetyRatings = candidate.safetyRatings
            if candidate.citationMetadata is not None:
                current.citationMetadata = candidate.citationMetadata

    aggregated.candidates = [candidates[index] for index in sorted(candidates)]
    return aggregated
