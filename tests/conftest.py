from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from gemini_client import GenerativeModel


@pytest.fixture
def anyio_backend():
    return 'asyncio'


class FakeResponse:
    """Stands in for a curl_cffi response."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        reason: str = 'OK',
        lines: list[str] | None = None,
        stream_error: BaseException | None = None,
    ):
        if body is None:
            content = b''
        elif isinstance(body, bytes):
            content = body
        elif isinstance(body, str):
            content = body.encode()
        else:
            content = json.dumps(body).encode()
        self.status_code = status_code
        self.reason = reason
        self.content = content
        self.text = content.decode()
        self.lines = lines or []
        self.stream_error = stream_error
        self.closed = False

    def json(self) -> Any:
        return json.loads(self.content)

    async def acontent(self) -> bytes:
        return self.content

    async def aiter_lines(self):
        for line in self.lines:
            yield line.encode()
        if self.stream_error is not None:
            raise self.stream_error

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class Call:
    method: str
    url: str
    kwargs: dict[str, Any]

    @property
    def headers(self) -> dict[str, str]:
        return self.kwargs['headers']

    @property
    def body(self) -> Any:
        return self.kwargs['data']

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class FakeSession:
    """Replays queued responses; an exception is raised, a coroutine function awaited."""

    responses: list[Any] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)

    async def request(self, method: str, url: str, **kwargs: Any) -> Any:
        self.calls.append(Call(method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = await response()
        return response


def text_reply(*texts: str, role: str = 'model') -> FakeResponse:
    return FakeResponse(
        body={
            'candidates': [
                {
                    'content': {'role': role, 'parts': [{'text': text}]},
                    'finishReason': 'STOP',
                    'index': index,
                }
                for index, text in enumerate(texts)
            ],
            'usageMetadata': {'promptTokenCount': 1, 'candidatesTokenCount': 1, 'totalTokenCount': 2},
        }
    )


def sse_reply(*chunks: dict, error: BaseException | None = None) -> FakeResponse:
    lines = []
    for chunk in chunks:
        lines.append(f'data: {json.dumps(chunk)}')
        lines.append('')
    return FakeResponse(lines=lines, stream_error=error)


def text_chunk(text: str, finish_reason: str | None = None) -> dict:
    candidate: dict[str, Any] = {'content': {'role': 'model', 'parts': [{'text': text}]}, 'index': 0}
    if finish_reason:
        candidate['finishReason'] = finish_reason
    return {'candidates': [candidate]}


FUNC_PARAMS = {
    'model': 'my-model',
    'tools': [{'functionDeclarations': [{'name': 'myfunc'}]}],
    'toolConfig': {'functionCallingConfig': {'mode': 'NONE'}},
    'systemInstruction': {'role': 'system', 'parts': [{'text': 'be friendly'}]},
}


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def model(session: FakeSession) -> GenerativeModel:
    return GenerativeModel('apiKey', {'model': 'my-model'}, session=session)
