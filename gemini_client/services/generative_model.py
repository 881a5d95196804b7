"""GenerativeModel: the entry point for content generation."""

from collections.abc import AsyncIterator, Sequence
from typing import Any

from loguru import logger

from gemini_client.config import RequestOptions
from gemini_client.errors import ResponseError
from gemini_client.models.request import (
    BatchEmbedContentsRequest,
    Content,
    CountTokensRequest,
    EmbedContentRequest,
    GenerateContentRequest,
    GenerationParams,
    ModelParams,
    StartChatParams,
)
from gemini_client.models.response import (
    BatchEmbedContentsResponse,
    CountTokensResponse,
    EmbedContentResponse,
    GenerateContentResponse,
)
from gemini_client.services.chat_session import ChatSession
from gemini_client.services.params import (
    build_generate_content_body,
    format_generate_content_input,
    format_new_content,
    normalize_model_name,
    resolve_params,
)
from gemini_client.services.request import (
    RequestUrl,
    Task,
    make_request,
    parse_response,
    read_json,
)
from gemini_client.services.session import get_session
from gemini_client.services.streaming import iter_chunks


class GenerativeModel:
    """A model bound to a name, an API key and default generation params.

    The instance never changes after construction; chats started from it
    take a snapshot of its defaults.
    """

    def __init__(
        self,
        api_key: str,
        model_params: ModelParams | dict,
        request_options: RequestOptions | None = None,
        session: Any = None,
    ):
        params = ModelParams.model_validate(model_params)
        self.api_key = api_key
        self.model = normalize_model_name(params.model)
        self.defaults = resolve_params(params, None)
        self.request_options = request_options or RequestOptions()
        self._session = session

    @property
    def tools(self):
        return self.defaults.tools

    @property
    def tool_config(self):
        return self.defaults.toolConfig

    @property
    def system_instruction(self) -> Content | None:
        return self.defaults.systemInstruction

    @property
    def generation_config(self):
        return self.defaults.generationConfig

    @property
    def safety_settings(self):
        return self.defaults.safetySettings

    def __repr__(self) -> str:
        return f"GenerativeModel(model={self.model!r})"

    def request_url(self, task: Task, stream: bool = False) -> RequestUrl:
        return RequestUrl(
            model=self.model,
            task=task,
            api_key=self.api_key,
            stream=stream,
            api_version=self.request_options.resolved_api_version(),
            base_url=self.request_options.resolved_base_url(),
        )

    async def get_session(self) -> Any:
        if self._session is not None:
            return self._session
        return await get_session()

    async def send_generate_content(
        self, contents: list[Content], params: GenerationParams
    ) -> GenerateContentResponse:
        """Dispatch a generateContent call with already-resolved params.

        Raises ResponseError when the reply carries no candidates.
        """
        url = self.request_url(Task.GENERATE_CONTENT)
        body = build_generate_content_body(contents, params)
        response = await make_request(await self.get_session(), url, body)
        result = parse_response(read_json(response, url), GenerateContentResponse, url)
        if not result.candidates:
            reason = result.promptFeedback.blockReason if result.promptFeedback else None
            logger.warning(f"No candidates in response, block reason: {reason}")
            message = "Response has no candidates"
            if reason:
                message += f": prompt was blocked due to {reason}"
            raise ResponseError(message, result)
        return result

    async def send_generate_content_stream(
        self, contents: list[Content], params: GenerationParams
    ) -> AsyncIterator[GenerateContentResponse]:
        url = self.request_url(Task.STREAM_GENERATE_CONTENT, stream=True)
        body = build_generate_content_body(contents, params)
        response = await make_request(await self.get_session(), url, body, stream=True)
        return iter_chunks(response, url)

    async def generate_content(
        self, request: str | Any | Sequence[Any] | GenerateContentRequest
    ) -> GenerateContentResponse:
        """
        Generate a single-turn response.

        Args:
            request: A string, a part, a list of them, or a full request whose
                params override the model defaults

        Returns:
            The parsed response
        """
        request = format_generate_content_input(request)
        params = resolve_params(self.defaults, request)
        return await self.send_generate_content(request.contents, params)

    async def generate_content_stream(
        self, request: str | Any | Sequence[Any] | GenerateContentRequest
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream a single-turn response, yielding partial responses as they arrive."""
        request = format_generate_content_input(request)
        params = resolve_params(self.defaults, request)
        chunks = await self.send_generate_content_stream(request.contents, params)
        async for chunk in chunks:
            yield chunk

    async def count_tokens(
        self, request: str | Any | Sequence[Any] | CountTokensRequest
    ) -> CountTokensResponse:
        if not isinstance(request, CountTokensRequest):
            if isinstance(request, dict) and "contents" in request:
                request = CountTokensRequest.model_validate(request)
            else:
                request = CountTokensRequest(contents=[format_new_content(request)])
        url = self.request_url(Task.COUNT_TOKENS)
        response = await make_request(
            await self.get_session(), url, request.model_dump_json(exclude_none=True)
        )
        return parse_response(read_json(response, url), CountTokensResponse, url)

    async def embed_content(
        self, request: str | Any | Sequence[Any] | EmbedContentRequest
    ) -> EmbedContentResponse:
        request = self._format_embed_request(request)
        url = self.request_url(Task.EMBED_CONTENT)
        response = await make_request(
            await self.get_session(), url, request.model_dump_json(exclude_none=True)
        )
        return parse_response(read_json(response, url), EmbedContentResponse, url)

    async def batch_embed_contents(
        self, requests: Sequence[Any] | BatchEmbedContentsRequest
    ) -> BatchEmbedContentsResponse:
        """Embed several contents in one call; each request names this model."""
        if isinstance(requests, BatchEmbedContentsRequest):
            requests = requests.requests
        batch = BatchEmbedContentsRequest(
            requests=[
                self._format_embed_request(item).model_copy(update={"model": self.model})
                for item in requests
            ]
        )
        url = self.request_url(Task.BATCH_EMBED_CONTENTS)
        response = await make_request(
            await self.get_session(), url, batch.model_dump_json(exclude_none=True)
        )
        return parse_response(read_json(response, url), BatchEmbedContentsResponse, url)

    def start_chat(self, params: StartChatParams | dict | None = None) -> ChatSession:
        """
        Start a chat session.

        Args:
            params: Optional starting history and overrides for tools,
                tool config, system instruction and generation settings

        Returns:
            A new ChatSession
        """
        params = StartChatParams.model_validate(params or {})
        return ChatSession(
            model=self,
            params=resolve_params(self.defaults, params),
            history=params.history,
        )

    @staticmethod
    def _format_embed_request(request: Any) -> EmbedContentRequest:
        if isinstance(request, EmbedContentRequest):
            return request
        if isinstance(request, dict) and "content" in request:
            return EmbedContentRequest.model_validate(request)
        return EmbedContentRequest(content=format_new_content(request))

