"""Chat sessions with serialized sends over a shared history."""

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from gemini_client.errors import ResponseError
from gemini_client.models.request import Content, GenerationParams
from gemini_client.models.response import GenerateContentResponse
from gemini_client.services.params import format_new_content, validate_chat_history
from gemini_client.services.streaming import aggregate_responses

if TYPE_CHECKING:
    from gemini_client.services.generative_model import GenerativeModel


# Marks the end of a stream handed to the consumer
_STREAM_END = object()


def reply_content(response: GenerateContentResponse) -> Content:
    """Return the first candidate's content as a ``model`` turn.

    Further candidates are ignored. Raises ResponseError when there is no
    candidate or its content has no parts.
    """
    if not response.candidates:
        raise ResponseError("Response has no candidates", response)
    if len(response.candidates) > 1:
        logger.debug(
            f"Response has {len(response.candidates)} candidates, using the first"
        )
    content = response.candidates[0].content
    if content is None or not content.parts:
        reason = response.candidates[0].finishReason
        raise ResponseError(
            f"First candidate has no content (finish reason: {reason})", response
        )
    return content.model_copy(update={"role": "model"}, deep=True)


class ChatSession:
    """
    One conversation with a model.

    Sends run one at a time in the order they were made; a send waiting on
    the lock sees the history either before or after the previous exchange,
    never in between. A failed send leaves the history untouched.
    """

    def __init__(
        self,
        model: "GenerativeModel",
        params: GenerationParams,
        history: Sequence[Content | dict] | None = None,
    ):
        self.model = model
        self.params = params
        self._history = [
            content.model_copy(deep=True) for content in validate_chat_history(history)
        ]
        self._lock = asyncio.Lock()
        self._stream_tasks: set[asyncio.Task] = set()

    @property
    def history(self) -> list[Content]:
        """A copy of the committed history."""
        return [content.model_copy(deep=True) for content in self._history]

    async def get_history(self) -> list[Content]:
        """Wait for in-flight sends to finish, then return a copy of the history."""
        async with self._lock:
            return self.history

    async def send_message(
        self, request: str | Any | Sequence[Any]
    ) -> GenerateContentResponse:
        """
        Send a message and record the exchange.

        Args:
            request: A string, a part, or a list of them

        Returns:
            The model response

        Raises:
            RequestError: if the call fails
            ResponseError: if the reply has no usable candidate
        """
        new_content = format_new_content(request)
        async with self._lock:
            contents = [*self._history, new_content]
            response = await self.model.send_generate_content(contents, self.params)
            reply = reply_content(response)
            self._history = [*self._history, new_content, reply]
            return response

    async def send_message_stream(
        self, request: str | Any | Sequence[Any]
    ) -> AsyncIterator[GenerateContentResponse]:
        """Send a message and yield the reply as it streams in.

        The stream is read to the end by a task the session owns, whether or
        not the caller keeps iterating. Once it is exhausted, the aggregated
        reply is recorded the same way as for :meth:`send_message` and the
        session takes its next send.
        """
        new_content = format_new_content(request)
        await self._lock.acquire()
        try:
            contents = [*self._history, new_content]
            chunks = await self.model.send_generate_content_stream(
                contents, self.params
            )
        except BaseException:
            self._lock.release()
            raise

        queue: asyncio.Queue = asyncio.Queue()
        task = asyncio.create_task(self._collect_stream(new_content, chunks, queue))
        self._stream_tasks.add(task)
        task.add_done_callback(self._stream_tasks.discard)

        while True:
            item = await queue.get()
            if item is _STREAM_END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    async def _collect_stream(
        self,
        new_content: Content,
        chunks: AsyncIterator[GenerateContentResponse],
        queue: asyncio.Queue,
    ) -> None:
        """Read a reply stream to the end, commit the exchange and free the session.

        Chunks and the outcome go to ``queue``; the lock taken by
        :meth:`send_message_stream` is released here.
        """
        try:
            received = []
            async for chunk in chunks:
                received.append(chunk)
                queue.put_nowait(chunk)
            reply = reply_content(aggregate_responses(received))
            self._history = [*self._history, new_content, reply]
            queue.put_nowait(_STREAM_END)
        except asyncio.CancelledError as e:
            queue.put_nowait(e)
            raise
        except Exception as e:
            logger.debug(f"Streamed reply failed: {e}")
            queue.put_nowait(e)
        finally:
            self._lock.release()
