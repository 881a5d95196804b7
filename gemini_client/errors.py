"""Exceptions raised by the client library."""

from typing import Any


class GenerativeAIError(Exception):
    """Base class for every error raised by this library."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RequestError(GenerativeAIError):
    """A request could not be completed.

    Raised for transport failures, non-2xx replies and undecodable bodies.
    ``status_code`` and ``status_text`` are only set for HTTP-level failures.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
        error_details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.error_details = error_details


class ResponseError(GenerativeAIError):
    """The service answered successfully but the reply is unusable."""

    def __init__(self, message: str, response: Any = None):
        super().__init__(message)
        self.response = response


class UserInputError(GenerativeAIError, ValueError):
    """Invalid arguments supplied by the caller."""
