"""Async client for the Generative Language REST API."""

__version__ = "0.1.0"

from loguru import logger

from .client import GenerativeAI
from .config import RequestOptions, Settings, settings
from .errors import GenerativeAIError, RequestError, ResponseError, UserInputError
from .services import (
    ChatSession,
    GenerativeModel,
    GoogleAIFileManager,
    RequestUrl,
    Task,
    close_session,
)

# Silent unless the application opts in via log.configure_logging()
logger.disable(__name__)

__all__ = [
    "__version__",
    "GenerativeAI",
    "RequestOptions",
    "Settings",
    "settings",
    "GenerativeAIError",
    "RequestError",
    "ResponseError",
    "UserInputError",
    "ChatSession",
    "GenerativeModel",
    "GoogleAIFileManager",
    "RequestUrl",
    "Task",
    "close_session",
]
