"""Services for the client library."""

from .chat_session import ChatSession
from .file_manager import FilesTask, GoogleAIFileManager
from .generative_model import GenerativeModel
from .request import RequestUrl, Task, make_request
from .session import close_session, get_session

__all__ = [
    "ChatSession",
    "FilesTask",
    "GoogleAIFileManager",
    "GenerativeModel",
    "RequestUrl",
    "Task",
    "make_request",
    "close_session",
    "get_session",
]
