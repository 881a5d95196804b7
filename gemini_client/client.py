"""Top-level entry point holding the API key."""

from typing import Any

from gemini_client.config import RequestOptions
from gemini_client.errors import UserInputError
from gemini_client.models.request import ModelParams
from gemini_client.services.file_manager import GoogleAIFileManager
from gemini_client.services.generative_model import GenerativeModel


class GenerativeAI:
    """Factory for models and file managers sharing one API key and session."""

    def __init__(self, api_key: str, session: Any = None):
        self.api_key = api_key
        self.session = session

    def get_generative_model(
        self,
        model_params: ModelParams | dict,
        request_options: RequestOptions | None = None,
    ) -> GenerativeModel:
        if isinstance(model_params, dict) and not model_params.get("model"):
            raise UserInputError(
                "Must provide a model name. "
                "Example: client.get_generative_model({'model': 'my-model-name'})"
            )
        return GenerativeModel(
            self.api_key, model_params, request_options, session=self.session
        )

    def get_file_manager(
        self, request_options: RequestOptions | None = None
    ) -> GoogleAIFileManager:
        return GoogleAIFileManager(self.api_key, request_options, session=self.session)
