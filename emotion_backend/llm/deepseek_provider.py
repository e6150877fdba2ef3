"""
DeepSeek provider (OpenAI-compatible chat completions).

API docs: https://api-docs.deepseek.com
"""

from typing import List

from .base import LLMModelInfo
from .openai_compatible import OpenAICompatibleProvider


class DeepSeekProvider(OpenAICompatibleProvider):

    @property
    def name(self) -> str:
        return "deepseek"

    @property
    def display_name(self) -> str:
        return "DeepSeek"

    @property
    def base_url(self) -> str:
        return "https://api.deepseek.com/v1"

    @property
    def default_model(self) -> str:
        return "deepseek-chat"

    @property
    def supported_models(self) -> List[str]:
        return ["deepseek-chat"]

    def get_available_models(self) -> List[LLMModelInfo]:
        return [
            LLMModelInfo(
                name="deepseek-chat",
                display_name="DeepSeek Chat",
                description="DeepSeek chat model with strong reasoning",
                max_context_length=32768,
            )
        ]
