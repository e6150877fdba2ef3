"""
SiliconFlow provider (OpenAI-compatible chat completions).

API docs: https://docs.siliconflow.cn/cn/api-reference/chat-completions/chat-completions
"""

from typing import List

from .base import LLMModelInfo
from .openai_compatible import OpenAICompatibleProvider


class SiliconFlowProvider(OpenAICompatibleProvider):

    @property
    def name(self) -> str:
        return "siliconflow"

    @property
    def display_name(self) -> str:
        return "SiliconFlow"

    @property
    def base_url(self) -> str:
        return "https://api.siliconflow.cn/v1"

    @property
    def default_model(self) -> str:
        return "Qwen/Qwen3-14B"

    @property
    def supported_models(self) -> List[str]:
        return ["Qwen/Qwen3-14B", "deepseek-ai/DeepSeek-V3"]

    def get_available_models(self) -> List[LLMModelInfo]:
        return [
            LLMModelInfo(
                name="Qwen/Qwen3-14B",
                display_name="Qwen3 14B",
                description="General purpose model with strong Chinese support",
                max_context_length=32768,
            ),
            LLMModelInfo(
                name="deepseek-ai/DeepSeek-V3",
                display_name="DeepSeek V3",
                description="DeepSeek V3 hosted by SiliconFlow",
                max_context_length=65536,
            ),
        ]
