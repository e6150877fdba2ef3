"""
LLM capability for the emotion backend.

Providers implement an OpenAI-compatible chat completions client:
- SiliconFlow (default)
- DeepSeek

Use the LLMClient as the single entry point:
    from emotion_backend.llm import LLMClient, SiliconFlowProvider
    client = LLMClient([SiliconFlowProvider()])
"""

from .base import LLMError, LLMModelInfo, LLMProvider
from .circuit_breaker import CircuitBreaker, CircuitState
from .client import LLMClient
from .deepseek_provider import DeepSeekProvider
from .openai_compatible import OpenAICompatibleProvider
from .prompts import ResponseFormatError
from .siliconflow_provider import SiliconFlowProvider

__all__ = [
    "LLMError",
    "LLMModelInfo",
    "LLMProvider",
    "CircuitBreaker",
    "CircuitState",
    "LLMClient",
    "DeepSeekProvider",
    "OpenAICompatibleProvider",
    "ResponseFormatError",
    "SiliconFlowProvider",
]
