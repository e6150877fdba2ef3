"""
Base provider interface for LLM text generation.

This module defines the abstract base class and data structures shared by
all LLM providers (SiliconFlow, DeepSeek, other OpenAI-compatible APIs).
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


class LLMError(Exception):
    """
    Error raised by an LLM provider or the LLM client.

    Attributes:
        message: Human readable description
        provider_name: Provider that failed, when known
        status_code: HTTP status code, when the API answered
        error_code: Provider-specific error code, when given
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider_name = provider_name
        self.status_code = status_code
        self.error_code = error_code

    def __str__(self) -> str:
        parts = [f"LLMError: {self.message}"]
        if self.provider_name:
            parts.append(f"(Provider: {self.provider_name})")
        if self.status_code is not None:
            parts.append(f"(Status: {self.status_code})")
        if self.error_code:
            parts.append(f"(Code: {self.error_code})")
        return " ".join(parts)


@dataclass
class LLMModelInfo:
    """Description of a model offered by a provider."""
    name: str
    display_name: str
    description: str = ""
    max_context_length: int = 4096
    supports_chinese: bool = True
    is_available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LLMModelInfo":
        return cls(
            name=data["name"],
            display_name=data.get("display_name") or data["name"],
            description=data.get("description", ""),
            max_context_length=data.get("max_context_length", 4096),
            supports_chinese=data.get("supports_chinese", True),
            is_available=data.get("is_available", True),
        )


class LLMProvider(ABC):
    """Abstract base class for LLM providers (model agnostic)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier for registry, logging and key storage."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        pass

    @property
    @abstractmethod
    def base_url(self) -> str:
        pass

    @property
    def requires_api_key(self) -> bool:
        return True

    @property
    @abstractmethod
    def default_model(self) -> str:
        pass

    @property
    @abstractmethod
    def supported_models(self) -> List[str]:
        pass

    @abstractmethod
    def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Generate a completion for a prompt.

        Returns:
            The stripped, non-empty completion text

        Raises:
            LLMError: on transport, HTTP or empty-response errors
        """

    @abstractmethod
    def test_connection(self, api_key: Optional[str] = None) -> bool:
        """Check that the API is reachable with the given key. Never raises."""

    @abstractmethod
    def get_available_models(self) -> List[LLMModelInfo]:
        pass

    def estimate_cost(
        self, input_tokens: int, output_tokens: int, model: Optional[str] = None
    ) -> Optional[float]:
        """Estimated call cost, None when the provider publishes no pricing."""
        return None
