"""
Shared implementation for providers exposing an OpenAI-compatible
chat completions API.

Every request carries an explicit timeout (default 30s, 10s for the
connection probe).
"""

import time
from typing import Any, Dict, List, Optional

import requests

from .base import LLMError, LLMModelInfo, LLMProvider
from ..utils.logger import logger

_STATUS_MESSAGES = {
    400: "Invalid request parameters",
    401: "API key is invalid or expired",
    429: "Rate limit exceeded, retry later",
    503: "Service temporarily unavailable, retry later",
}


class OpenAICompatibleProvider(LLMProvider):
    """
    Base for OpenAI-style providers.

    Subclasses only declare name, URL and models. Config keys:
        - timeout: Request timeout in seconds (default: 30)
        - max_tokens: Default completion budget (default: 1000)
        - temperature: Default sampling temperature (default: 0.7)
    """

    HEALTH_CHECK_TIMEOUT = 10

    def __init__(self, config: Optional[Dict] = None):
        config = config or {}
        self.timeout = config.get("timeout", 30)
        self.max_tokens = config.get("max_tokens", 1000)
        self.temperature = config.get("temperature", 0.7)

    def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> str:
        if self.requires_api_key and not api_key:
            raise LLMError(f"{self.display_name} API key is required", provider_name=self.name)

        payload = {
            "model": model or self.default_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "stream": False,
            **(parameters or {}),
        }

        start_time = time.time()
        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise LLMError(
                f"{self.display_name} request timed out, check the network connection",
                provider_name=self.name,
            ) from e
        except requests.exceptions.RequestException as e:
            raise LLMError(
                f"{self.display_name} network error: {e}", provider_name=self.name
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"{self.name} answered {response.status_code} in {latency_ms}ms")

        if response.status_code != 200:
            message = _STATUS_MESSAGES.get(
                response.status_code,
                f"{self.display_name} API returned status {response.status_code}",
            )
            raise LLMError(message, provider_name=self.name, status_code=response.status_code)

        return self._extract_content(response)

    def _extract_content(self, response) -> str:
        try:
            data = response.json()
            choices = data["choices"]
        except (ValueError, KeyError, TypeError) as e:
            raise LLMError(
                f"Malformed response from {self.display_name}: {e}", provider_name=self.name
            ) from e

        if not choices:
            raise LLMError(
                f"No response choices returned from {self.display_name}", provider_name=self.name
            )

        content = (choices[0].get("message") or {}).get("content") or ""
        if not content.strip():
            raise LLMError(
                f"Empty response content from {self.display_name}", provider_name=self.name
            )
        return content.strip()

    def test_connection(self, api_key: Optional[str] = None) -> bool:
        """
        Lightweight reachability check on the models endpoint.
        A rate limited API is reachable, so 429 counts as healthy.
        """
        if self.requires_api_key and not api_key:
            return False
        try:
            response = requests.get(
                f"{self.base_url}/models",
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.HEALTH_CHECK_TIMEOUT,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"{self.name} health check timed out")
            return False
        except requests.exceptions.RequestException as e:
            logger.warning(f"{self.name} health check failed: {e}")
            return False

        if response.status_code == 401:
            logger.error(f"{self.name} API key is invalid")
            return False
        if response.status_code == 429:
            logger.warning(f"{self.name} rate limit hit during health check")
            return True
        return response.status_code == 200

    def get_available_models(self) -> List[LLMModelInfo]:
        return [
            LLMModelInfo(name=model, display_name=model) for model in self.supported_models
        ]
