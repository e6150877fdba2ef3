"""
Unified LLM client.

Holds the provider registry and adds the resilience layer around raw
providers: API key checks, a per-provider circuit breaker, and a short
TTL on connection test results so availability probes do not hit the
network on every analysis.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .base import LLMError, LLMProvider
from .circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

# Preferred order when no provider is configured
PROVIDER_PRIORITY = ["siliconflow", "deepseek"]


class LLMClient:
    """
    Registry and call gateway for LLM providers.

    Usage:
        client = LLMClient()
        client.register_provider(SiliconFlowProvider())
        text = client.generate_text("siliconflow", prompt, api_key="sk-...")
    """

    def __init__(
        self,
        providers: Optional[List[LLMProvider]] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        health_check_ttl: float = 60.0,
        clock: Callable[[], float] = time.time,
    ):
        self._providers: Dict[str, LLMProvider] = {}
        for provider in providers or []:
            self.register_provider(provider)
        self.circuit_breaker = circuit_breaker or CircuitBreaker()
        self.health_check_ttl = health_check_ttl
        self._clock = clock
        # (provider, api_key) -> (healthy, checked_at)
        self._health: Dict[Tuple[str, Optional[str]], Tuple[bool, float]] = {}
        self._lock = threading.Lock()

    @property
    def available_providers(self) -> List[str]:
        return list(self._providers.keys())

    def register_provider(self, provider: LLMProvider, name: Optional[str] = None) -> None:
        key = name or provider.name
        self._providers[key] = provider
        logger.debug(f"Registered LLM provider: {key}")

    def get_provider(self, name: str) -> Optional[LLMProvider]:
        return self._providers.get(name)

    def _require_provider(self, name: str) -> LLMProvider:
        provider = self._providers.get(name)
        if provider is None:
            raise LLMError(f"Unknown provider: {name}", provider_name=name)
        return provider

    def generate_text(
        self,
        provider_name: str,
        prompt: str,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Call a provider.

        Raises:
            LLMError: unknown provider, missing key, open circuit or provider failure
        """
        provider = self._require_provider(provider_name)

        if provider.requires_api_key and not api_key:
            raise LLMError(
                f"API key required for provider: {provider_name}", provider_name=provider_name
            )

        if not self.circuit_breaker.can_execute(provider_name):
            raise LLMError(
                f"Circuit open for provider: {provider_name}", provider_name=provider_name
            )

        try:
            text = provider.generate_text(
                prompt=prompt, model=model, api_key=api_key, parameters=parameters
            )
        except LLMError as e:
            self.circuit_breaker.record_failure(provider_name)
            logger.warning(f"LLM call failed: {provider_name} - {e}")
            raise

        self.circuit_breaker.record_success(provider_name)
        logger.debug(f"LLM call successful: {provider_name}")
        return text

    def test_provider_connection(self, provider_name: str, api_key: Optional[str] = None) -> bool:
        """Connection test with TTL caching. Never raises."""
        provider = self._providers.get(provider_name)
        if provider is None:
            return False
        if not self.circuit_breaker.can_execute(provider_name):
            return False

        cache_key = (provider_name, api_key)
        now = self._clock()
        with self._lock:
            cached = self._health.get(cache_key)
        if cached is not None and now - cached[1] < self.health_check_ttl:
            return cached[0]

        try:
            healthy = bool(provider.test_connection(api_key=api_key))
        except Exception as e:
            logger.warning(f"Provider connection test failed: {provider_name} - {e}")
            healthy = False

        with self._lock:
            self._health[cache_key] = (healthy, now)
        return healthy

    def invalidate_health(self) -> None:
        """Forget cached connection test results (e.g. after a key change)."""
        with self._lock:
            self._health.clear()

    def get_provider_info(self, provider_name: str) -> Dict[str, Any]:
        provider = self._require_provider(provider_name)
        return {
            "name": provider.name,
            "display_name": provider.display_name,
            "base_url": provider.base_url,
            "requires_api_key": provider.requires_api_key,
            "default_model": provider.default_model,
            "supported_models": list(provider.supported_models),
        }

    def get_all_providers_info(self) -> Dict[str, Dict[str, Any]]:
        return {name: self.get_provider_info(name) for name in self._providers}

    def get_best_provider(self, exclude: Optional[List[str]] = None) -> Optional[str]:
        """Pick a provider by static priority, skipping excluded ones."""
        excluded = set(exclude or [])
        candidates = [name for name in self._providers if name not in excluded]
        if not candidates:
            return None
        for name in PROVIDER_PRIORITY:
            if name in candidates:
                return name
        return candidates[0]
