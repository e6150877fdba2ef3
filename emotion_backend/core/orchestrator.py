"""
Orchestrator module - single-item emotion analysis with fallback.

Flow: Input -> Blank check -> Cache -> Primary strategy -> Rule fallback -> Neutral.
The fallback chain has at most two steps, so it cannot recurse.
"""

import logging
from typing import Optional, Union

from .result_cache import DEFAULT_MAX_SIZE, DEFAULT_TTL_SECONDS, ResultCache, make_cache_key
from ..analysis.base import AnalysisMethod, AnalysisResult, AnalysisStrategy
from ..analysis.registry import StrategyRegistry
from ..utils.settings import SettingsService

logger = logging.getLogger(__name__)


def is_blank(content: Optional[str]) -> bool:
    return not content or not content.strip()


def method_id(method: Union[AnalysisMethod, str]) -> str:
    return method.value if isinstance(method, AnalysisMethod) else str(method)


class Orchestrator:
    """
    Coordinates strategy selection, fallback and caching for one text.

    Owns the result cache; the batch processor reaches it only through
    `lookup` and `remember`.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        settings: SettingsService,
        cache: Optional[ResultCache] = None,
    ):
        self.registry = registry
        self.settings = settings
        self._cache = cache if cache is not None else ResultCache(DEFAULT_MAX_SIZE, DEFAULT_TTL_SECONDS)

    def current_method(self) -> str:
        """Configured method, read fresh on every call."""
        return method_id(self.settings.analysis_method)

    def lookup(self, key: str) -> Optional[AnalysisResult]:
        result = self._cache.get(key)
        if result is not None:
            logger.debug(f"Cache hit for {key[:16]}...")
        return result

    def remember(self, key: str, result: AnalysisResult) -> None:
        self._cache.put(key, result)

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_stats(self) -> dict:
        return self._cache.stats()

    def analyze_emotion_unified(self, content: str) -> AnalysisResult:
        """
        Analyze one text with the configured method. Never raises.

        Blank content returns the neutral result without touching the cache
        or any strategy.
        """
        if is_blank(content):
            return AnalysisResult.neutral()

        method = self.current_method()
        key = make_cache_key(content, method)
        cached = self.lookup(key)
        if cached is not None:
            return cached
        return self.analyze_uncached(content, method, key)

    def analyze_uncached(self, content: str, method: str, key: str) -> AnalysisResult:
        """Run the fallback chain and cache any strategy result under `key`."""
        result = self._run_chain(content, method)
        if result is None:
            return AnalysisResult.neutral()
        self.remember(key, result)
        return result

    def _run_chain(self, content: str, method: str) -> Optional[AnalysisResult]:
        primary = self.registry.resolve(method)
        rule = self.registry.rule_strategy

        if primary is rule:
            return self._attempt(rule, content)

        if self._probe(primary):
            result = self._attempt(primary, content)
            if result is not None:
                return result
            logger.warning(f"Strategy '{primary.strategy_name}' failed, falling back to rule analysis")
        else:
            logger.info(f"Strategy '{primary.strategy_name}' unavailable, using rule analysis")

        return self._attempt(rule, content)

    @staticmethod
    def _probe(strategy: AnalysisStrategy) -> bool:
        try:
            return bool(strategy.is_available())
        except Exception as e:
            logger.warning(f"Availability check of '{strategy.strategy_name}' failed: {e}")
            return False

    @staticmethod
    def _attempt(strategy: AnalysisStrategy, content: str) -> Optional[AnalysisResult]:
        try:
            return strategy.analyze(content)
        except Exception as e:
            logger.warning(f"Strategy '{strategy.strategy_name}' raised: {e}")
            return None
