"""
Emotion service - public entry point of the analysis engine.

Wires the orchestrator, batch processor and status reporter around one
registry and one settings service. Build it explicitly at startup with
`create_emotion_service`; there is no global instance.
"""

import logging
from typing import Any, Dict, List, Optional

from .batch_processor import DEFAULT_MAX_WORKERS, BatchProcessor
from .orchestrator import Orchestrator
from .result_cache import ResultCache
from .status import StatusReporter
from ..analysis.base import AnalysisMethod, AnalysisResult, MoodType, StrategyStatus
from ..analysis.llm_strategy import LLMAnalysisStrategy
from ..analysis.local_ai import LocalAIStrategy
from ..analysis.registry import StrategyRegistry
from ..analysis.rule_based import RuleBasedStrategy
from ..analysis.rule_engine import RuleEngine
from ..llm.client import LLMClient
from ..llm.deepseek_provider import DeepSeekProvider
from ..llm.siliconflow_provider import SiliconFlowProvider
from ..utils.config import load_config
from ..utils.logger import setup_logger
from ..utils.settings import AppSettings, SettingsService

logger = logging.getLogger(__name__)


class EmotionService:
    """
    Facade exposed to the UI layer.

    analyze_emotion_unified / analyze_emotions_unified are total: they
    never raise, failures surface as fallback or neutral results.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        settings: SettingsService,
        cache: Optional[ResultCache] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.registry = registry
        self.settings = settings
        self.orchestrator = Orchestrator(registry, settings, cache)
        self.batch_processor = BatchProcessor(self.orchestrator, max_workers=max_workers)
        self.status_reporter = StatusReporter(registry, settings)

    def analyze_emotion_unified(self, content: str) -> AnalysisResult:
        return self.orchestrator.analyze_emotion_unified(content)

    def analyze_emotions_unified(self, contents: List[str]) -> List[AnalysisResult]:
        return self.batch_processor.analyze_emotions_unified(contents)

    async def analyze_emotions_unified_async(self, contents: List[str]) -> List[AnalysisResult]:
        return await self.batch_processor.analyze_emotions_unified_async(contents)

    def get_strategy_status(self) -> StrategyStatus:
        return self.status_reporter.get_strategy_status()

    def clear_cache(self) -> None:
        self.orchestrator.clear_cache()

    def get_cache_stats(self) -> Dict[str, int]:
        return self.orchestrator.get_cache_stats()

    def get_emotion_advice(self, mood_type: MoodType, score: int) -> str:
        return RuleEngine.get_emotion_advice(mood_type, score)


def create_default_registry(llm_client: LLMClient, settings: SettingsService) -> StrategyRegistry:
    """Registry with the built-in rule, LLM and local-AI strategies."""
    registry = StrategyRegistry(RuleBasedStrategy())
    registry.register(AnalysisMethod.LLM, LLMAnalysisStrategy(llm_client, settings))
    registry.register(AnalysisMethod.LOCAL, LocalAIStrategy())
    return registry


def create_llm_client(llm_config: Dict[str, Any]) -> LLMClient:
    provider_config = {"timeout": llm_config.get("timeout", 30)}
    return LLMClient(
        providers=[SiliconFlowProvider(provider_config), DeepSeekProvider(provider_config)],
        health_check_ttl=llm_config.get("health_check_ttl", 60),
    )


def create_emotion_service(
    config: Optional[Dict[str, Any]] = None,
    settings: Optional[SettingsService] = None,
) -> EmotionService:
    """
    Build a fully wired service.

    Args:
        config: Loaded configuration (default: `load_config()`)
        settings: Existing settings service to share with the UI layer
    """
    config = config or load_config()
    setup_logger(level=config.get("log_level", "INFO"))
    settings = settings or SettingsService(AppSettings.from_config(config))

    llm_client = create_llm_client(config.get("llm") or {})
    registry = create_default_registry(llm_client, settings)

    cache_config = config.get("cache") or {}
    cache = ResultCache(
        max_size=cache_config.get("max_size", 100),
        ttl_seconds=cache_config.get("ttl_seconds", 24 * 3600),
    )
    batch_config = config.get("batch") or {}

    logger.info(
        f"Emotion service ready (method={settings.analysis_method.value}, "
        f"cache max_size={cache.max_size})"
    )
    return EmotionService(
        registry,
        settings,
        cache=cache,
        max_workers=batch_config.get("max_workers", DEFAULT_MAX_WORKERS),
    )
