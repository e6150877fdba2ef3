"""
LLM strategy: emotion analysis by a remote large language model.

Results keep the three-way mood classification so they stay compatible
with rule-based results.
"""

import logging
from typing import Any, Dict, List

from .base import (
    AnalysisMethod,
    AnalysisResult,
    AnalysisStrategy,
    BatchCapable,
    ConfigurationUnavailableError,
    MoodType,
    StrategyExecutionError,
)
from ..llm import prompts
from ..llm.base import LLMError
from ..llm.client import LLMClient
from ..utils.settings import SettingsService

logger = logging.getLogger(__name__)

SINGLE_PARAMETERS = {"max_tokens": 500, "temperature": 0.3}
BATCH_PARAMETERS = {"max_tokens": 2000, "temperature": 0.3}


class LLMAnalysisStrategy(AnalysisStrategy, BatchCapable):
    """
    Analysis through the provider selected in settings.

    Settings are read on every call; the strategy itself holds no state.
    """

    def __init__(self, llm_client: LLMClient, settings: SettingsService):
        self.llm_client = llm_client
        self.settings = settings

    @property
    def strategy_name(self) -> str:
        return "llm_analysis"

    @property
    def description(self) -> str:
        return "Analysis by a large language model, requires network"

    @property
    def requires_network(self) -> bool:
        return True

    @property
    def required_configs(self) -> List[str]:
        return ["llm_provider", "llm_api_key"]

    @property
    def estimated_duration_ms(self) -> int:
        return 5000

    @property
    def confidence_baseline(self) -> float:
        return 0.8

    def is_available(self) -> bool:
        current = self.settings.current_settings
        if not current.is_llm_configured:
            return False
        return self.llm_client.test_provider_connection(
            current.llm_provider, api_key=current.llm_api_key
        )

    def validate_config(self) -> bool:
        return self.is_available()

    def _generate(self, prompt: str, parameters: Dict[str, Any]) -> str:
        current = self.settings.current_settings
        if not current.is_llm_configured:
            raise ConfigurationUnavailableError("LLM provider or API key not configured")
        logger.debug(f"LLM analysis via {current.llm_provider}")
        try:
            return self.llm_client.generate_text(
                current.llm_provider,
                prompt,
                api_key=current.llm_api_key,
                model=current.llm_model,
                parameters=parameters,
            )
        except LLMError as e:
            raise StrategyExecutionError(f"LLM analysis failed: {e}") from e

    @staticmethod
    def _to_result(data: Dict[str, Any]) -> AnalysisResult:
        return AnalysisResult(
            mood_type=MoodType.from_value(data["moodType"]),
            emotion_score=int(data["emotionScore"]),
            extracted_tags=tuple(data["extractedTags"]),
            reasoning=data["reasoning"],
            analysis_method=AnalysisMethod.LLM.value,
            confidence=float(data["confidence"]),
        )

    def analyze(self, content: str) -> AnalysisResult:
        if not content or not content.strip():
            raise StrategyExecutionError("Content cannot be empty for LLM analysis")

        response = self._generate(prompts.generate_prompt(content), SINGLE_PARAMETERS)
        try:
            return self._to_result(prompts.parse_response(response))
        except ValueError as e:
            raise StrategyExecutionError(f"Unusable LLM response: {e}") from e

    def analyze_batch(self, contents: List[str]) -> List[AnalysisResult]:
        if not contents:
            return []
        if len(contents) == 1:
            return [self.analyze(contents[0])]

        logger.debug(f"LLM batch analysis of {len(contents)} entries")
        response = self._generate(prompts.generate_batch_prompt(contents), BATCH_PARAMETERS)
        try:
            items = prompts.parse_batch_response(response, len(contents))
            return [self._to_result(item) for item in items]
        except ValueError as e:
            raise StrategyExecutionError(f"Unusable LLM batch response: {e}") from e
