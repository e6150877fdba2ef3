"""
On-device model strategy (reserved).

Never available and never succeeds; the orchestrator handles it like any
other unavailable backend.
"""

from typing import List

from .base import AnalysisResult, AnalysisStrategy, StrategyExecutionError


class LocalAIStrategy(AnalysisStrategy):

    @property
    def strategy_name(self) -> str:
        return "local_ai"

    @property
    def description(self) -> str:
        return "On-device model analysis, balances accuracy and privacy"

    @property
    def requires_network(self) -> bool:
        return False

    @property
    def required_configs(self) -> List[str]:
        return ["model_path", "hardware_acceleration"]

    @property
    def estimated_duration_ms(self) -> int:
        return 1000

    @property
    def confidence_baseline(self) -> float:
        return 0.8

    def is_available(self) -> bool:
        return False

    def validate_config(self) -> bool:
        return False

    def analyze(self, content: str) -> AnalysisResult:
        raise StrategyExecutionError("Local AI analysis is not implemented yet")
