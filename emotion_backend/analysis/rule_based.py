"""
Rule-based strategy: offline keyword analysis.

Always available; serves both as a primary option and as the fallback
target of every other strategy.
"""

from typing import Optional

from .base import AnalysisResult, AnalysisStrategy
from .rule_engine import RuleEngine


class RuleBasedStrategy(AnalysisStrategy):
    """Adapter from RuleEngine output to AnalysisResult."""

    def __init__(self, engine: Optional[RuleEngine] = None):
        self.engine = engine or RuleEngine()

    @property
    def strategy_name(self) -> str:
        return "rule_based"

    @property
    def description(self) -> str:
        return "Fast keyword and rule based analysis, works offline"

    @property
    def requires_network(self) -> bool:
        return False

    @property
    def estimated_duration_ms(self) -> int:
        return 50

    @property
    def confidence_baseline(self) -> float:
        return 0.7

    def is_available(self) -> bool:
        return True

    def analyze(self, content: str) -> AnalysisResult:
        analysis = self.engine.analyze(content)
        return AnalysisResult.from_rule_analysis(
            mood_type=analysis.mood_type,
            emotion_score=analysis.score,
            confidence=analysis.confidence,
        )
