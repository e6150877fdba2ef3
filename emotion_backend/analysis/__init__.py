"""
Analysis strategies for the emotion backend.

- base: data model, strategy interface, BatchCapable marker, errors
- rule_engine / rule_based: offline keyword analysis (always available)
- llm_strategy: remote LLM analysis (batch capable)
- local_ai: reserved on-device analysis (never available)
- registry: identifier -> strategy mapping with rule default
"""

from .base import (
    AnalysisError,
    AnalysisMethod,
    AnalysisResult,
    AnalysisStrategy,
    BatchCapable,
    ConfigurationUnavailableError,
    MoodType,
    StrategyExecutionError,
    StrategyStatus,
)
from .llm_strategy import LLMAnalysisStrategy
from .local_ai import LocalAIStrategy
from .registry import StrategyRegistry
from .rule_based import RuleBasedStrategy
from .rule_engine import RuleEngine

__all__ = [
    "AnalysisError",
    "AnalysisMethod",
    "AnalysisResult",
    "AnalysisStrategy",
    "BatchCapable",
    "ConfigurationUnavailableError",
    "MoodType",
    "StrategyExecutionError",
    "StrategyStatus",
    "LLMAnalysisStrategy",
    "LocalAIStrategy",
    "StrategyRegistry",
    "RuleBasedStrategy",
    "RuleEngine",
]
