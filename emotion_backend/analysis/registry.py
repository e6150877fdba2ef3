"""
Strategy registry.

Maps method identifiers ('rule', 'llm', 'local', or any custom one) to
shared strategy instances. The rule strategy is mandatory: it is the
default for unknown identifiers and the fallback target of all others.
"""

import logging
from typing import Dict, List, Optional, Union

from .base import AnalysisMethod, AnalysisStrategy

logger = logging.getLogger(__name__)

MethodKey = Union[AnalysisMethod, str]


def _identifier(method: MethodKey) -> str:
    return method.value if isinstance(method, AnalysisMethod) else str(method)


class StrategyRegistry:
    """
    Registry of analysis strategies keyed by identifier.

    Usage:
        registry = StrategyRegistry(RuleBasedStrategy())
        registry.register("llm", LLMAnalysisStrategy(client, settings))
        strategy = registry.resolve(settings.analysis_method)
    """

    RULE = AnalysisMethod.RULE.value

    def __init__(self, rule_strategy: AnalysisStrategy):
        self._strategies: Dict[str, AnalysisStrategy] = {self.RULE: rule_strategy}

    @property
    def rule_strategy(self) -> AnalysisStrategy:
        return self._strategies[self.RULE]

    def register(self, method: MethodKey, strategy: AnalysisStrategy) -> None:
        identifier = _identifier(method)
        self._strategies[identifier] = strategy
        logger.debug(f"Registered strategy '{strategy.strategy_name}' for method '{identifier}'")

    def unregister(self, method: MethodKey) -> bool:
        """Remove a strategy. The rule strategy cannot be removed."""
        identifier = _identifier(method)
        if identifier == self.RULE:
            raise ValueError("The rule strategy cannot be unregistered")
        return self._strategies.pop(identifier, None) is not None

    def get(self, method: MethodKey) -> Optional[AnalysisStrategy]:
        return self._strategies.get(_identifier(method))

    def resolve(self, method: MethodKey) -> AnalysisStrategy:
        """Strategy for a method, defaulting to rule for unknown identifiers."""
        strategy = self.get(method)
        if strategy is None:
            logger.warning(f"Unknown analysis method '{_identifier(method)}', using rule analysis")
            return self.rule_strategy
        return strategy

    def is_registered(self, method: MethodKey) -> bool:
        return _identifier(method) in self._strategies

    def list_methods(self) -> List[str]:
        return list(self._strategies.keys())
