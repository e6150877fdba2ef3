"""
Strategy status reporting for the settings surface.

Errors during the availability probe are reported as data, never raised.
"""

import logging

from .orchestrator import method_id
from ..analysis.base import AnalysisMethod, StrategyStatus
from ..analysis.registry import StrategyRegistry
from ..utils.settings import SettingsService

logger = logging.getLogger(__name__)


class StatusReporter:

    def __init__(self, registry: StrategyRegistry, settings: SettingsService):
        self.registry = registry
        self.settings = settings

    def _rule_available(self) -> bool:
        try:
            return bool(self.registry.rule_strategy.is_available())
        except Exception as e:
            logger.warning(f"Rule strategy availability check failed: {e}")
            return False

    def get_strategy_status(self) -> StrategyStatus:
        method = method_id(self.settings.analysis_method)
        is_rule = method == AnalysisMethod.RULE.value
        try:
            strategy = self.registry.resolve(method)
            available = bool(strategy.is_available())
        except Exception as e:
            logger.warning(f"Status check of '{method}' failed: {e}")
            can_fallback = not is_rule and self._rule_available()
            return StrategyStatus(
                method=method,
                is_available=False,
                status_message=f"Could not check the '{method}' analysis method",
                can_fallback=can_fallback,
                error_details=str(e),
            )

        if available:
            return StrategyStatus(
                method=method,
                is_available=True,
                status_message=f"{strategy.description}: ready",
            )

        can_fallback = not is_rule and self._rule_available()
        if can_fallback:
            message = (
                f"'{method}' analysis is unavailable; rule-based analysis will be used automatically"
            )
        else:
            message = f"'{method}' analysis is unavailable"
        return StrategyStatus(
            method=method,
            is_available=False,
            status_message=message,
            can_fallback=can_fallback,
        )
