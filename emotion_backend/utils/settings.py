"""
Settings service: the configuration provider of the analysis engine.

Strategies and the orchestrator read `current_settings` on every call,
so an update through the service takes effect on the next analysis.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from ..analysis.base import AnalysisMethod
from .secrets import get_api_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppSettings:
    """User-selected analysis settings."""
    analysis_method: AnalysisMethod = AnalysisMethod.RULE
    llm_provider: Optional[str] = None
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None

    @property
    def is_llm_configured(self) -> bool:
        return bool(self.llm_provider) and bool(self.llm_api_key)

    def validation_errors(self) -> List[str]:
        errors = []
        if self.analysis_method is AnalysisMethod.LLM:
            if not self.llm_provider:
                errors.append("LLM analysis requires a provider")
            if not self.llm_api_key:
                errors.append("LLM analysis requires an API key")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view; the API key is masked."""
        return {
            "analysis_method": self.analysis_method.value,
            "llm_provider": self.llm_provider,
            "llm_api_key": "***" if self.llm_api_key else None,
            "llm_model": self.llm_model,
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AppSettings":
        """
        Build settings from a loaded configuration.

        The API key comes from the config if present, else from the keyring.
        """
        llm_config = config.get("llm") or {}
        provider = llm_config.get("provider")
        api_key = llm_config.get("api_key")
        if provider and not api_key:
            api_key = get_api_key(provider)
        return cls(
            analysis_method=AnalysisMethod.from_value(config.get("analysis_method")),
            llm_provider=provider,
            llm_api_key=api_key,
            llm_model=llm_config.get("model"),
        )


class SettingsService:
    """Thread-safe holder of the current AppSettings."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or AppSettings()
        self._lock = threading.Lock()

    @property
    def current_settings(self) -> AppSettings:
        with self._lock:
            return self._settings

    @property
    def analysis_method(self) -> AnalysisMethod:
        return self.current_settings.analysis_method

    def _update(self, **changes) -> AppSettings:
        with self._lock:
            self._settings = replace(self._settings, **changes)
            return self._settings

    def update_analysis_method(
        self, method: AnalysisMethod, llm_provider: Optional[str] = None
    ) -> AppSettings:
        """Switch the analysis method; a provider is only kept for LLM analysis."""
        if method is AnalysisMethod.LLM:
            provider = llm_provider or self.current_settings.llm_provider
        else:
            provider = None
        logger.info(f"Analysis method set to {method.value}")
        return self._update(analysis_method=method, llm_provider=provider)

    def update_llm_provider(self, provider: str) -> AppSettings:
        if self.analysis_method is not AnalysisMethod.LLM:
            raise ValueError("Cannot update LLM provider when not using LLM analysis")
        return self._update(llm_provider=provider)

    def update_llm_config(
        self, api_key: Optional[str] = None, model: Optional[str] = None
    ) -> AppSettings:
        changes = {}
        if api_key is not None:
            changes["llm_api_key"] = api_key
        if model is not None:
            changes["llm_model"] = model
        return self._update(**changes)

    def reset_to_defaults(self) -> AppSettings:
        with self._lock:
            self._settings = AppSettings()
            return self._settings
