"""
Unit tests for LLMAnalysisStrategy.
"""

import json
from unittest.mock import MagicMock

import pytest

from emotion_backend.analysis.base import (
    AnalysisMethod,
    BatchCapable,
    ConfigurationUnavailableError,
    MoodType,
    StrategyExecutionError,
)
from emotion_backend.analysis.llm_strategy import LLMAnalysisStrategy
from emotion_backend.llm.base import LLMError
from emotion_backend.utils.settings import AppSettings, SettingsService


def _answer(index=None, mood="positive", score=80):
    item = {
        "moodType": mood,
        "emotionScore": score,
        "extractedTags": ["friends", "park"],
        "reasoning": "a nice walk",
        "confidence": 0.85,
    }
    if index is not None:
        item["index"] = index
    return item


class TestLLMAnalysisStrategy:

    def setup_method(self):
        self.client = MagicMock()
        self.client.test_provider_connection.return_value = True
        self.settings = SettingsService(
            AppSettings(
                analysis_method=AnalysisMethod.LLM,
                llm_provider="siliconflow",
                llm_api_key="sk-test",
                llm_model="Qwen/Qwen3-14B",
            )
        )
        self.strategy = LLMAnalysisStrategy(self.client, self.settings)

    def test_metadata(self):
        assert isinstance(self.strategy, BatchCapable)
        assert self.strategy.strategy_name == "llm_analysis"
        assert self.strategy.requires_network is True
        assert self.strategy.estimated_duration_ms == 5000
        assert self.strategy.confidence_baseline == 0.8

    def test_available_when_configured_and_reachable(self):
        assert self.strategy.is_available() is True
        self.client.test_provider_connection.assert_called_once_with("siliconflow", api_key="sk-test")

    def test_unavailable_without_key(self):
        self.settings.update_llm_config(api_key="")
        assert self.strategy.is_available() is False
        self.client.test_provider_connection.assert_not_called()

    def test_unavailable_when_unreachable(self):
        self.client.test_provider_connection.return_value = False
        assert self.strategy.is_available() is False

    def test_analyze(self):
        self.client.generate_text.return_value = "```json\n" + json.dumps(_answer()) + "\n```"

        result = self.strategy.analyze("Went to the park with friends")

        assert result.mood_type == MoodType.POSITIVE
        assert result.emotion_score == 80
        assert result.extracted_tags == ("friends", "park")
        assert result.reasoning == "a nice walk"
        assert result.confidence == 0.85
        assert result.analysis_method == "llm"

        args, kwargs = self.client.generate_text.call_args
        assert args[0] == "siliconflow"
        assert "Went to the park with friends" in args[1]
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["model"] == "Qwen/Qwen3-14B"
        assert kwargs["parameters"] == {"max_tokens": 500, "temperature": 0.3}

    def test_reads_settings_on_every_call(self):
        self.client.generate_text.return_value = json.dumps(_answer())
        self.settings.update_llm_provider("deepseek")

        self.strategy.analyze("Went to the park")

        assert self.client.generate_text.call_args[0][0] == "deepseek"

    def test_analyze_blank_raises(self):
        with pytest.raises(StrategyExecutionError):
            self.strategy.analyze("  ")
        self.client.generate_text.assert_not_called()

    def test_analyze_unconfigured(self):
        self.settings.update_llm_config(api_key="")
        with pytest.raises(ConfigurationUnavailableError):
            self.strategy.analyze("Went to the park")

    def test_analyze_provider_error(self):
        self.client.generate_text.side_effect = LLMError("timeout", provider_name="siliconflow")
        with pytest.raises(StrategyExecutionError, match="LLM analysis failed"):
            self.strategy.analyze("Went to the park")

    def test_analyze_bad_response(self):
        self.client.generate_text.return_value = "The mood is positive."
        with pytest.raises(StrategyExecutionError, match="Unusable LLM response"):
            self.strategy.analyze("Went to the park")

    def test_analyze_batch(self):
        self.client.generate_text.return_value = json.dumps(
            [_answer(1), _answer(2, mood="negative", score=30)]
        )

        results = self.strategy.analyze_batch(["Good day at work", "Missed the last train"])

        assert [r.mood_type for r in results] == [MoodType.POSITIVE, MoodType.NEGATIVE]
        assert all(r.analysis_method == "llm" for r in results)
        assert self.client.generate_text.call_count == 1
        kwargs = self.client.generate_text.call_args[1]
        assert kwargs["parameters"] == {"max_tokens": 2000, "temperature": 0.3}

    def test_analyze_batch_empty(self):
        assert self.strategy.analyze_batch([]) == []
        self.client.generate_text.assert_not_called()

    def test_analyze_batch_single_uses_single_prompt(self):
        self.client.generate_text.return_value = json.dumps(_answer())

        results = self.strategy.analyze_batch(["Good day at work"])

        assert len(results) == 1
        assert self.client.generate_text.call_args[1]["parameters"]["max_tokens"] == 500

    def test_analyze_batch_misaligned_raises(self):
        self.client.generate_text.return_value = json.dumps([_answer(1)])

        with pytest.raises(StrategyExecutionError):
            self.strategy.analyze_batch(["one entry", "another entry"])
