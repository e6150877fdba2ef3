"""
Unit tests for StatusReporter.
"""

from emotion_backend.analysis.base import AnalysisMethod
from emotion_backend.core.status import StatusReporter


class TestStatusReporter:

    def test_available_primary(self, registry, settings):
        status = StatusReporter(registry, settings).get_strategy_status()

        assert status.method == "llm"
        assert status.is_available is True
        assert status.can_fallback is False
        assert status.error_details is None
        assert "ready" in status.status_message

    def test_unavailable_primary_can_fallback(self, registry, settings, llm_fake):
        llm_fake.available = False

        status = StatusReporter(registry, settings).get_strategy_status()

        assert status.is_available is False
        assert status.can_fallback is True
        assert "rule-based analysis will be used" in status.status_message

    def test_unavailable_primary_without_rule(self, registry, settings, rule_fake, llm_fake):
        llm_fake.available = False
        rule_fake.available = False

        status = StatusReporter(registry, settings).get_strategy_status()

        assert status.is_available is False
        assert status.can_fallback is False

    def test_rule_never_falls_back_to_itself(self, registry, settings, rule_fake):
        settings.update_analysis_method(AnalysisMethod.RULE)
        rule_fake.available = False

        status = StatusReporter(registry, settings).get_strategy_status()

        assert status.method == "rule"
        assert status.is_available is False
        assert status.can_fallback is False

    def test_probe_error_reported_as_data(self, registry, settings, llm_fake):
        llm_fake.probe_error = RuntimeError("keychain locked")

        status = StatusReporter(registry, settings).get_strategy_status()

        assert status.is_available is False
        assert status.error_details == "keychain locked"
        assert status.can_fallback is True

    def test_does_not_run_analysis(self, registry, settings, rule_fake, llm_fake):
        StatusReporter(registry, settings).get_strategy_status()

        assert llm_fake.calls == []
        assert rule_fake.calls == []

    def test_to_dict(self, registry, settings):
        data = StatusReporter(registry, settings).get_strategy_status().to_dict()

        assert data["method"] == "llm"
        assert set(data) == {"method", "is_available", "status_message", "can_fallback", "error_details"}
