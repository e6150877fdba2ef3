import atexit
import faulthandler
import os
import sys
import tempfile
import threading
from typing import List, Optional
from unittest.mock import patch

import pytest

# Must be set before emotion_backend.utils.logger is first imported
os.environ.setdefault("EMOTION_BACKEND_LOG_DIR", tempfile.mkdtemp(prefix="emotion-logs-"))

from emotion_backend.analysis.base import (  # noqa: E402
    AnalysisMethod,
    AnalysisResult,
    AnalysisStrategy,
    BatchCapable,
    MoodType,
    StrategyExecutionError,
)
from emotion_backend.analysis.registry import StrategyRegistry  # noqa: E402
from emotion_backend.utils.settings import AppSettings, SettingsService  # noqa: E402


def pytest_sessionstart(session) -> None:  # noqa: ANN001
    faulthandler.enable(all_threads=True)

    # Hard upper bound so a deadlocked thread pool cannot hang CI
    seconds = int(os.environ.get("PYTEST_WATCHDOG_TIMEOUT_SECONDS", 10 * 60))
    if seconds <= 0:
        return

    def _kill() -> None:
        faulthandler.dump_traceback(file=sys.stderr, all_threads=True)
        os._exit(2)

    timer = threading.Timer(seconds, _kill)
    timer.daemon = True
    timer.start()
    atexit.register(timer.cancel)


@pytest.fixture(autouse=True)
def no_system_keyring():
    """Never touch the developer's real keyring."""
    with patch("emotion_backend.utils.secrets.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = None
        yield mock_keyring


class FakeStrategy(AnalysisStrategy):
    """
    Scriptable strategy.

    Results carry `label` as analysis_method and the analyzed text as
    reasoning, so tests can tell which backend resolved which input.
    """

    def __init__(
        self,
        label: str = "llm",
        available: bool = True,
        fail_on: Optional[List[str]] = None,
        always_fail: bool = False,
        probe_error: Optional[Exception] = None,
    ):
        self.label = label
        self.available = available
        self.fail_on = set(fail_on or [])
        self.always_fail = always_fail
        self.probe_error = probe_error
        self.calls: List[str] = []
        self.probes = 0

    @property
    def strategy_name(self) -> str:
        return f"fake_{self.label}"

    @property
    def description(self) -> str:
        return f"Fake {self.label} strategy"

    @property
    def requires_network(self) -> bool:
        return False

    def is_available(self) -> bool:
        self.probes += 1
        if self.probe_error is not None:
            raise self.probe_error
        return self.available

    def analyze(self, content: str) -> AnalysisResult:
        self.calls.append(content)
        if self.always_fail or content in self.fail_on:
            raise StrategyExecutionError(f"{self.label} failed on {content!r}")
        return AnalysisResult(
            mood_type=MoodType.POSITIVE,
            emotion_score=80,
            reasoning=content,
            analysis_method=self.label,
            confidence=0.9,
        )


class FakeBatchStrategy(FakeStrategy, BatchCapable):
    """FakeStrategy with a native batch API."""

    def __init__(self, *args, batch_fail: bool = False, batch_short: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.batch_fail = batch_fail
        self.batch_short = batch_short
        self.batch_calls: List[List[str]] = []

    def analyze_batch(self, contents: List[str]) -> List[AnalysisResult]:
        self.batch_calls.append(list(contents))
        if self.batch_fail:
            raise StrategyExecutionError("batch endpoint down")
        results = [
            AnalysisResult(
                mood_type=MoodType.NEGATIVE,
                emotion_score=20,
                reasoning=content,
                analysis_method=f"{self.label}_batch",
                confidence=0.8,
            )
            for content in contents
        ]
        return results[:-1] if self.batch_short else results


@pytest.fixture
def settings():
    return SettingsService(AppSettings(analysis_method=AnalysisMethod.LLM, llm_provider="fake"))


@pytest.fixture
def rule_fake():
    return FakeStrategy(label="rule")


@pytest.fixture
def llm_fake():
    return FakeStrategy(label="llm")


@pytest.fixture
def registry(rule_fake, llm_fake):
    registry = StrategyRegistry(rule_fake)
    registry.register(AnalysisMethod.LLM, llm_fake)
    return registry


@pytest.fixture
def make_fake():
    return FakeStrategy


@pytest.fixture
def make_batch_fake():
    return FakeBatchStrategy
