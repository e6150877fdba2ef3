"""
Circuit breaker for LLM provider resilience.

After `failure_threshold` consecutive failures a provider's circuit opens
and calls are rejected without touching the network. Once
`recovery_timeout` seconds have passed, one trial call is let through
(half-open); success closes the circuit, failure reopens it.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class _Circuit:
    state: CircuitState = CircuitState.CLOSED
    consecutive_failures: int = 0
    opened_at: float = 0.0
    total_calls: int = 0
    total_failures: int = 0


class CircuitBreaker:
    """Per-provider circuit state, thread-safe."""

    def __init__(
        self,
        failure_threshold: int = 3,
        recovery_timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._circuits: Dict[str, _Circuit] = {}
        self._lock = threading.Lock()

    def _circuit(self, provider: str) -> _Circuit:
        # Caller holds the lock
        circuit = self._circuits.setdefault(provider, _Circuit())
        if (
            circuit.state is CircuitState.OPEN
            and self._clock() - circuit.opened_at >= self.recovery_timeout
        ):
            circuit.state = CircuitState.HALF_OPEN
            logger.info(f"Circuit HALF_OPEN for {provider} (testing recovery)")
        return circuit

    def get_state(self, provider: str) -> CircuitState:
        with self._lock:
            return self._circuit(provider).state

    def can_execute(self, provider: str) -> bool:
        return self.get_state(provider) is not CircuitState.OPEN

    def record_success(self, provider: str) -> None:
        with self._lock:
            circuit = self._circuit(provider)
            circuit.total_calls += 1
            circuit.consecutive_failures = 0
            if circuit.state is CircuitState.HALF_OPEN:
                logger.info(f"Circuit CLOSED for {provider} (recovered)")
            circuit.state = CircuitState.CLOSED

    def record_failure(self, provider: str) -> None:
        with self._lock:
            circuit = self._circuit(provider)
            circuit.total_calls += 1
            circuit.total_failures += 1
            circuit.consecutive_failures += 1
            if (
                circuit.state is CircuitState.HALF_OPEN
                or circuit.consecutive_failures >= self.failure_threshold
            ):
                if circuit.state is not CircuitState.OPEN:
                    logger.warning(
                        f"Circuit OPEN for {provider} after "
                        f"{circuit.consecutive_failures} consecutive failures"
                    )
                circuit.state = CircuitState.OPEN
                circuit.opened_at = self._clock()

    def get_stats(self, provider: str) -> Dict:
        with self._lock:
            circuit = self._circuit(provider)
            stats = {
                "provider": provider,
                "state": circuit.state.value,
                "consecutive_failures": circuit.consecutive_failures,
                "total_calls": circuit.total_calls,
                "total_failures": circuit.total_failures,
            }
            if circuit.state is CircuitState.OPEN:
                remaining = self.recovery_timeout - (self._clock() - circuit.opened_at)
                stats["recovery_in_seconds"] = max(0.0, remaining)
            return stats

    def reset(self, provider: str) -> None:
        with self._lock:
            self._circuits[provider] = _Circuit()
        logger.info(f"Circuit manually reset for {provider}")
