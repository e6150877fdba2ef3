"""
Base strategy interface and data structures for emotion analysis.

Every backend (rule engine, remote LLM, local model) implements
AnalysisStrategy and returns the same AnalysisResult, so callers never
depend on which backend produced a result.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class AnalysisError(Exception):
    """Base class for emotion analysis errors."""


class StrategyExecutionError(AnalysisError):
    """Raised by analyze/analyze_batch on network, parse or internal errors."""


class ConfigurationUnavailableError(StrategyExecutionError):
    """Raised when a strategy is used without its required configuration."""


class AnalysisMethod(Enum):
    """Configured analysis method (selects the primary strategy)."""
    RULE = "rule"
    LLM = "llm"
    LOCAL = "local"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "AnalysisMethod":
        """Parse a stored value; unknown values select rule analysis."""
        for method in cls:
            if method.value == value:
                return method
        return cls.RULE

    @property
    def display_name(self) -> str:
        return {
            AnalysisMethod.RULE: "Rule analysis",
            AnalysisMethod.LLM: "AI analysis",
            AnalysisMethod.LOCAL: "Local AI",
        }[self]

    @property
    def description(self) -> str:
        return {
            AnalysisMethod.RULE: "Fast keyword and rule based analysis, works offline",
            AnalysisMethod.LLM: "Analysis by a large language model, requires network",
            AnalysisMethod.LOCAL: "On-device model analysis, balances accuracy and privacy",
        }[self]

    @property
    def requires_network(self) -> bool:
        return self is AnalysisMethod.LLM


class MoodType(Enum):
    """Three-way mood classification shared by all strategies."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "MoodType":
        """Case-insensitive parse; unknown values map to neutral."""
        normalized = (value or "").strip().lower()
        for mood in cls:
            if mood.value == normalized:
                return mood
        return cls.NEUTRAL


@dataclass(frozen=True)
class AnalysisResult:
    """
    Immutable, backend-independent emotion analysis result.

    Attributes:
        mood_type: positive, negative or neutral
        emotion_score: Intensity 0-100
        extracted_tags: Ordered topic tags
        reasoning: Optional explanation from the backend
        analysis_method: Label of the backend that actually produced it
            (may differ from the configured method after a fallback)
        timestamp: When the analysis ran (ignored by equality)
        confidence: Optional 0.0-1.0 confidence
    """
    mood_type: MoodType
    emotion_score: int
    extracted_tags: Tuple[str, ...] = ()
    reasoning: Optional[str] = None
    analysis_method: str = "rule"
    timestamp: datetime = field(default_factory=datetime.now, compare=False)
    confidence: Optional[float] = None

    def __post_init__(self):
        if not 0 <= self.emotion_score <= 100:
            raise ValueError(f"emotion_score out of range: {self.emotion_score}")
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence out of range: {self.confidence}")
        if not self.analysis_method:
            raise ValueError("analysis_method must not be empty")
        # Lists are accepted for convenience but stored as a tuple
        object.__setattr__(self, "extracted_tags", tuple(self.extracted_tags))

    @classmethod
    def neutral(cls) -> "AnalysisResult":
        """Zero-information result for blank content and last-resort fallback."""
        return cls(
            mood_type=MoodType.NEUTRAL,
            emotion_score=50,
            analysis_method="fallback",
            confidence=0.5,
        )

    @classmethod
    def from_rule_analysis(
        cls,
        mood_type: MoodType,
        emotion_score: int,
        extracted_tags: Optional[Sequence[str]] = None,
        reasoning: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> "AnalysisResult":
        return cls(
            mood_type=mood_type,
            emotion_score=emotion_score,
            extracted_tags=tuple(extracted_tags or ()),
            reasoning=reasoning,
            analysis_method=AnalysisMethod.RULE.value,
            confidence=confidence,
        )

    def copy_with(self, **changes) -> "AnalysisResult":
        return replace(self, **changes)

    @property
    def is_valid(self) -> bool:
        # Always true for constructed instances, kept for callers holding dicts
        return 0 <= self.emotion_score <= 100 and bool(self.analysis_method)

    @property
    def mood_description(self) -> str:
        if self.mood_type is MoodType.NEUTRAL:
            return "calm"
        if self.emotion_score > 70:
            intensity = "very"
        elif self.emotion_score > 30:
            intensity = "fairly"
        else:
            intensity = "somewhat"
        return f"{intensity} {self.mood_type.value}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mood_type"] = self.mood_type.value
        data["extracted_tags"] = list(self.extracted_tags)
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        confidence = data.get("confidence")
        return cls(
            mood_type=MoodType.from_value(data["mood_type"]),
            emotion_score=int(data["emotion_score"]),
            extracted_tags=tuple(data.get("extracted_tags") or ()),
            reasoning=data.get("reasoning"),
            analysis_method=data["analysis_method"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            confidence=float(confidence) if confidence is not None else None,
        )


@dataclass
class StrategyStatus:
    """Availability and fallback diagnostics of the configured strategy."""
    method: str
    is_available: bool
    status_message: str
    can_fallback: bool = False
    error_details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AnalysisStrategy(ABC):
    """
    Abstract base class for analysis backends.

    Implementations are stateless and may be shared between the
    orchestrator and the batch processor.
    """

    @abstractmethod
    def analyze(self, content: str) -> AnalysisResult:
        """
        Analyze one journal text.

        Raises:
            StrategyExecutionError: on network, parse or internal errors
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backend can currently be used (config, credentials, reachability)."""

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Identifier for logging."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable description for the settings surface."""

    @property
    @abstractmethod
    def requires_network(self) -> bool:
        """Whether analyze() performs network I/O."""

    @property
    def required_configs(self) -> List[str]:
        return []

    @property
    def estimated_duration_ms(self) -> int:
        return 0

    @property
    def confidence_baseline(self) -> float:
        return 0.5

    def validate_config(self) -> bool:
        return True


class BatchCapable(ABC):
    """Marker for strategies with a native multi-item API."""

    @abstractmethod
    def analyze_batch(self, contents: List[str]) -> List[AnalysisResult]:
        """
        Analyze several texts in one backend call.

        Returns:
            One result per input, in input order.

        Raises:
            StrategyExecutionError: if the call fails or cannot be aligned with the inputs
        """
