"""
Emotion analysis backend for the mood journal.

Use the builder to wire everything from configuration:
    from emotion_backend import create_emotion_service
    service = create_emotion_service()
    result = service.analyze_emotion_unified("今天很开心")
"""

from .__version__ import __version__
from .analysis.base import AnalysisMethod, AnalysisResult, MoodType, StrategyStatus
from .core.emotion_service import EmotionService, create_emotion_service

__all__ = [
    "__version__",
    "AnalysisMethod",
    "AnalysisResult",
    "MoodType",
    "StrategyStatus",
    "EmotionService",
    "create_emotion_service",
]
