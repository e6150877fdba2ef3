"""
Core modules of the emotion backend.

This package contains the analysis pipeline:
- result_cache: Bounded TTL cache of analysis results
- orchestrator: Single-item analysis with rule fallback
- batch_processor: Order-preserving multi-item analysis
- status: Strategy availability diagnostics
- emotion_service: Public facade and builder
"""

from .batch_processor import BatchProcessor
from .emotion_service import EmotionService, create_emotion_service
from .orchestrator import Orchestrator
from .result_cache import CachedEntry, ResultCache, make_cache_key
from .status import StatusReporter

__all__ = [
    "BatchProcessor",
    "EmotionService",
    "create_emotion_service",
    "Orchestrator",
    "CachedEntry",
    "ResultCache",
    "make_cache_key",
    "StatusReporter",
]
