"""
Batch emotion analysis.

Analyzes many journal texts at once (history re-analysis, imports):
- Blank texts resolve to neutral, cached texts are served from the cache
- The rest goes to the strategy's native batch API when it has one
- Otherwise, or if the batch call fails, items are analyzed concurrently
  one by one; a failing item never affects its siblings
- The output always has the input's length and order
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from .orchestrator import Orchestrator, is_blank
from .result_cache import make_cache_key
from ..analysis.base import AnalysisResult, BatchCapable

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass
class PendingItem:
    """An uncached input with its original position and cache key."""
    index: int
    content: str
    key: str


class BatchProcessor:
    """
    Multi-item front end of the orchestrator.

    Usage:
        processor = BatchProcessor(orchestrator, max_workers=8)
        results = processor.analyze_emotions_unified(["", "a", "b"])
    """

    def __init__(self, orchestrator: Orchestrator, max_workers: int = DEFAULT_MAX_WORKERS):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.orchestrator = orchestrator
        self.max_workers = max_workers

    def analyze_emotions_unified(self, contents: List[str]) -> List[AnalysisResult]:
        """
        Analyze several texts. Never raises.

        Returns:
            One result per input, same order; unresolved slots are neutral.
        """
        slots: List[Optional[AnalysisResult]] = [None] * len(contents)
        try:
            method = self.orchestrator.current_method()
            pending = self._partition(contents, method, slots)
            if pending:
                for item, result in zip(pending, self._dispatch(pending, method)):
                    slots[item.index] = result
        except Exception as e:
            logger.error(f"Batch analysis failed, filling remaining slots: {e}", exc_info=True)

        return [result if result is not None else AnalysisResult.neutral() for result in slots]

    async def analyze_emotions_unified_async(self, contents: List[str]) -> List[AnalysisResult]:
        """Same as analyze_emotions_unified, off the event loop thread."""
        return await asyncio.to_thread(self.analyze_emotions_unified, contents)

    def _partition(
        self, contents: List[str], method: str, slots: List[Optional[AnalysisResult]]
    ) -> List[PendingItem]:
        pending: List[PendingItem] = []
        for index, content in enumerate(contents):
            if is_blank(content):
                slots[index] = AnalysisResult.neutral()
                continue
            key = make_cache_key(content, method)
            cached = self.orchestrator.lookup(key)
            if cached is not None:
                slots[index] = cached
            else:
                pending.append(PendingItem(index, content, key))
        logger.debug(
            f"Batch of {len(contents)}: {len(contents) - len(pending)} resolved, "
            f"{len(pending)} to analyze"
        )
        return pending

    def _dispatch(self, pending: List[PendingItem], method: str) -> List[AnalysisResult]:
        strategy = self.orchestrator.registry.resolve(method)
        if isinstance(strategy, BatchCapable) and len(pending) > 1:
            results = self._try_native_batch(strategy, pending)
            if results is not None:
                return results
        return self._dispatch_each(pending, method)

    def _try_native_batch(
        self, strategy, pending: List[PendingItem]
    ) -> Optional[List[AnalysisResult]]:
        try:
            if not strategy.is_available():
                return None
            results = list(strategy.analyze_batch([item.content for item in pending]))
        except Exception as e:
            logger.warning(f"Native batch analysis failed, analyzing items one by one: {e}")
            return None

        if len(results) != len(pending) or not all(isinstance(r, AnalysisResult) for r in results):
            logger.warning(
                f"Native batch returned unusable results for {len(pending)} items, "
                "analyzing items one by one"
            )
            return None

        for item, result in zip(pending, results):
            self.orchestrator.remember(item.key, result)
        return results

    def _dispatch_each(self, pending: List[PendingItem], method: str) -> List[AnalysisResult]:
        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="emotion-batch") as executor:
            futures = [
                executor.submit(self.orchestrator.analyze_uncached, item.content, method, item.key)
                for item in pending
            ]
            results = []
            for item, future in zip(pending, futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.warning(f"Item {item.index} failed: {e}")
                    results.append(AnalysisResult.neutral())
            return results
