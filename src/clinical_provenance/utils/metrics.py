# ============================================================================
# src/clinical_provenance/utils/metrics.py
# ============================================================================
"""
Extraction metrics for the clinical provenance engine.

Counters, histograms and timers for extraction volume, link rate and
latency. Observability only; nothing in the extraction path reads them.
"""

import time
from typing import Dict, List, Optional, Any
from collections import defaultdict
import statistics
import threading


# Metric names recorded per analyzed letter
LETTERS_PROCESSED = "letters_processed"
VALUES_EXTRACTED = "values_extracted"
VALUES_LINKED = "values_linked"
HALLUCINATION_FLAGS = "hallucination_flags"
VERIFICATION_RATE = "verification_rate"


class MetricsCollector:
    """Thread-safe store of counters, value histograms and operation timings."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = defaultdict(int)
        self._histograms: Dict[str, List[float]] = defaultdict(list)
        self._timers: Dict[str, List[float]] = defaultdict(list)

    def increment(self, name: str, value: int = 1) -> None:
        with self._lock:
            self._counters[name] += value

    def record_value(self, name: str, value: float) -> None:
        with self._lock:
            self._histograms[name].append(value)

    def record_time(self, name: str, duration: float) -> None:
        """
        Record operation duration.

        Args:
            name: Operation name, e.g. "analyze_letter"
            duration: Duration in seconds
        """
        with self._lock:
            self._timers[name].append(duration)

    def record_letter(
        self,
        values_extracted: int,
        values_linked: int,
        verification_rate: float,
        flag_count: int = 0,
    ) -> None:
        """Record the outcome of one letter analysis."""
        with self._lock:
            self._counters[LETTERS_PROCESSED] += 1
            self._counters[VALUES_EXTRACTED] += values_extracted
            self._counters[VALUES_LINKED] += values_linked
            self._counters[HALLUCINATION_FLAGS] += flag_count
            self._histograms[VERIFICATION_RATE].append(verification_rate)

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_histogram_stats(self, name: str) -> Optional[Dict[str, float]]:
        """
        Get histogram statistics.

        Returns:
            Dict with count, min, max, mean, median, p95; None when nothing was recorded
        """
        values = list(self._histograms.get(name, []))
        if not values:
            return None
        return _summarize(values)

    def get_timer_stats(self, name: str) -> Optional[Dict[str, float]]:
        values = list(self._timers.get(name, []))
        if not values:
            return None
        return _summarize(values)

    def link_rate(self) -> Optional[float]:
        """Share of all extracted values that were linked to a source anchor, in percent."""
        extracted = self.get_counter(VALUES_EXTRACTED)
        if extracted == 0:
            return None
        return round(self.get_counter(VALUES_LINKED) / extracted * 100, 1)

    def get_all_metrics(self) -> Dict[str, Any]:
        return {
            'counters': dict(self._counters),
            'histograms': {
                name: self.get_histogram_stats(name)
                for name in list(self._histograms.keys())
            },
            'timers': {
                name: self.get_timer_stats(name)
                for name in list(self._timers.keys())
            }
        }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
            self._timers.clear()


def _summarize(values: List[float]) -> Dict[str, float]:
    sorted_values = sorted(values)
    count = len(values)
    return {
        'count': count,
        'min': sorted_values[0],
        'max': sorted_values[-1],
        'mean': statistics.mean(values),
        'median': statistics.median(values),
        'p95': sorted_values[min(int(count * 0.95), count - 1)],
    }


class Timer:
    """Context manager recording the wall time of a block into a collector."""

    def __init__(self, collector: MetricsCollector, operation: str):
        self.collector = collector
        self.operation = operation
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        self.collector.record_time(self.operation, self.duration)


# Process-wide collector used by the engine
_global_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    return _global_metrics


def time_operation(operation: str) -> Timer:
    """Time a block into the process-wide collector."""
    return Timer(_global_metrics, operation)
