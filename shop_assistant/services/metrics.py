from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List


@dataclass
class MetricsSnapshot:
    llm_calls_total: int
    llm_answers: int
    llm_failures: Dict[str, int]
    llm_answer_rate: float
    fallback_replies: int
    fallback_intents: Dict[str, int]
    catalog_errors: int
    avg_response_latency_ms: float = 0.0
    replies_total: int = field(default=0)


class MetricsService:
    """In-process counters for reply provenance and upstream health."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._llm_calls_total = 0
        self._llm_answers = 0
        self._llm_failures: Counter[str] = Counter()
        self._fallback_replies = 0
        self._fallback_intents: Counter[str] = Counter()
        self._catalog_errors = 0
        self._response_latencies: List[float] = []
        self._max_latency_samples = 1000

    def record_llm_result(self, status: str, *, attempted: bool) -> None:
        with self._lock:
            if attempted:
                self._llm_calls_total += 1
            if status == "answered":
                self._llm_answers += 1
            else:
                self._llm_failures[status] += 1

    def record_fallback(self, intent: str) -> None:
        with self._lock:
            self._fallback_replies += 1
            self._fallback_intents[intent] += 1

    def record_catalog_error(self) -> None:
        with self._lock:
            self._catalog_errors += 1

    def record_response_latency(self, latency_ms: float) -> None:
        """Record response latency in milliseconds."""
        with self._lock:
            self._response_latencies.append(latency_ms)
            # Keep only recent samples
            if len(self._response_latencies) > self._max_latency_samples:
                self._response_latencies = self._response_latencies[-self._max_latency_samples:]

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            answer_rate = (self._llm_answers / self._llm_calls_total) if self._llm_calls_total else 0.0
            avg_latency = (
                sum(self._response_latencies) / len(self._response_latencies)
                if self._response_latencies else 0.0
            )
            return MetricsSnapshot(
                llm_calls_total=self._llm_calls_total,
                llm_answers=self._llm_answers,
                llm_failures=dict(self._llm_failures),
                llm_answer_rate=answer_rate,
                fallback_replies=self._fallback_replies,
                fallback_intents=dict(self._fallback_intents),
                catalog_errors=self._catalog_errors,
                avg_response_latency_ms=avg_latency,
                replies_total=self._llm_answers + self._fallback_replies,
            )


_metrics_service = MetricsService()


def get_metrics_service() -> MetricsService:
    return _metrics_service
