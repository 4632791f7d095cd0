"""
Request Timing Middleware
Rolling request latency statistics and slow request warnings.
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Dict, List, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 300


class LatencyTracker:
    """Keeps the last ``window_size`` request latencies and reports percentiles."""

    def __init__(self, window_size: int = 1000):
        self.window_size = window_size
        self.latencies: deque = deque(maxlen=window_size)
        self.lock = Lock()

    def record(self, latency_ms: float) -> None:
        with self.lock:
            self.latencies.append(latency_ms)

    def reset(self) -> None:
        with self.lock:
            self.latencies.clear()

    def get_stats(self) -> Dict[str, float]:
        """
        Latency statistics over the window.

        Returns:
            Dict with count, p50, p95, p99, mean, min, max (all zero when empty)
        """
        with self.lock:
            values = sorted(self.latencies)

        if not values:
            return {"count": 0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "mean": 0.0, "min": 0.0, "max": 0.0}

        return {
            "count": len(values),
            "p50": self._percentile(values, 50),
            "p95": self._percentile(values, 95),
            "p99": self._percentile(values, 99),
            "mean": sum(values) / len(values),
            "min": values[0],
            "max": values[-1],
        }

    @staticmethod
    def _percentile(sorted_values: List[float], percentile: int) -> float:
        index = min(int(percentile / 100.0 * len(sorted_values)), len(sorted_values) - 1)
        return sorted_values[index]


_latency_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    return _latency_tracker


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Records each request's latency and sets the X-Response-Time header."""

    def __init__(self, app, tracker: Optional[LatencyTracker] = None, slow_ms: int = SLOW_REQUEST_MS):
        super().__init__(app)
        self.tracker = tracker or get_latency_tracker()
        self.slow_ms = slow_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        self.tracker.record(duration_ms)
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if duration_ms > self.slow_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {duration_ms:.0f}ms",
                extra={"request_id": getattr(request.state, "request_id", None)},
            )

        return response
