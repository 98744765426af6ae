"""In-process metrics for tool calls (per-process only, reset on restart)."""

from __future__ import annotations

from collections import Counter, deque
from threading import Lock
from typing import Deque, Dict, Tuple

RECENT_REQUESTS = 100


class MetricsRecorder:
    def __init__(self, recent_limit: int = RECENT_REQUESTS) -> None:
        self._lock = Lock()
        self._requests = 0
        self._recent: Deque[Tuple[str, float]] = deque(maxlen=recent_limit)
        self._tool_success: Counter[str] = Counter()
        self._tool_error: Counter[str] = Counter()
        self._tool_duration_ms: Counter[str] = Counter()

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        with self._lock:
            self._recent.append((request_id, duration_ms))

    def record_tool(self, tool: str, *, success: bool, duration_ms: float = 0.0) -> None:
        with self._lock:
            if success:
                self._tool_success[tool] += 1
            else:
                self._tool_error[tool] += 1
            self._tool_duration_ms[tool] += duration_ms

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            calls = self._tool_success + self._tool_error
            return {
                "requests": self._requests,
                "tool_success": dict(self._tool_success),
                "tool_error": dict(self._tool_error),
                "tool_avg_duration_ms": {
                    tool: round(self._tool_duration_ms[tool] / count, 2)
                    for tool, count in calls.items()
                },
                "recent_request_durations_ms": dict(self._recent),
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._recent.clear()
            self._tool_success.clear()
            self._tool_error.clear()
            self._tool_duration_ms.clear()


default_metrics = MetricsRecorder()
