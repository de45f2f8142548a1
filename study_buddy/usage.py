from __future__ import annotations

from collections import Counter
from typing import Any


class ToolUsage:
    """Per-session tool call accounting, logged once at shutdown."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.errors: Counter[str] = Counter()
        self.latency_ms: Counter[str] = Counter()

    def record(self, tool: str, elapsed_ms: int, *, ok: bool) -> None:
        self.calls[tool] += 1
        self.latency_ms[tool] += elapsed_ms
        if not ok:
            self.errors[tool] += 1

    def summary(self) -> dict[str, Any]:
        return {
            "total_calls": sum(self.calls.values()),
            "total_errors": sum(self.errors.values()),
            "tools": {
                name: {
                    "calls": count,
                    "errors": self.errors[name],
                    "latency_ms": self.latency_ms[name],
                }
                for name, count in sorted(self.calls.items())
            },
        }
