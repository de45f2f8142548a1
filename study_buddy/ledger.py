from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionLedger:
    started_at: datetime = field(default_factory=_now)
    topics: list[str] = field(default_factory=list)
    learnings: list[str] = field(default_factory=list)
    quiz_score: tuple[int, int] | None = None  # (correct, total)
    quiz_taken: bool = False

    def record_topic(self, topic: str) -> None:
        t = topic.strip()
        if t and t not in self.topics:
            self.topics.append(t)

    def record_learning(self, text: str) -> None:
        t = text.strip()
        if t:
            self.learnings.append(t)

    def record_quiz_score(self, correct: int, total: int) -> None:
        total = max(total, 0)
        correct = min(max(correct, 0), total)
        self.quiz_score = (correct, total)
        self.quiz_taken = True

    def mark_quiz_taken(self) -> None:
        self.quiz_taken = True
