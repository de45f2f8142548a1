from __future__ import annotations

import math
from datetime import datetime, timezone

from study_buddy.ledger import SessionLedger

DEFAULT_TOPICS_LINE = "A general overview of cells"


def round_half_up(value: float) -> int:
    # Builtin round() goes to the even neighbour on .5
    return math.floor(value + 0.5)


def quiz_percentage(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100)


def performance_tier(percentage: int) -> str:
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    return "needs improvement"


def elapsed_minutes(ledger: SessionLedger, now: datetime) -> int:
    return round_half_up((now - ledger.started_at).total_seconds() / 60)


def generate_summary(
    ledger: SessionLedger,
    *,
    user_name: str,
    agent_name: str,
    now: datetime | None = None,
) -> str:
    """
    Builds the plain-text end-of-session report from the ledger.

    Sections: header, topics covered, key learnings (only if any were
    recorded), quiz results (only if the quiz was started) and
    recommendations.
    """
    now = now or datetime.now(timezone.utc)
    minutes = elapsed_minutes(ledger, now)

    lines: list[str] = [
        "Study Session Summary",
        f"Date: {now.strftime('%B %d, %Y')}",
        f"Duration: {minutes} minute{'' if minutes == 1 else 's'}",
        f"Participants: {user_name} and {agent_name}",
        "",
        "Topics Covered:",
    ]
    if ledger.topics:
        lines.extend(f"- {t}" for t in ledger.topics)
    else:
        lines.append(f"- {DEFAULT_TOPICS_LINE}")

    if ledger.learnings:
        lines.append("")
        lines.append("Key Learnings:")
        lines.extend(f"{i}. {text}" for i, text in enumerate(ledger.learnings, start=1))

    pct: int | None = None
    if ledger.quiz_taken:
        lines.append("")
        lines.append("Quiz Results:")
        if ledger.quiz_score is None:
            lines.append("The quiz was started but not completed.")
        else:
            correct, total = ledger.quiz_score
            pct = quiz_percentage(correct, total)
            lines.append(f"Score: {correct} out of {total} ({pct}%)")
            lines.append(f"Performance: {performance_tier(pct)}")

    lines.append("")
    lines.append("Recommendations:")
    lines.append("- Review the topics covered before the next session.")
    if pct is not None and pct < 100:
        lines.append("- Go back over the quiz questions that were missed.")
    if ledger.quiz_taken and ledger.quiz_score is None:
        lines.append("- Finish the quiz next time to check understanding.")

    return "\n".join(lines)
