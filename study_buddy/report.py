from __future__ import annotations

import re
from io import BytesIO
from pathlib import Path

from docx import Document

_SECTION_HEADINGS = {
    "Topics Covered:",
    "Key Learnings:",
    "Quiz Results:",
    "Recommendations:",
}


def build_report_docx(summary: str, *, session_id: str) -> BytesIO:
    lines = summary.splitlines()
    title = lines[0] if lines else "Study Session Summary"

    doc = Document()
    doc.add_heading(title, level=1)
    doc.add_paragraph(f"Session: {session_id}")

    for line in lines[1:]:
        text = line.strip()
        if not text:
            continue
        if text in _SECTION_HEADINGS:
            doc.add_heading(text.rstrip(":"), level=2)
        elif text.startswith("- "):
            doc.add_paragraph(text[2:], style="List Bullet")
        else:
            doc.add_paragraph(text)

    bio = BytesIO()
    doc.save(bio)
    bio.seek(0)
    return bio


def save_report(summary: str, *, session_id: str, reports_dir: str | Path) -> Path:
    out_dir = Path(reports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", session_id).lstrip(".") or "session"
    path = out_dir / f"{safe_id}.docx"
    path.write_bytes(build_report_docx(summary, session_id=session_id).getvalue())
    return path
