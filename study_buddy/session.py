from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Mapping

from study_buddy.config import Settings
from study_buddy.display import DisplayChannel, InMemoryDisplayChannel
from study_buddy.documents import DocumentStore, close_document_store, make_document_store
from study_buddy.prompts import build_greeting, build_instructions
from study_buddy.report import save_report
from study_buddy.schemas import SessionSummaryMessage
from study_buddy.summary import generate_summary
from study_buddy.templating import VariableTemplater
from study_buddy.tools import SessionController

logger = logging.getLogger(__name__)

DEFAULT_USER_NAME = "Student"
DEFAULT_AGENT_NAME = "StudyBuddy"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudySession:
    """
    One study-buddy conversation: bound templates, tool controller and the
    one-shot shutdown sequence that turns the ledger into a report.

    Two renderers are kept apart so that secrets can reach header values
    and participant names but never the instruction text.
    """

    def __init__(
        self,
        session_id: str,
        *,
        metadata: str | None,
        secrets: Mapping[str, str],
        settings: Settings,
        display: DisplayChannel | None = None,
        documents: DocumentStore | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_id = session_id
        self.settings = settings
        self.clock = clock

        self.templater = VariableTemplater(metadata)
        self.headers_templater = VariableTemplater(metadata, {"secrets": secrets})
        self.user_name = self.headers_templater.render_or_default("{{secrets.USER_NAME}}", DEFAULT_USER_NAME)
        self.agent_name = self.headers_templater.render_or_default("{{secrets.AGENT_NAME}}", DEFAULT_AGENT_NAME)

        self.display = display if display is not None else InMemoryDisplayChannel()
        self._owns_documents = documents is None
        if documents is None:
            documents = make_document_store(settings, self.headers_templater)

        self.controller = SessionController(
            templater=self.templater,
            display=self.display,
            documents=documents,
            topic_document=settings.topic_document,
            quiz_document=settings.quiz_document,
        )
        self.controller.ledger.started_at = clock()

        self.instructions = self.templater.render(
            build_instructions(agent_name=self.agent_name, user_name=self.user_name)
        )
        self.greeting = build_greeting(agent_name=self.agent_name, user_name=self.user_name)

        self.summary: str | None = None
        self.report_path: str | None = None
        self._closed = False
        self._shutdown_callbacks: list[Callable[[], None]] = [
            self._log_usage,
            self._generate_summary,
            self._broadcast_summary,
            self._save_report,
            self._close_documents,
        ]
        logger.info("Session %s started", session_id)

    @property
    def closed(self) -> bool:
        return self._closed

    def add_shutdown_callback(self, callback: Callable[[], None]) -> None:
        self._shutdown_callbacks.append(callback)

    def shutdown(self) -> str | None:
        """
        Runs the shutdown callbacks once, in order. A failing callback is
        logged and the remaining ones still run. Later calls return the
        summary produced by the first one.
        """
        with self.controller.lock:
            if self._closed:
                return self.summary
            self._closed = True
            for callback in self._shutdown_callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception(
                        "Shutdown callback %s failed for session %s",
                        getattr(callback, "__name__", repr(callback)),
                        self.session_id,
                    )
        logger.info("Session %s ended", self.session_id)
        return self.summary

    def _log_usage(self) -> None:
        logger.info("Usage for session %s: %s", self.session_id, json.dumps(self.controller.usage.summary()))

    def _generate_summary(self) -> None:
        self.summary = generate_summary(
            self.controller.ledger,
            user_name=self.user_name,
            agent_name=self.agent_name,
            now=self.clock(),
        )

    def _broadcast_summary(self) -> None:
        if self.summary is None:
            return
        self.display.publish(SessionSummaryMessage(summary=self.summary).model_dump())

    def _save_report(self) -> None:
        if self.summary is None or not self.settings.reports_dir:
            return
        path = save_report(self.summary, session_id=self.session_id, reports_dir=self.settings.reports_dir)
        self.report_path = str(path)
        logger.info("Saved session report to %s", path)

    def _close_documents(self) -> None:
        if self._owns_documents:
            close_document_store(self.controller.documents)
