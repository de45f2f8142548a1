from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from study_buddy.display import DisplayChannel, resolve_diagram
from study_buddy.documents import DocumentStore, DocumentStoreError
from study_buddy.ledger import SessionLedger
from study_buddy.schemas import (
    CloseImageMessage,
    NoArgs,
    RecordLearningArgs,
    RecordQuizScoreArgs,
    RecordTopicArgs,
    ShowDiagramArgs,
    ShowImageMessage,
    SideEffect,
    ToolDescription,
    ToolResult,
)
from study_buddy.templating import VariableTemplater
from study_buddy.usage import ToolUsage

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Raised by a tool; reported back to the model instead of propagating."""


class UnknownToolError(KeyError):
    pass


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params: type[BaseModel]
    handler: Callable[..., Any]
    effect: SideEffect

    def describe(self) -> ToolDescription:
        return ToolDescription(
            name=self.name,
            description=self.description,
            effect=self.effect,
            parameters=self.params.model_json_schema(),
        )


TOOL_REGISTRY: dict[str, ToolSpec] = {}


def tool(name: str, *, description: str, effect: SideEffect, params: type[BaseModel] = NoArgs):
    """
    Registers a SessionController method as a model-callable tool.
    Arguments are validated against `params` and passed as keywords.
    """

    def _wrap(fn: Callable[..., Any]) -> Callable[..., Any]:
        if name in TOOL_REGISTRY:
            logger.warning("Tool '%s' already registered, overwriting", name)
        TOOL_REGISTRY[name] = ToolSpec(name=name, description=description, params=params, handler=fn, effect=effect)
        return fn

    return _wrap


def list_tools() -> list[ToolDescription]:
    return [spec.describe() for spec in TOOL_REGISTRY.values()]


class SessionController:
    def __init__(
        self,
        *,
        templater: VariableTemplater,
        display: DisplayChannel,
        documents: DocumentStore,
        topic_document: str = "cells.txt",
        quiz_document: str = "quiz.txt",
        ledger: SessionLedger | None = None,
        usage: ToolUsage | None = None,
    ) -> None:
        self.templater = templater
        self.display = display
        self.documents = documents
        self.topic_document = topic_document
        self.quiz_document = quiz_document
        self.ledger = ledger or SessionLedger()
        self.usage = usage or ToolUsage()
        self.displayed_topic: str | None = None
        # Tool calls for one session may arrive from different worker threads.
        self.lock = threading.RLock()

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        spec = TOOL_REGISTRY.get(name)
        if spec is None:
            raise UnknownToolError(name)

        with self.lock:
            start = time.perf_counter()
            try:
                args = spec.params.model_validate(dict(arguments or {}))
                output = spec.handler(self, **args.model_dump())
                result = ToolResult(ok=True, output=output)
            except ValidationError as e:
                logger.warning("Invalid arguments for tool %s: %s", name, e.errors())
                result = ToolResult(ok=False, error=f"invalid arguments for {name}: {e}")
            except ToolError as e:
                logger.warning("Tool %s failed: %s", name, e)
                result = ToolResult(ok=False, error=str(e))
            except Exception as e:
                logger.exception("Tool %s raised unexpectedly", name)
                result = ToolResult(ok=False, error=f"error: {e}")
            elapsed = int((time.perf_counter() - start) * 1000)
            self.usage.record(name, elapsed, ok=result.ok)

        logger.info("Tool %s -> ok=%s (%d ms)", name, result.ok, elapsed)
        return result

    # --- display ------------------------------------------------------------

    @tool(
        "show_diagram",
        description="Immediately show a diagram of a cell part",
        params=ShowDiagramArgs,
        effect=SideEffect.display,
    )
    def show_diagram(self, topic: str) -> str | bool:
        normalized = topic.lower()
        if self.displayed_topic == normalized:
            return f"The diagram of the {topic} is already visible."

        # Close-then-show: never leave two diagrams on screen.
        if self.displayed_topic is not None:
            self.display.publish(CloseImageMessage().model_dump())

        self.display.publish(
            ShowImageMessage(resource=resolve_diagram(normalized), title=f"Diagram: {topic}").model_dump()
        )
        self.displayed_topic = normalized
        return True

    @tool(
        "close_diagram",
        description="Hide the current image or diagram from the student's screen",
        effect=SideEffect.display,
    )
    def close_diagram(self) -> str:
        self.display.publish(CloseImageMessage().model_dump())
        self.displayed_topic = None
        return "I've closed the diagram so we can focus on our notes."

    # --- content retrieval -----------------------------------------------------

    def _read_document(self, key_template: str) -> str:
        key = self.templater.render(key_template)
        try:
            return self.documents.lookup(key)
        except DocumentStoreError as e:
            raise ToolError(f"error reading document: {e}") from e

    @tool(
        "fetch_topic_content",
        description="Fetch the cells topic notes from the study document",
        effect=SideEffect.retrieval,
    )
    def fetch_topic_content(self) -> str:
        return self._read_document(self.topic_document)

    @tool(
        "fetch_quiz_content",
        description="Get quiz questions from the quiz document; pick ten of them and ask the user one at a time",
        effect=SideEffect.retrieval,
    )
    def fetch_quiz_content(self) -> str:
        self.ledger.mark_quiz_taken()
        return self._read_document(self.quiz_document)

    # --- ledger ----------------------------------------------------------------

    @tool(
        "record_topic",
        description="Record a topic that has been covered in this session",
        params=RecordTopicArgs,
        effect=SideEffect.ledger,
    )
    def record_topic(self, topic: str) -> str:
        self.ledger.record_topic(topic)
        return f"Noted that we covered {topic}."

    @tool(
        "record_learning",
        description="Record a key learning from the session",
        params=RecordLearningArgs,
        effect=SideEffect.ledger,
    )
    def record_learning(self, text: str) -> str:
        self.ledger.record_learning(text)
        return "Got it, I've added that to our notes."

    @tool(
        "record_quiz_score",
        description="Record the quiz result once the quiz is finished",
        params=RecordQuizScoreArgs,
        effect=SideEffect.ledger,
    )
    def record_quiz_score(self, correct: int, total: int) -> str:
        self.ledger.record_quiz_score(correct, total)
        correct, total = self.ledger.quiz_score
        return f"Saved the quiz score: {correct} out of {total}."
