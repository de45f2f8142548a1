from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


# --- tool parameters -------------------------------------------------------


class NoArgs(BaseModel):
    pass


class ShowDiagramArgs(BaseModel):
    topic: str = Field(..., min_length=1, description="mitochondria, nucleus, or cell")


class RecordTopicArgs(BaseModel):
    topic: str = Field(..., min_length=1, description="A topic that was covered in the session")


class RecordLearningArgs(BaseModel):
    text: str = Field(..., min_length=1, description="One key learning, in a short sentence")


class RecordQuizScoreArgs(BaseModel):
    correct: int = Field(..., ge=0, description="Number of questions answered correctly")
    total: int = Field(..., ge=0, description="Number of questions asked")


class SideEffect(str, Enum):
    display = "display"
    retrieval = "retrieval"
    ledger = "ledger"


class ToolResult(BaseModel):
    ok: bool
    output: str | bool | None = None
    error: str | None = None


class ToolDescription(BaseModel):
    name: str
    description: str
    effect: SideEffect
    parameters: dict[str, Any]


# --- display channel messages ----------------------------------------------


class ShowImageMessage(BaseModel):
    type: Literal["show_image"] = "show_image"
    resource: str
    title: str


class CloseImageMessage(BaseModel):
    type: Literal["close_image"] = "close_image"


class SessionSummaryMessage(BaseModel):
    type: Literal["session_summary"] = "session_summary"
    summary: str


# --- HTTP API ----------------------------------------------------------------


class StartSessionRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)
    metadata: str = Field("{}", description="Job metadata, expected to be a JSON object string")


class StartSessionResponse(BaseModel):
    sessionId: str
    instructions: str
    greeting: str


class EndSessionResponse(BaseModel):
    sessionId: str
    summary: str | None


class DisplayMessagesResponse(BaseModel):
    sessionId: str
    messages: list[dict[str, Any]] = Field(default_factory=list)
