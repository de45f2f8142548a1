from __future__ import annotations

import logging
import os
from typing import Any, Mapping

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from study_buddy.config import Settings
from study_buddy.display import InMemoryDisplayChannel
from study_buddy.documents import DocumentStore
from study_buddy.memory import SessionStore
from study_buddy.report import build_report_docx
from study_buddy.schemas import (
    DisplayMessagesResponse,
    EndSessionResponse,
    StartSessionRequest,
    StartSessionResponse,
    ToolDescription,
    ToolResult,
)
from study_buddy.session import StudySession
from study_buddy.tools import UnknownToolError, list_tools

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    secrets: Mapping[str, str] | None = None,
    *,
    documents: DocumentStore | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    store = SessionStore(settings, dict(os.environ) if secrets is None else secrets, documents=documents)

    app = FastAPI(title="Study Buddy Tool API", version="0.1.0")
    app.state.sessions = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _session(session_id: str) -> StudySession:
        session = store.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        return session

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    @app.get("/tools", response_model=list[ToolDescription])
    def tools() -> list[ToolDescription]:
        return list_tools()

    @app.post("/sessions", response_model=StartSessionResponse)
    def start_session(req: StartSessionRequest) -> StartSessionResponse:
        session = store.create(req.sessionId, req.metadata)
        return StartSessionResponse(
            sessionId=session.session_id,
            instructions=session.instructions,
            greeting=session.greeting,
        )

    @app.post("/sessions/{session_id}/tools/{name}", response_model=ToolResult)
    def call_tool(session_id: str, name: str, arguments: dict[str, Any] | None = Body(default=None)) -> ToolResult:
        session = _session(session_id)
        if session.closed:
            raise HTTPException(status_code=409, detail=f"Session {session_id} has ended")
        try:
            return session.controller.dispatch(name, arguments)
        except UnknownToolError:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

    @app.get("/sessions/{session_id}/display", response_model=DisplayMessagesResponse)
    def display_messages(session_id: str) -> DisplayMessagesResponse:
        session = _session(session_id)
        messages = session.display.drain() if isinstance(session.display, InMemoryDisplayChannel) else []
        return DisplayMessagesResponse(sessionId=session_id, messages=messages)

    @app.post("/sessions/{session_id}/end", response_model=EndSessionResponse)
    def end_session(session_id: str) -> EndSessionResponse:
        session = _session(session_id)
        summary = session.shutdown()
        return EndSessionResponse(sessionId=session_id, summary=summary)

    @app.get("/sessions/{session_id}/report.docx")
    def report_docx(session_id: str) -> StreamingResponse:
        session = _session(session_id)
        if session.summary is None:
            raise HTTPException(status_code=409, detail="Session has not ended yet.")

        bio = build_report_docx(session.summary, session_id=session_id)
        headers = {"Content-Disposition": 'attachment; filename="study-session.docx"'}
        return StreamingResponse(
            bio,
            media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            headers=headers,
        )

    return app
