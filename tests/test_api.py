import pytest
from fastapi.testclient import TestClient

from study_buddy.config import Settings
from study_buddy.main import create_app


@pytest.fixture
def client(tmp_path):
    (tmp_path / "cells.txt").write_text("Cells are tiny.", encoding="utf-8")
    app = create_app(Settings(documents_dir=str(tmp_path)), secrets={"USER_NAME": "Ada"})
    return TestClient(app)


def _start(client, session_id="abc", metadata="{}"):
    r = client.post("/sessions", json={"sessionId": session_id, "metadata": metadata})
    assert r.status_code == 200
    return r.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_tools_listing(client):
    tools = client.get("/tools").json()
    by_name = {t["name"]: t for t in tools}
    assert "show_diagram" in by_name
    assert by_name["show_diagram"]["parameters"]["required"] == ["topic"]
    assert by_name["record_topic"]["effect"] == "ledger"


def test_start_session(client):
    data = _start(client)
    assert data["sessionId"] == "abc"
    assert "Ada" in data["greeting"]
    assert "Ada" in data["instructions"]


def test_tool_calls_and_display_drain(client):
    _start(client)
    r = client.post("/sessions/abc/tools/show_diagram", json={"topic": "Nucleus"})
    assert r.json() == {"ok": True, "output": True, "error": None}

    r = client.post("/sessions/abc/tools/fetch_topic_content")
    assert r.json()["output"] == "Cells are tiny."

    messages = client.get("/sessions/abc/display").json()["messages"]
    assert [m["type"] for m in messages] == ["show_image"]
    assert client.get("/sessions/abc/display").json()["messages"] == []


def test_tool_error_is_reported_not_raised(client):
    _start(client)
    r = client.post("/sessions/abc/tools/fetch_quiz_content")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is False
    assert "error reading document" in body["error"]


def test_unknown_session_and_tool(client):
    assert client.post("/sessions/nope/tools/close_diagram").status_code == 404
    _start(client)
    assert client.post("/sessions/abc/tools/nope").status_code == 404


def test_end_session_and_report(client):
    _start(client)
    client.post("/sessions/abc/tools/record_quiz_score", json={"correct": 7, "total": 10})
    assert client.get("/sessions/abc/report.docx").status_code == 409

    first = client.post("/sessions/abc/end").json()
    assert "7 out of 10" in first["summary"]
    assert client.post("/sessions/abc/end").json() == first

    messages = client.get("/sessions/abc/display").json()["messages"]
    assert messages[-1]["type"] == "session_summary"

    r = client.get("/sessions/abc/report.docx")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert r.content[:2] == b"PK"

    assert client.post("/sessions/abc/tools/record_topic", json={"topic": "cell"}).status_code == 409
