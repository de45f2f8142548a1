import httpx
import pytest

from study_buddy.config import Settings
from study_buddy.documents import (
    DocumentNotFound,
    DocumentStoreError,
    FileDocumentStore,
    HttpDocumentStore,
    make_document_store,
)
from study_buddy.templating import VariableTemplater


def test_file_store_reads_text(tmp_path):
    (tmp_path / "cells.txt").write_text("Cells 101", encoding="utf-8")
    assert FileDocumentStore(tmp_path).lookup("cells.txt") == "Cells 101"


def test_file_store_missing_document(tmp_path):
    with pytest.raises(DocumentNotFound):
        FileDocumentStore(tmp_path).lookup("quiz.txt")


def test_file_store_rejects_paths_outside_root(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("nope", encoding="utf-8")
    with pytest.raises(DocumentNotFound):
        FileDocumentStore(root).lookup("../secret.txt")


def test_file_store_directory_is_a_store_error(tmp_path):
    (tmp_path / "folder").mkdir()
    with pytest.raises(DocumentStoreError):
        FileDocumentStore(tmp_path).lookup("folder")


def _http_store(handler, **kw):
    return HttpDocumentStore("https://lessons.example", transport=httpx.MockTransport(handler), **kw)


def test_http_store_returns_body_and_sends_headers():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, text="Lesson text")

    store = _http_store(handler, headers={"Authorization": "Bearer abc"})
    assert store.lookup("cells.txt") == "Lesson text"
    assert seen == {"path": "/cells.txt", "auth": "Bearer abc"}


def test_http_store_not_found():
    store = _http_store(lambda request: httpx.Response(404, text="missing"))
    with pytest.raises(DocumentNotFound):
        store.lookup("quiz.txt")


def test_http_store_server_error():
    store = _http_store(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(DocumentStoreError, match="HTTP 500: boom"):
        store.lookup("quiz.txt")


def test_http_store_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(DocumentStoreError, match="refused"):
        _http_store(handler).lookup("cells.txt")


def test_make_document_store_defaults_to_files(tmp_path):
    store = make_document_store(Settings(documents_dir=str(tmp_path)), VariableTemplater("{}"))
    assert isinstance(store, FileDocumentStore)


def test_make_document_store_renders_auth_header_from_secrets():
    settings = Settings(documents_url="https://lessons.example")
    store = make_document_store(settings, VariableTemplater("{}", {"secrets": {"LESSON_API_KEY": "k1"}}))
    assert isinstance(store, HttpDocumentStore)
    assert store.headers == {"Authorization": "Bearer k1"}


def test_make_document_store_omits_unconfigured_header():
    settings = Settings(documents_url="https://lessons.example")
    store = make_document_store(settings, VariableTemplater("{}", {"secrets": {}}))
    assert store.headers == {}
