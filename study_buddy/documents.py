from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Protocol

import httpx

from study_buddy.config import Settings
from study_buddy.templating import VariableTemplater

logger = logging.getLogger(__name__)


class DocumentStoreError(Exception):
    pass


class DocumentNotFound(DocumentStoreError):
    pass


class DocumentStore(Protocol):
    def lookup(self, key: str) -> str: ...


def close_document_store(store: DocumentStore) -> None:
    """Stores may hold connections; `close()` is optional."""
    close = getattr(store, "close", None)
    if callable(close):
        close()


class FileDocumentStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def lookup(self, key: str) -> str:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise DocumentNotFound(f"document {key!r} is outside the document root")
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise DocumentNotFound(f"document {key!r} not found") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentStoreError(f"error reading document {key!r}: {e}") from e

    def close(self) -> None:
        pass


class HttpDocumentStore:
    """
    Fetches documents as plain text from `base_url/<key>`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.headers = dict(headers or {})
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    def lookup(self, key: str) -> str:
        try:
            r = self._client.get(key.lstrip("/"))
        except httpx.HTTPError as e:
            raise DocumentStoreError(f"error fetching document {key!r}: {e}") from e
        if r.status_code == 404:
            raise DocumentNotFound(f"document {key!r} not found")
        if r.status_code >= 400:
            raise DocumentStoreError(f"error fetching document {key!r}: HTTP {r.status_code}: {r.text}")
        return r.text

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()


def make_document_store(settings: Settings, headers_templater: VariableTemplater) -> DocumentStore:
    if settings.documents_url:
        headers: dict[str, str] = {}
        # Omit the header entirely when its secret isn't configured.
        auth = headers_templater.render_or_default(settings.documents_auth_header, None)
        if auth:
            headers["Authorization"] = auth
        return HttpDocumentStore(settings.documents_url, headers=headers)
    return FileDocumentStore(settings.documents_dir)
