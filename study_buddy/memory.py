from __future__ import annotations

import logging
from typing import Mapping

from cachetools import TTLCache

from study_buddy.config import Settings
from study_buddy.documents import DocumentStore
from study_buddy.session import StudySession

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(
        self,
        settings: Settings,
        secrets: Mapping[str, str],
        *,
        documents: DocumentStore | None = None,
        maxsize: int = 10_000,
    ) -> None:
        self.settings = settings
        self._secrets = dict(secrets)
        self._documents = documents
        self._cache: TTLCache[str, StudySession] = TTLCache(maxsize=maxsize, ttl=settings.session_ttl_seconds)

    def create(self, session_id: str, metadata: str | None) -> StudySession:
        """
        Starts a fresh session. A live session with the same id is shut down
        first so its ledger still produces a summary.
        """
        previous = self._cache.get(session_id)
        if previous is not None and not previous.closed:
            logger.info("Session %s restarted, closing the previous one", session_id)
            previous.shutdown()

        session = StudySession(
            session_id,
            metadata=metadata,
            secrets=self._secrets,
            settings=self.settings,
            documents=self._documents,
        )
        self._cache[session_id] = session
        return session

    def get(self, session_id: str) -> StudySession | None:
        return self._cache.get(session_id)
