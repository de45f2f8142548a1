from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


def _env(name: str, default: str | None = None, environ: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if environ is None else environ
    val = env.get(name)
    if val is None or val.strip() == "":
        return default
    return val


@dataclass(frozen=True)
class Settings:
    documents_dir: str = "."
    documents_url: str | None = None
    documents_auth_header: str = "Bearer {{secrets.LESSON_API_KEY}}"
    topic_document: str = "cells.txt"
    quiz_document: str = "quiz.txt"
    reports_dir: str | None = None
    session_ttl_seconds: int = 60 * 60
    log_level: str = "INFO"
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Reads settings from the environment (or a given mapping, for tests).
        Blank values count as unset.
        """
        defaults = cls()
        return cls(
            documents_dir=_env("DOCUMENTS_DIR", defaults.documents_dir, environ),
            documents_url=_env("DOCUMENTS_URL", None, environ),
            documents_auth_header=_env("DOCUMENTS_AUTH_HEADER", defaults.documents_auth_header, environ),
            topic_document=_env("TOPIC_DOCUMENT", defaults.topic_document, environ),
            quiz_document=_env("QUIZ_DOCUMENT", defaults.quiz_document, environ),
            reports_dir=_env("REPORTS_DIR", None, environ),
            session_ttl_seconds=int(_env("SESSION_TTL_SECONDS", str(defaults.session_ttl_seconds), environ)),
            log_level=_env("LOG_LEVEL", defaults.log_level, environ).upper(),
            port=int(_env("PORT", str(defaults.port), environ)),
        )
