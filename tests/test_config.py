from study_buddy.config import Settings


def test_defaults_from_empty_environment():
    s = Settings.from_env({})
    assert s == Settings()
    assert s.topic_document == "cells.txt"
    assert s.documents_url is None


def test_blank_values_count_as_unset():
    s = Settings.from_env({"DOCUMENTS_URL": "  ", "QUIZ_DOCUMENT": ""})
    assert s.documents_url is None
    assert s.quiz_document == "quiz.txt"


def test_values_are_read_and_converted():
    s = Settings.from_env(
        {
            "DOCUMENTS_URL": "https://lessons.example",
            "TOPIC_DOCUMENT": "{{metadata.lesson}}.txt",
            "SESSION_TTL_SECONDS": "120",
            "LOG_LEVEL": "debug",
            "PORT": "9000",
        }
    )
    assert s.documents_url == "https://lessons.example"
    assert s.topic_document == "{{metadata.lesson}}.txt"
    assert s.session_ttl_seconds == 120
    assert s.log_level == "DEBUG"
    assert s.port == 9000
