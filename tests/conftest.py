import pytest

from study_buddy.documents import DocumentNotFound
from study_buddy.templating import VariableTemplater
from study_buddy.tools import SessionController


class FakeDisplay:
    def __init__(self):
        self.messages = []

    def publish(self, message):
        self.messages.append(message)


class FakeDocuments:
    def __init__(self, docs=None):
        self.docs = dict(docs or {})
        self.requested = []

    def lookup(self, key):
        self.requested.append(key)
        if key not in self.docs:
            raise DocumentNotFound(f"document {key!r} not found")
        return self.docs[key]


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def documents():
    return FakeDocuments({"cells.txt": "Cells are the building blocks of life.", "quiz.txt": "Q1. What is a cell?"})


@pytest.fixture
def controller(display, documents):
    return SessionController(
        templater=VariableTemplater("{}"),
        display=display,
        documents=documents,
    )


@pytest.fixture
def make_documents():
    return FakeDocuments
