from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DIAGRAM = "cell"

DIAGRAMS: dict[str, str] = {
    "mitochondria": "https://upload.wikimedia.org/wikipedia/commons/7/75/Diagram_of_a_human_mitochondrion.png",
    "nucleus": "https://upload.wikimedia.org/wikipedia/commons/thumb/3/38/Diagram_human_cell_nucleus.svg/1252px-Diagram_human_cell_nucleus.svg.png",
    "cell": "https://templates.mindthegraph.com/animal-cell-structure/animal-cell-structure-graphical-abstract-template-preview-1.png",
}


def resolve_diagram(topic: str) -> str:
    """Unknown topics fall back to the general cell diagram."""
    return DIAGRAMS.get(topic.lower(), DIAGRAMS[DEFAULT_DIAGRAM])


class DisplayChannel(Protocol):
    def publish(self, message: dict[str, Any]) -> None: ...


class InMemoryDisplayChannel:
    """
    Buffers outgoing display messages until the client drains them.
    Order is preserved per session.
    """

    def __init__(self, *, maxlen: int = 256) -> None:
        self._messages: deque[dict[str, Any]] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def publish(self, message: dict[str, Any]) -> None:
        logger.debug("Display message: %s", message.get("type"))
        with self._lock:
            if len(self._messages) == self._messages.maxlen:
                dropped = self._messages[0]
                logger.warning(
                    "Display buffer full (%d), dropping oldest %s message",
                    self._messages.maxlen,
                    dropped.get("type"),
                )
            self._messages.append(message)

    def drain(self) -> list[dict[str, Any]]:
        with self._lock:
            out = list(self._messages)
            self._messages.clear()
        return out
