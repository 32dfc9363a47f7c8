"""In-memory lookup collaborator."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable

from veritrace.answers import Answer, Concept, EntityConcept, RelationConcept

logger = logging.getLogger(__name__)


class InMemoryLookup:
    """Thread-safe dict-backed answers and key attributes.

    Answers are registered per query text; ``execute`` matches on
    ``str(query)``. Key attributes are registered per instance handle.
    """

    def __init__(self) -> None:
        self._answers: dict[str, list[Answer]] = {}
        self._keys: dict[str, list[tuple[str, Any]]] = {}
        self._lock = threading.Lock()

    # -- registration ---------------------------------------------------------

    def add_answers(self, query: Any, answers: Iterable[Answer]) -> None:
        """Register (append) answers for a query."""
        with self._lock:
            self._answers.setdefault(str(query), []).extend(answers)

    def set_keys(self, handle: str, keys: Iterable[tuple[str, Any]]) -> None:
        """Store or overwrite the key attributes of an instance."""
        with self._lock:
            self._keys[handle] = list(keys)

    def has_instance(self, handle: str) -> bool:
        with self._lock:
            return handle in self._keys

    @property
    def queries(self) -> list[str]:
        with self._lock:
            return list(self._answers)

    # -- Lookup protocol ------------------------------------------------------

    def execute(self, query: Any) -> list[Answer]:
        with self._lock:
            answers = self._answers.get(str(query))
            if answers is None:
                logger.warning("No answers registered for query: %s", query)
                return []
            return list(answers)

    def key_attributes(self, concept: Concept) -> list[tuple[str, Any]]:
        if not isinstance(concept, (EntityConcept, RelationConcept)):
            return []
        with self._lock:
            return list(self._keys.get(concept.handle, []))
