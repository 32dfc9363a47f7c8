"""The lookup collaborator the reconstruction core consumes.

Query execution and key attribute enumeration belong to the storage
layer. The core only needs these two calls and treats both as blocking;
implementations own any locking or transaction discipline.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from veritrace.answers import Answer, Concept


class Lookup(Protocol):
    def execute(self, query: Any) -> list[Answer]:
        """Run *query* with explanations enabled and return its answers in order."""
        ...

    def key_attributes(self, concept: Concept) -> Iterable[tuple[str, Any]]:
        """Return (key type label, key value) pairs identifying an entity or relation."""
        ...
