"""Document store interface.

The engine talks to a generic document-collection store: documents are JSON
maps addressed by ``(collection, id)``. Stores must be swappable; every
adapter implements :class:`DocumentStore` and reports failures as
:class:`encore.errors.StoreError`.
"""

import copy
import operator
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

_MISSING = object()

OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def get_path(data: dict, path: str, default: Any = _MISSING) -> Any:
    """Resolve a dotted field path (``"venue.city.name"``) inside a document."""
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def deep_merge(base: dict, update: dict) -> dict:
    """Merge ``update`` into a copy of ``base``, recursing into nested maps.

    A nested map in ``update`` merges into the map at the same key; any other
    value (including ``None``) replaces it.
    """
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document read from the store. ``data`` is None when it does not exist."""

    id: str
    data: dict | None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def get(self, path: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        value = get_path(self.data, path)
        return default if value is _MISSING else value


@dataclass(frozen=True)
class FieldFilter:
    """An equality or range predicate on one (possibly dotted) field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    def matches(self, data: dict) -> bool:
        actual = get_path(data, self.field)
        if actual is _MISSING:
            return False
        if self.op not in ("==", "!=") and (actual is None or self.value is None):
            return False
        try:
            return bool(OPERATORS[self.op](actual, self.value))
        except TypeError:
            return False


def where(field: str, op: str, value: Any) -> FieldFilter:
    """Shorthand for building a :class:`FieldFilter`."""
    return FieldFilter(field, op, value)


def apply_query(
    snapshots: Iterable[DocumentSnapshot],
    filters: Sequence[FieldFilter] = (),
    order_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
) -> list[DocumentSnapshot]:
    """Filter, order and limit snapshots in memory.

    Documents missing a filtered or ordered field are excluded.
    """
    results = [
        snap
        for snap in snapshots
        if snap.data is not None and all(f.matches(snap.data) for f in filters)
    ]
    if order_by is not None:
        results = [
            snap for snap in results if get_path(snap.data, order_by) not in (_MISSING, None)
        ]
        results.sort(key=lambda snap: get_path(snap.data, order_by), reverse=descending)
    if limit is not None:
        results = results[:limit]
    return results


class DocumentStore(ABC):
    """Interface for document persistence operations."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Return the document, or a snapshot with ``exists == False``."""
        ...

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: dict, merge: bool = False) -> None:
        """Write a document under a caller-chosen id.

        With ``merge`` the fields are deep-merged into any existing document;
        otherwise the document is replaced.
        """
        ...

    @abstractmethod
    def add(self, collection: str, data: dict) -> str:
        """Create a document under an auto-generated id and return the id."""
        ...

    @abstractmethod
    def create(self, collection: str, doc_id: str, data: dict) -> None:
        """Create a document only if the id is free.

        Raises:
            DocumentExistsError: If a document with this id already exists.
        """
        ...

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        """Return documents matching all filters, ordered and limited."""
        ...

    def scan(self, collection: str) -> list[DocumentSnapshot]:
        """Return every document in a collection."""
        return self.query(collection)
