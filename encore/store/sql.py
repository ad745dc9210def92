"""SQL-backed document store.

Every collection lives in a single ``storeddocument`` table keyed by
``(collection, doc_id)`` with the document body in a JSON column. Queries
load the collection and evaluate filters in memory, the same full-scan
behavior the engine assumes of the remote store.

Each write commits immediately: one document write is one transaction, and
nothing spans two documents.
"""

import copy
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, select

from encore.errors import DocumentExistsError, StoreError
from encore.store.base import (
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    apply_query,
    deep_merge,
)

logger = logging.getLogger(__name__)


class StoredDocument(SQLModel, table=True):
    """One document of one collection.

    Attributes:
        collection: Collection name, e.g. ``"friend_requests"``.
        doc_id: Document id, unique within the collection.
        data: The document body as a JSON map.
        created_at: When the row was first written.
        updated_at: When the row was last written.
    """
    collection: str = Field(primary_key=True)
    doc_id: str = Field(primary_key=True)
    data: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SqlDocumentStore(DocumentStore):
    """Document store on top of a SQLModel session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Roll back and surface any database failure as a StoreError."""
        try:
            yield
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Store {action} failed: {e}")
            raise StoreError() from e

    def _row(self, collection: str, doc_id: str) -> StoredDocument | None:
        return self._session.get(StoredDocument, (collection, doc_id))

    def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        with self._guard(f"get {collection}/{doc_id}"):
            row = self._row(collection, doc_id)
            if row is None:
                return DocumentSnapshot(id=doc_id, data=None)
            return DocumentSnapshot(id=doc_id, data=copy.deepcopy(row.data))

    def set(self, collection: str, doc_id: str, data: dict, merge: bool = False) -> None:
        with self._guard(f"set {collection}/{doc_id}"):
            row = self._row(collection, doc_id)
            if row is None:
                row = StoredDocument(
                    collection=collection, doc_id=doc_id, data=copy.deepcopy(data)
                )
            else:
                # Reassign rather than mutate so the JSON column is flagged dirty.
                row.data = deep_merge(row.data, data) if merge else copy.deepcopy(data)
                row.updated_at = datetime.now(UTC)
            self._session.add(row)
            self._session.commit()

    def add(self, collection: str, data: dict) -> str:
        doc_id = uuid4().hex
        self.create(collection, doc_id, data)
        return doc_id

    def create(self, collection: str, doc_id: str, data: dict) -> None:
        if self._row_exists(collection, doc_id):
            raise DocumentExistsError(collection, doc_id)
        row = StoredDocument(collection=collection, doc_id=doc_id, data=copy.deepcopy(data))
        try:
            self._session.add(row)
            self._session.commit()
        except IntegrityError as e:
            # Another writer took the id between the check and the insert.
            self._session.rollback()
            raise DocumentExistsError(collection, doc_id) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Store create {collection}/{doc_id} failed: {e}")
            raise StoreError() from e

    def _row_exists(self, collection: str, doc_id: str) -> bool:
        with self._guard(f"get {collection}/{doc_id}"):
            return self._row(collection, doc_id) is not None

    def delete(self, collection: str, doc_id: str) -> None:
        with self._guard(f"delete {collection}/{doc_id}"):
            row = self._row(collection, doc_id)
            if row is None:
                return
            self._session.delete(row)
            self._session.commit()

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        with self._guard(f"query {collection}"):
            statement = (
                select(StoredDocument)
                .where(StoredDocument.collection == collection)
                .order_by(StoredDocument.created_at, StoredDocument.doc_id)
            )
            rows = self._session.exec(statement).all()
            snapshots = [
                DocumentSnapshot(id=row.doc_id, data=copy.deepcopy(row.data)) for row in rows
            ]
        return apply_query(snapshots, filters, order_by, descending, limit)
