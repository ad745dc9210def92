from encore.store.base import DocumentSnapshot, DocumentStore, FieldFilter, where
from encore.store.sql import SqlDocumentStore, StoredDocument

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "SqlDocumentStore",
    "StoredDocument",
    "where",
]
