"""Shared base for models persisted as store documents."""

from typing import Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from encore.store.base import DocumentSnapshot


class DocumentModel(BaseModel):
    """A model stored as a camelCase JSON document.

    The document id lives outside the document body, so ``id`` is excluded
    from :meth:`to_document` and filled in from the snapshot on read.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""

    @classmethod
    def from_snapshot(cls, snapshot: DocumentSnapshot) -> Self:
        return cls.model_validate({**(snapshot.data or {}), "id": snapshot.id})

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})
