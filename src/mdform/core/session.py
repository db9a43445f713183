"""Editing session: owns the working Document, its bound form, and the dirty flag"""

from typing import Any, Iterable

from mdform.core.emit import serialize
from mdform.core.form import FieldForm
from mdform.core.models import Collection, Document, FieldDefinition
from mdform.core.parse import parse


class EditSession:
    """One open file. Form emissions flow into the document; only edits mark it dirty."""

    def __init__(self, document: Document, fields: Iterable[FieldDefinition], date_default_now: bool = True):
        self.document = document
        self.dirty = False
        self.form = FieldForm(on_init=self._on_init, on_change=self._on_change, date_default_now=date_default_now)
        self.form.init_form(fields, document.metadata)

    @classmethod
    def open(cls, raw_text: str, fields: Iterable[FieldDefinition], date_default_now: bool = True) -> "EditSession":
        """Start editing existing file content."""
        return cls(parse(raw_text), fields, date_default_now=date_default_now)

    @classmethod
    def create(cls, collection: Collection, date_default_now: bool = True) -> "EditSession":
        """Start a new file for collection, body seeded from its body field default."""
        return cls(Document(metadata={}, body=collection.body_default), collection.fields, date_default_now=date_default_now)

    def _on_init(self, metadata: dict[str, Any]) -> None:
        self.document = self.document.replace(metadata=metadata)

    def _on_change(self, metadata: dict[str, Any]) -> None:
        self.document = self.document.replace(metadata=metadata)
        self.dirty = True

    def set_body(self, body: str) -> None:
        if body != self.document.body:
            self.document = self.document.replace(body=body)
            self.dirty = True

    def switch_fields(self, fields: Iterable[FieldDefinition]) -> bool:
        """Rebind to a new schema from the last saved metadata, dropping unsaved edits. Warn the user before calling."""
        return self.form.update_fields(fields)

    def content(self) -> str:
        return serialize(self.document)

    def mark_saved(self) -> None:
        self.form.rebase(self.document.metadata)
        self.dirty = False
