"""Bidirectional binding between a collection's field schema and document metadata"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from mdform.core.fields import coerce_value, form_fields, missing_required, seed_value
from mdform.core.models import FieldDefinition


logger = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], None]


class FormState(str, Enum):
    uninitialized = "uninitialized"
    bound = "bound"


class FieldForm:
    """Holds one coerced value per schema field and emits merged metadata.

    on_init fires once per binding with the starting metadata; on_change fires
    after every accepted edit while all required fields are filled. Emissions
    are synchronous; the caller decides when to persist.
    """

    def __init__(
        self,
        on_init: Optional[Listener] = None,
        on_change: Optional[Listener] = None,
        date_default_now: bool = True,
        ):
        self.on_init = on_init
        self.on_change = on_change
        self.date_default_now = date_default_now
        self.state = FormState.uninitialized
        self._fields: list[FieldDefinition] = []
        self._base: dict[str, Any] = {}
        self._values: dict[str, Any] = {}

    @property
    def fields(self) -> list[FieldDefinition]:
        return list(self._fields)

    @property
    def values(self) -> dict[str, Any]:
        return {k: list(v) if isinstance(v, list) else v for k, v in self._values.items()}

    def reset(self) -> None:
        self.state = FormState.uninitialized
        self._fields = []
        self._values = {}

    def init_form(self, fields: Iterable[FieldDefinition], metadata: dict[str, Any]) -> dict[str, Any]:
        """Bind fields to metadata, coerce every seed value, and fire the init emission."""
        self.reset()
        self._base = dict(metadata)
        self._fields = form_fields(fields)
        self._values = {
            f.name: coerce_value(f, seed_value(f, self._base), date_default_now=self.date_default_now)
            for f in self._fields
        }
        self.state = FormState.bound
        merged = self.merged_metadata()
        if self.on_init:
            self.on_init(merged)
        return merged

    def rebase(self, metadata: dict[str, Any]) -> None:
        """Adopt metadata as the saved state that a later schema switch rebuilds from."""
        self._base = dict(metadata)

    def update_fields(self, fields: Iterable[FieldDefinition]) -> bool:
        """Rebind when the schema changed. Unsaved edits are discarded. Returns True on rebuild."""
        new_fields = form_fields(fields)
        if self.state == FormState.bound and new_fields == self._fields:
            return False
        logger.debug("Field schema changed, rebuilding form (%d fields)", len(new_fields))
        self.init_form(new_fields, self._base)
        return True

    def _field(self, name: str) -> FieldDefinition:
        if self.state != FormState.bound:
            raise RuntimeError("Form is not bound; call init_form first")
        for f in self._fields:
            if f.name == name:
                return f
        raise ValueError(f"Unknown field '{name}'")

    def _list_field(self, name: str) -> FieldDefinition:
        f = self._field(name)
        if not f.is_list:
            raise ValueError(f"Field '{name}' is not a list field")
        return f

    def missing(self) -> list[str]:
        return missing_required(self._fields, self._values)

    def is_valid(self) -> bool:
        return not self.missing()

    def merged_metadata(self) -> dict[str, Any]:
        """Bound metadata overwritten by the current field values."""
        merged = dict(self._base)
        merged.update(self.values)
        return merged

    def _emit_change(self) -> bool:
        if not self.is_valid():
            logger.debug("Form invalid, change not emitted; missing: %s", self.missing())
            return False
        if self.on_change:
            self.on_change(self.merged_metadata())
        return True

    def set_value(self, name: str, value: Any) -> bool:
        """Coerce and store a field value. Returns whether a change was emitted."""
        f = self._field(name)
        self._values[name] = coerce_value(f, value, date_default_now=self.date_default_now)
        return self._emit_change()

    def add_tag(self, name: str, raw_value: str) -> bool:
        """Append a trimmed tag if non-empty and not already present. Returns whether a change was emitted."""
        self._list_field(name)
        tag = (raw_value or "").strip()
        tags = self._values[name]
        if not tag or tag in tags:
            return False
        tags.append(tag)
        return self._emit_change()

    def remove_tag(self, name: str, tag: str) -> bool:
        """Remove the first exact match of tag. No-op if absent."""
        self._list_field(name)
        tags = self._values[name]
        if tag not in tags:
            return False
        tags.remove(tag)
        return self._emit_change()
