"""Type coercion and required-field checks for front matter form values"""

from datetime import date, datetime
from typing import Any, Iterable, Optional

from mdform.core.models import BODY_FIELD, FieldDefinition, FieldType


def form_fields(fields: Iterable[FieldDefinition]) -> list[FieldDefinition]:
    """Drop the reserved body field; it is edited as the document body."""
    return [f for f in fields if f.name != BODY_FIELD]


def _as_date(value: Any) -> Optional[date]:
    """Return value as a date/datetime if it is date-like, else None."""
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        # date-only strings stay dates so they are written back without a time
        for parse_iso in (date.fromisoformat, datetime.fromisoformat):
            try:
                return parse_iso(text)
            except ValueError:
                continue
    return None


def clean_tags(value: Any) -> list[str]:
    """Return distinct, trimmed, non-empty strings from a list; [] for anything else."""
    if not isinstance(value, (list, tuple)):
        return []
    tags: list[str] = []
    for item in value:
        if item is None:
            continue
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def coerce_value(field: FieldDefinition, value: Any, now: Optional[datetime] = None, date_default_now: bool = True) -> Any:
    """Normalize value to the representation field.type expects. Never raises.

    date     -> date-like value kept, otherwise now (or None when date_default_now is off)
    string   -> str, "" when missing; list fields -> clean_tags(value)
    boolean  -> True only for True or "true"
    number   -> passed through
    """
    if field.type == FieldType.date:
        parsed = _as_date(value)
        if parsed is not None:
            return parsed
        return (now or datetime.now()) if date_default_now else None

    if field.type == FieldType.string:
        if field.is_list:
            return clean_tags(value)
        return "" if value is None else str(value)

    if field.type == FieldType.boolean:
        return value is True or value == "true"

    return value


def seed_value(field: FieldDefinition, metadata: dict[str, Any]) -> Any:
    """Stored metadata value when present and not None, else the field default."""
    value = metadata.get(field.name)
    return field.default if value is None else value


def is_present(field: FieldDefinition, value: Any) -> bool:
    """Whether value satisfies a required field."""
    if field.type == FieldType.boolean:
        return isinstance(value, bool)
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def missing_required(fields: Iterable[FieldDefinition], values: dict[str, Any]) -> list[str]:
    """Return names of required fields whose value is empty."""
    return [f.name for f in fields if f.required and not is_present(f, values.get(f.name))]
