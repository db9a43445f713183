"""Serialize a Document back into front matter + body text"""

from typing import Any

import yaml

from mdform.core.models import Document, ValueKind, value_kind
from mdform.core.parse import DELIMITER


def _encodable(value: Any) -> Any:
    """Normalize a metadata value into something yaml.safe_dump accepts."""
    kind = value_kind(value)
    if kind == ValueKind.list:
        return list(value)
    if kind != ValueKind.opaque:
        return value
    if isinstance(value, dict):
        return {str(k): _encodable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_encodable(v) for v in value]
    return value


def dump_metadata(metadata: dict[str, Any]) -> str:
    """Return the YAML text of a metadata mapping, keys in insertion order."""
    data = {k: _encodable(v) for k, v in metadata.items()}
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def serialize(doc: Document) -> str:
    """Return file content for doc. Empty metadata emits the body alone, with no block."""
    if not doc.metadata:
        return doc.body
    return f"{DELIMITER}\n{dump_metadata(doc.metadata)}{DELIMITER}\n\n{doc.body}"
