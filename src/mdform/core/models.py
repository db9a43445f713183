"""Document value object, field schema, and collection configuration models"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


BODY_FIELD = "body"

# Front matter values as decoded from YAML. Nested mappings and mixed lists
# are carried through untouched (ValueKind.opaque).
Value = Union[str, int, float, bool, date, datetime, list[str], None]


class ValueKind(str, Enum):
    """Tag for each member of the Value union"""
    string = "string"
    number = "number"
    boolean = "boolean"
    date = "date"
    list = "list"
    null = "null"
    opaque = "opaque"


def value_kind(value: Any) -> ValueKind:
    """Classify a metadata value. bool is checked before number (bool subclasses int)."""
    if value is None:
        return ValueKind.null
    if isinstance(value, bool):
        return ValueKind.boolean
    if isinstance(value, (int, float)):
        return ValueKind.number
    if isinstance(value, (date, datetime)):
        return ValueKind.date
    if isinstance(value, str):
        return ValueKind.string
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return ValueKind.list
    return ValueKind.opaque


@dataclass(frozen=True)
class Document:
    """Parsed content file: front matter mapping plus body text.

    raw_text is the text the document was parsed from and takes no part in
    equality, so parse(serialize(d)) == d compares metadata and body only.
    """
    metadata: dict[str, Any] = field(default_factory=dict)
    body:     str = ""
    raw_text: str = field(default="", compare=False)

    def __post_init__(self):
        if BODY_FIELD in self.metadata:
            raise ValueError(f"'{BODY_FIELD}' is reserved and cannot be a metadata key")

    def replace(self, metadata: Optional[dict[str, Any]] = None, body: Optional[str] = None) -> "Document":
        """Return a copy with metadata and/or body swapped out."""
        return Document(
            metadata=dict(self.metadata if metadata is None else metadata),
            body=self.body if body is None else body,
            raw_text=self.raw_text,
        )


class FieldType(str, Enum):
    """Supported front matter field types"""
    string = "string"
    date = "date"
    boolean = "boolean"
    number = "number"


class FieldDefinition(BaseModel):
    """One schema entry of a collection; `list` marks a string field holding tags."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name:     str
    type:     FieldType = FieldType.string
    label:    str = ""
    required: bool = False
    is_list:  bool = Field(default=False, alias="list")
    default:  Any = None
    format:   Optional[str] = None        # display hint only


class Direction(str, Enum):
    read = "read"
    write = "write"
    both = "both"


class CodeBlockTransform(BaseModel):
    """Rename a fenced code block language: from_lang -> to_lang on write, reverse on read."""
    from_lang: str
    to_lang:   str
    direction: Direction = Direction.both
    enabled:   bool = True

    def applies_to(self, direction: Direction) -> bool:
        return self.enabled and self.direction in (Direction.both, direction)

    def langs(self, direction: Direction) -> tuple[str, str]:
        """Return (source, target) language pair for the given direction."""
        if direction == Direction.read:
            return self.to_lang, self.from_lang
        return self.from_lang, self.to_lang


class MDConfig(BaseModel):
    code_block_transforms: list[CodeBlockTransform] = []


class FileNameGenerator(BaseModel):
    type:  str = "date"                   # date | slug
    first: Optional[str] = None           # field whose value seeds the name


class Collection(BaseModel):
    """A named, schema-bound directory of content files within a repository."""
    name:   str
    label:  str = ""
    path:   str
    format: str = "md"
    file_name_generator: Optional[FileNameGenerator] = None
    fields: list[FieldDefinition] = []

    @property
    def body_default(self) -> str:
        """Default body text for new files, from the reserved 'body' field."""
        for f in self.fields:
            if f.name == BODY_FIELD:
                return "" if f.default is None else str(f.default)
        return ""


class CollectionConfig(BaseModel):
    """Repository-level collection schema file contents."""
    collections: list[Collection] = []
    md_config:   Optional[MDConfig] = None

    def get(self, name: str) -> Collection:
        """Return the collection with the given name. Raises ValueError if absent."""
        for c in self.collections:
            if c.name == name:
                return c
        raise ValueError(f"Collection '{name}' not found")

    def names(self) -> list[str]:
        return [c.name for c in self.collections]
