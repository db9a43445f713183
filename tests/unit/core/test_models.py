"""Unit tests for core/models.py"""

from datetime import date

import pytest

from mdform.core.models import (
    CodeBlockTransform, CollectionConfig, Direction, Document, FieldDefinition, FieldType, ValueKind, value_kind,
)


@pytest.mark.parametrize("value,kind", [
    ("x", ValueKind.string),
    (3, ValueKind.number),
    (2.5, ValueKind.number),
    (True, ValueKind.boolean),
    (date(2024, 1, 1), ValueKind.date),
    (["a", "b"], ValueKind.list),
    ([], ValueKind.list),
    (None, ValueKind.null),
    ({"k": "v"}, ValueKind.opaque),
    ([1, "a"], ValueKind.opaque),
])
def test_value_kind(value, kind):
    assert value_kind(value) == kind


def test_document_rejects_body_key():
    with pytest.raises(ValueError, match="reserved"):
        Document(metadata={"body": "x"}, body="")


def test_document_equality_ignores_raw_text():
    assert Document(metadata={"a": 1}, body="b", raw_text="one") == Document(metadata={"a": 1}, body="b", raw_text="two")


def test_document_replace_returns_copy():
    doc = Document(metadata={"a": 1}, body="b", raw_text="raw")
    new = doc.replace(body="c")
    assert new.body == "c" and new.metadata == {"a": 1} and new.raw_text == "raw"
    assert doc.body == "b"


def test_field_definition_list_alias():
    """The schema key 'list' maps to is_list."""
    f = FieldDefinition.model_validate({"name": "tags", "type": "string", "list": True})
    assert f.is_list is True
    assert f.type == FieldType.string


def test_field_definition_rejects_unknown_type():
    with pytest.raises(ValueError):
        FieldDefinition(name="x", type="markdown")


@pytest.mark.parametrize("direction,setting,applies", [
    (Direction.read, Direction.both, True),
    (Direction.write, Direction.both, True),
    (Direction.read, Direction.read, True),
    (Direction.write, Direction.read, False),
])
def test_code_block_transform_applies_to(direction, setting, applies):
    t = CodeBlockTransform(from_lang="mermaid", to_lang="kroki-mermaid", direction=setting)
    assert t.applies_to(direction) is applies


def test_code_block_transform_disabled():
    t = CodeBlockTransform(from_lang="a", to_lang="b", enabled=False)
    assert not t.applies_to(Direction.write)


def test_code_block_transform_langs():
    t = CodeBlockTransform(from_lang="mermaid", to_lang="kroki-mermaid")
    assert t.langs(Direction.write) == ("mermaid", "kroki-mermaid")
    assert t.langs(Direction.read) == ("kroki-mermaid", "mermaid")


def test_collection_body_default(collection):
    assert collection.body_default == "Write here"


def test_collection_config_get(collection):
    config = CollectionConfig(collections=[collection])
    assert config.get("posts") is collection
    assert config.names() == ["posts"]
    with pytest.raises(ValueError, match="not found"):
        config.get("pages")
