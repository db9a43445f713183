"""Unit tests for core/schema.py"""

import pytest

from mdform.core.models import Direction, FieldType
from mdform.core.schema import load_collections, parse_collections


CONFIG_YML = """\
collections:
  - name: posts
    label: Posts
    path: content/posts
    file_name_generator:
      type: date
      first: title
    fields:
      - {name: title, type: string, label: Title, required: true}
      - {name: tags, type: string, list: true}
      - {name: date, type: date}
      - {name: body, type: string, default: "Write here"}
  - name: pages
    path: content/pages
md_config:
  code_block_transforms:
    - {from_lang: mermaid, to_lang: kroki-mermaid, direction: write}
"""


def test_load_collections(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG_YML)
    config = load_collections(path)
    assert config.names() == ["posts", "pages"]
    posts = config.get("posts")
    assert posts.fields[0].required is True
    assert posts.fields[1].is_list is True
    assert posts.fields[2].type == FieldType.date
    assert posts.body_default == "Write here"
    assert posts.file_name_generator.first == "title"
    assert config.get("pages").fields == []
    assert config.md_config.code_block_transforms[0].direction == Direction.write


def test_load_collections_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_collections(tmp_path / "absent.yml")


def test_parse_collections_invalid_yaml():
    with pytest.raises(ValueError, match="Invalid YAML"):
        parse_collections("collections: [unclosed\n")


def test_parse_collections_not_a_mapping():
    with pytest.raises(ValueError, match="expected a mapping"):
        parse_collections("- a\n- b\n")


def test_parse_collections_bad_field_type():
    with pytest.raises(ValueError, match="Invalid collection schema"):
        parse_collections("collections:\n  - name: x\n    path: x\n    fields:\n      - {name: f, type: html}\n")


def test_parse_collections_empty():
    assert parse_collections("").collections == []
