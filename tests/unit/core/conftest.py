"""Shared fixtures for core unit tests"""

import pytest

from mdform.core.models import Collection, FieldDefinition


SAMPLE_FM_MD = """\
---
title: Test Doc
draft: false
tags:
- a
- b
---

# Title

Body content.
"""


@pytest.fixture(name="sample_fm_md")
def sample_fm_md_fixture():
    return SAMPLE_FM_MD


@pytest.fixture(name="fields")
def fields_fixture():
    return [
        FieldDefinition(name="title", type="string", label="Title", required=True),
        FieldDefinition(name="date", type="date", label="Date"),
        FieldDefinition(name="draft", type="boolean", default=False),
        FieldDefinition(name="tags", type="string", list=True),
        FieldDefinition(name="weight", type="number"),
        FieldDefinition(name="body", type="string", default="Write here"),
    ]


@pytest.fixture(name="collection")
def collection_fixture(fields):
    return Collection(
        name="posts",
        label="Posts",
        path="content/posts",
        file_name_generator={"type": "date", "first": "title"},
        fields=fields,
    )
