"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdform.crud.files import content_hash
from mdform.crud.models import FileRecord


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="record")
def record_fixture(session):
    """A minimal FileRecord persisted to the session."""
    content = "---\ntitle: Hello\n---\n\nWorld"
    r = FileRecord(collection="posts", path="hello.md", content=content, hash=content_hash(content))
    session.add(r)
    session.flush()
    return r
