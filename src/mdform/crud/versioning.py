"""File version persistence: save, prune, list, and diff operations"""

import difflib
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdform.crud.models import FileRecord, FileVersion


def get_version(session: Session, file_id: UUID, version_num: int) -> FileVersion:
    """Return one stored version. Raises ValueError if missing."""
    v = session.exec(
        select(FileVersion)
        .where(FileVersion.file_id == file_id)
        .where(FileVersion.version_num == version_num)
    ).one_or_none()
    if v is None:
        raise ValueError(f"Version {version_num} not found for file {file_id}")
    return v


def diff_versions(session: Session, file_id: UUID, from_num: int, to_num: int, context: int = 3) -> list[str]:
    """Unified diff lines between two stored versions, newlines kept; [] when identical.

    Raises ValueError if either version is missing.
    """
    v_from, v_to = get_version(session, file_id, from_num), get_version(session, file_id, to_num)
    return list(difflib.unified_diff(
        v_from.content.splitlines(keepends=True),
        v_to.content.splitlines(keepends=True),
        fromfile=f"v{from_num}",
        tofile=f"v{to_num}",
        n=context,
    ))


def list_versions(session: Session, file_id: UUID) -> list[FileVersion]:
    """Return all versions for a file ordered by version_num ascending."""
    return list(
        session.exec(
            select(FileVersion)
            .where(FileVersion.file_id == file_id)
            .order_by(FileVersion.version_num.asc())
        ).all()
    )


def prune_versions(session: Session, file_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, file_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()

    return excess


def save_version(session: Session, record: FileRecord, max_versions: int = 10) -> FileVersion:
    """Snapshot the record's current content as a new immutable version.

    version_num is MAX(version_num)+1 for this file, so numbers stay unique
    after pruning.
    """
    result = session.exec(
        select(func.max(FileVersion.version_num))
        .where(FileVersion.file_id == record.id)
    ).one()

    version = FileVersion(
        file_id=record.id,
        version_num=(result or 0) + 1,
        content=record.content,
        hash=record.hash,
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, record.id, max_versions)

    return version
