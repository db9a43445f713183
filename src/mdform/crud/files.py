"""Saved file records: upsert on save, draft flag, rename and delete bookkeeping"""

import hashlib
import logging
from datetime import datetime

from sqlmodel import Session, select

from mdform.crud.models import FileRecord, FileVersion
from mdform.crud.versioning import save_version


logger = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    """Hex SHA-256 of the saved text; fills the String(64) hash columns."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def get_by_path(session: Session, collection: str, path: str) -> FileRecord | None:
    """Return the FileRecord for collection/path, or None if never saved."""
    return session.exec(
        select(FileRecord)
        .where(FileRecord.collection == collection)
        .where(FileRecord.path == path)
    ).one_or_none()


def list_records(session: Session, collection: str, drafts_only: bool = False) -> list[FileRecord]:
    """Return records of a collection ordered by path."""
    stmt = select(FileRecord).where(FileRecord.collection == collection)
    if drafts_only:
        stmt = stmt.where(FileRecord.is_draft == True)  # noqa: E712
    return list(session.exec(stmt.order_by(FileRecord.path)).all())


def record_save(
    session: Session,
    collection: str,
    path: str,
    content: str,
    is_draft: bool = False,
    max_versions: int = 10,
    ) -> tuple[FileRecord, str]:
    """Record a save of collection/path.

    Returns (record, status) where status is 'created', 'updated', or 'unchanged'.
    The prior content is snapshotted as a version before an update.
    Flushes but does not commit; caller controls the transaction.
    """
    digest = content_hash(content)
    record = get_by_path(session, collection, path)

    if record:
        if record.hash == digest and record.is_draft == is_draft:
            return record, 'unchanged'
        if record.hash != digest:
            save_version(session, record, max_versions)
            record.content = content
            record.hash = digest
        record.is_draft = is_draft
        record.updated_at = datetime.now()
        session.add(record)
        session.flush()
        logger.debug("Updated record %s/%s", collection, path)
        return record, 'updated'

    record = FileRecord(collection=collection, path=path, content=content, hash=digest, is_draft=is_draft)
    session.add(record)
    session.flush()
    logger.debug("Created record %s/%s", collection, path)
    return record, 'created'


def rename_record(session: Session, collection: str, old_path: str, new_path: str) -> FileRecord | None:
    """Move a record (and its history) to new_path. Returns None if old_path was never saved."""
    record = get_by_path(session, collection, old_path)
    if record is None:
        return None
    if get_by_path(session, collection, new_path) is not None:
        raise ValueError(f"A record already exists for {collection}/{new_path}")
    record.path = new_path
    record.updated_at = datetime.now()
    session.add(record)
    session.flush()
    return record


def delete_record(session: Session, collection: str, path: str) -> bool:
    """Delete a record and all of its versions. Returns False if none existed."""
    record = get_by_path(session, collection, path)
    if record is None:
        return False
    for v in session.exec(select(FileVersion).where(FileVersion.file_id == record.id)).all():
        session.delete(v)
    session.flush()
    session.delete(record)
    session.flush()
    return True
