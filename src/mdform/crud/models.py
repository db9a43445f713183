"""Database table definitions for saved content files and their version history"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


class FileRecord(SQLModel, table=True):
    """Latest saved state of one file in a collection"""
    __tablename__ = "files"
    __table_args__ = (UniqueConstraint("collection", "path", name="uq_file_collection_path"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    collection: str = Field(..., index=True, nullable=False)
    path: str = Field(..., sa_column=Column(Text, nullable=False))
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    is_draft: bool = Field(default=False, nullable=False, description="Saved but not yet published")
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    versions: List["FileVersion"] = Relationship(back_populates="file")


class FileVersion(SQLModel, table=True):
    """Immutable snapshot of a FileRecord at a prior save."""
    __tablename__ = "file_versions"
    __table_args__ = (UniqueConstraint("file_id", "version_num", name="uq_filever_file_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    file_id: UUID = Field(..., foreign_key="files.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-file version number")
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    file: Optional[FileRecord] = Relationship(back_populates="versions")
