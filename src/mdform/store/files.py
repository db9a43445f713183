"""Collection file access over a local repository checkout"""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath

from mdform.core.codeblocks import apply_md_config
from mdform.core.models import Collection, Direction, MDConfig


logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = {".md", ".mdx", ".markdown"}


@dataclass
class FileInfo:
    name:     str
    path:     str               # relative to the collection root, '/' separated
    is_dir:   bool
    size:     int
    mod_time: datetime
    extension: str = ""


class CollectionStore:
    """Read and write files of one collection, confined to its directory.

    Markdown reads and writes pass through the repository's code block
    transforms (Direction.read on the way out, Direction.write on the way in).
    """

    def __init__(self, repo_dir: Path, collection: Collection, md_config: MDConfig | None = None):
        self.collection = collection
        self.md_config = md_config
        self.root = (Path(repo_dir) / collection.path).resolve()

    def resolve(self, rel_path: str) -> Path:
        """Map a collection-relative path to disk. Raises ValueError if it escapes the collection."""
        rel = PurePosixPath(str(rel_path).replace("\\", "/"))
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"invalid path: {rel_path}")
        full = (self.root / rel).resolve()
        if full != self.root and self.root not in full.parents:
            raise ValueError(f"invalid path: {rel_path}")
        return full

    def _relative(self, full: Path) -> str:
        return full.relative_to(self.root).as_posix()

    def _is_markdown(self, full: Path) -> bool:
        return full.suffix.lower() in MARKDOWN_SUFFIXES

    def list_files(self, sub_path: str = "") -> list[FileInfo]:
        """List entries directly under sub_path, directories first, then by name."""
        base = self.resolve(sub_path) if sub_path else self.root
        if not base.is_dir():
            raise FileNotFoundError(f"Directory not found: {sub_path or '.'}")
        entries = []
        for p in base.iterdir():
            if p.name.startswith("."):
                continue
            stat = p.stat()
            entries.append(FileInfo(
                name=p.name,
                path=self._relative(p),
                is_dir=p.is_dir(),
                size=0 if p.is_dir() else stat.st_size,
                mod_time=datetime.fromtimestamp(stat.st_mtime),
                extension="" if p.is_dir() else p.suffix,
            ))
        return sorted(entries, key=lambda e: (not e.is_dir, e.name))

    def read_file(self, rel_path: str) -> str:
        full = self.resolve(rel_path)
        if not full.exists():
            raise FileNotFoundError(f"File does not exist: {rel_path}")
        if full.is_dir():
            raise IsADirectoryError(f"Path is a directory, not a file: {rel_path}")
        text = full.read_text(encoding="utf-8")
        if self._is_markdown(full):
            text = apply_md_config(text, self.md_config, Direction.read)
        return text

    def write_file(self, rel_path: str, content: str) -> Path:
        """Create or overwrite a file, creating parent directories as needed."""
        full = self.resolve(rel_path)
        if full.is_dir():
            raise IsADirectoryError(f"Path is a directory, not a file: {rel_path}")
        if self._is_markdown(full):
            content = apply_md_config(content, self.md_config, Direction.write)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_text(content, encoding="utf-8")
        logger.info("Wrote %s/%s", self.collection.name, rel_path)
        return full

    def create_file(self, rel_path: str, content: str) -> Path:
        if self.resolve(rel_path).exists():
            raise FileExistsError(f"File already exists: {rel_path}")
        return self.write_file(rel_path, content)

    def rename_file(self, old_path: str, new_path: str) -> Path:
        src, dest = self.resolve(old_path), self.resolve(new_path)
        if not src.exists():
            raise FileNotFoundError(f"File does not exist: {old_path}")
        if dest.exists():
            raise FileExistsError(f"File already exists: {new_path}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        src.rename(dest)
        logger.info("Renamed %s/%s -> %s", self.collection.name, old_path, new_path)
        return dest

    def delete_file(self, rel_path: str) -> None:
        full = self.resolve(rel_path)
        if full == self.root:
            raise ValueError("invalid path: cannot delete the collection root")
        if not full.exists():
            raise FileNotFoundError(f"File does not exist: {rel_path}")
        if full.is_dir():
            shutil.rmtree(full)
        else:
            full.unlink()
        logger.info("Deleted %s/%s", self.collection.name, rel_path)

    def create_folder(self, rel_path: str) -> Path:
        full = self.resolve(rel_path)
        if full.exists():
            raise FileExistsError(f"Folder already exists: {rel_path}")
        full.mkdir(parents=True)
        return full
