"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import yaml
from sqlmodel import Session, SQLModel

from mdform.config import Settings, load_config
from mdform.core.models import Collection, CollectionConfig
from mdform.core.naming import ensure_extension, generate_file_name
from mdform.core.parse import load_yaml
from mdform.core.schema import load_collections
from mdform.core.session import EditSession
from mdform.crud.database import init_db, make_engine
from mdform.crud.files import delete_record, get_by_path, list_records, record_save, rename_record
from mdform.crud.versioning import diff_versions, list_versions
from mdform.log import setup_logging
from mdform.store.files import CollectionStore


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings() -> Settings:
    """Load config and configure logging with standard CLI error handling."""
    try:
        settings = load_config()
        setup_logging(settings.log_level)
    except ValueError as e:
        _fail(str(e))
    return settings


def _collections(settings: Settings) -> CollectionConfig:
    try:
        return load_collections(settings.collections_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _open(settings: Settings, name: str) -> tuple[Collection, CollectionStore]:
    """Resolve a collection by name and build its store."""
    config = _collections(settings)
    try:
        collection = config.get(name)
    except ValueError as e:
        _fail(str(e))
    return collection, CollectionStore(Path(settings.repo_dir), collection, config.md_config)


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _pairs(items: Optional[list[str]], option: str, decode: bool = True) -> list[tuple[str, Any]]:
    """Split KEY=VALUE options; values are decoded as YAML scalars (true, 3, 2024-01-01) unless decode is off."""
    pairs = []
    for item in items or []:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            _fail(f"{option} expects KEY=VALUE, got '{item}'")
        value = raw
        if decode and raw.strip():
            try:
                value = load_yaml(raw)
            except yaml.YAMLError:
                value = raw
        pairs.append((key.strip(), value))
    return pairs


def _apply_edits(session: EditSession, sets, tags, untags) -> None:
    try:
        for name, value in _pairs(sets, "--set"):
            session.form.set_value(name, value)
        for name, value in _pairs(tags, "--tag", decode=False):
            session.form.add_tag(name, value)
        for name, value in _pairs(untags, "--untag", decode=False):
            session.form.remove_tag(name, value)
    except ValueError as e:
        _fail(str(e))


def _require_valid(session: EditSession) -> None:
    missing = session.form.missing()
    if missing:
        _fail(f"Required field(s) empty: {', '.join(missing)}")


SetOpt = Annotated[Optional[list[str]], typer.Option("--set", help="Set a field: KEY=VALUE (repeatable)")]
TagOpt = Annotated[Optional[list[str]], typer.Option("--tag", help="Add a tag to a list field: KEY=TAG (repeatable)")]
DraftOpt = Annotated[bool, typer.Option("--draft", help="Record the save as a draft")]


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the history database. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing history cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def collections_cmd():
    """List collections declared in the repository's collection schema."""
    config = _collections(_settings())
    if not config.collections:
        typer.echo("No collections defined.")
        raise typer.Exit(1)
    for c in config.collections:
        fields = ", ".join(f.name for f in c.fields) or "-"
        typer.echo(f"{c.name}\t{c.label or c.name}\t{c.path}\t[{fields}]")


def list_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    sub_path: Annotated[str, typer.Argument(help="Folder within the collection")] = "",
    drafts: Annotated[bool, typer.Option("--drafts", help="List files last saved as drafts instead")] = False,
    ):
    """List a collection folder, directories first, or its draft files."""
    settings = _settings()
    coll, store = _open(settings, collection)
    if drafts:
        with Session(_engine(settings)) as db:
            for record in list_records(db, coll.name, drafts_only=True):
                typer.echo(f"{record.path}\t{record.updated_at:%Y-%m-%d %H:%M:%S}")
        return
    try:
        entries = store.list_files(sub_path)
    except (OSError, ValueError) as e:
        _fail(f"Cannot list {sub_path or coll.path}", e)
    for entry in entries:
        if entry.is_dir:
            typer.echo(f"{entry.path}/")
        else:
            typer.echo(f"{entry.path}\t{entry.size}\t{entry.mod_time:%Y-%m-%d %H:%M:%S}")


def mkdir_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    path: Annotated[str, typer.Argument(help="Folder path within the collection")],
    ):
    """Create a folder within a collection."""
    settings = _settings()
    _, store = _open(settings, collection)
    try:
        store.create_folder(path)
    except (OSError, ValueError) as e:
        _fail(f"Cannot create folder {path}", e)
    typer.echo(f"created folder: {path}")


def show_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    path: Annotated[str, typer.Argument(help="File path within the collection")],
    as_json: Annotated[bool, typer.Option("--json", help="Print metadata and body as JSON")] = False,
    ):
    """Show a file's bound field values and body."""
    settings = _settings()
    coll, store = _open(settings, collection)
    try:
        raw = store.read_file(path)
    except (OSError, ValueError) as e:
        _fail(f"Cannot read {path}", e)

    session = EditSession.open(raw, coll.fields, date_default_now=settings.date_default == "now")
    if as_json:
        typer.echo(json.dumps(
            {"metadata": session.document.metadata, "body": session.document.body},
            indent=2, default=str, ensure_ascii=False,
        ))
        return
    for f in session.form.fields:
        value = session.form.values[f.name]
        flag = " *" if f.required else ""
        typer.echo(f"{f.label or f.name}{flag}: {value}")
    typer.echo("")
    typer.echo(session.document.body)


def new_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    name: Annotated[Optional[str], typer.Option("--name", help="File name; generated when omitted")] = None,
    folder: Annotated[str, typer.Option("--folder", help="Sub-folder within the collection")] = "",
    sets: SetOpt = None,
    tags: TagOpt = None,
    body: Annotated[Optional[str], typer.Option("--body", help="Body text; defaults to the collection's body default")] = None,
    draft: DraftOpt = False,
    ):
    """Create a new file in a collection from field values."""
    settings = _settings()
    coll, store = _open(settings, collection)

    session = EditSession.create(coll, date_default_now=settings.date_default == "now")
    _apply_edits(session, sets, tags, None)
    if body is not None:
        session.set_body(body)
    _require_valid(session)

    file_name = name or generate_file_name(coll, session.form.values)
    file_name = ensure_extension(file_name, settings.file_extension)
    rel_path = f"{folder.strip('/')}/{file_name}" if folder.strip("/") else file_name
    content = session.content()

    try:
        store.create_file(rel_path, content)
    except (OSError, ValueError) as e:
        _fail(f"Cannot create {rel_path}", e)

    with Session(_engine(settings)) as db:
        record_save(db, coll.name, rel_path, content, is_draft=draft, max_versions=settings.max_versions)
        db.commit()
    session.mark_saved()
    typer.echo(f"created: {rel_path}")


def edit_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    path: Annotated[str, typer.Argument(help="File path within the collection")],
    sets: SetOpt = None,
    tags: TagOpt = None,
    untags: Annotated[Optional[list[str]], typer.Option("--untag", help="Remove a tag: KEY=TAG (repeatable)")] = None,
    body_file: Annotated[Optional[Path], typer.Option("--body-file", help="Replace the body with this file's text")] = None,
    draft: DraftOpt = False,
    ):
    """Edit an existing file's fields and/or body and save it."""
    settings = _settings()
    coll, store = _open(settings, collection)
    try:
        raw = store.read_file(path)
    except (OSError, ValueError) as e:
        _fail(f"Cannot read {path}", e)

    session = EditSession.open(raw, coll.fields, date_default_now=settings.date_default == "now")
    _apply_edits(session, sets, tags, untags)
    if body_file is not None:
        try:
            session.set_body(body_file.read_text(encoding="utf-8"))
        except OSError as e:
            _fail(f"Cannot read {body_file}", e)

    _require_valid(session)
    if not session.dirty:
        typer.echo(f"unchanged: {path}")
        return

    content = session.content()
    try:
        store.write_file(path, content)
    except (OSError, ValueError) as e:
        _fail(f"Cannot write {path}", e)

    with Session(_engine(settings)) as db:
        _, status = record_save(db, coll.name, path, content, is_draft=draft, max_versions=settings.max_versions)
        db.commit()
    session.mark_saved()
    typer.echo(f"{status}: {path}")


def rename_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    old_path: Annotated[str, typer.Argument(help="Current file path")],
    new_path: Annotated[str, typer.Argument(help="New file path")],
    ):
    """Rename or move a file within a collection, keeping its history."""
    settings = _settings()
    coll, store = _open(settings, collection)
    with Session(_engine(settings)) as db:
        # history collisions are checked before anything moves on disk
        try:
            rename_record(db, coll.name, old_path, new_path)
            store.rename_file(old_path, new_path)
        except (OSError, ValueError) as e:
            db.rollback()
            _fail(f"Cannot rename {old_path}", e)
        db.commit()
    typer.echo(f"renamed: {old_path} -> {new_path}")


def delete_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    path: Annotated[str, typer.Argument(help="File path within the collection")],
    ):
    """Delete a file and its saved history."""
    settings = _settings()
    coll, store = _open(settings, collection)
    try:
        store.delete_file(path)
    except (OSError, ValueError) as e:
        _fail(f"Cannot delete {path}", e)
    with Session(_engine(settings)) as db:
        delete_record(db, coll.name, path)
        db.commit()
    typer.echo(f"deleted: {path}")


def history_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    path: Annotated[str, typer.Argument(help="File path within the collection")],
    diff_from: Annotated[Optional[int], typer.Option("--from", help="Diff from this version number")] = None,
    diff_to: Annotated[Optional[int], typer.Option("--to", help="Diff to this version number")] = None,
    ):
    """List saved versions of a file, or diff two of them."""
    settings = _settings()
    coll, _ = _open(settings, collection)
    with Session(_engine(settings)) as db:
        record = get_by_path(db, coll.name, path)
        if record is None:
            _fail(f"No saved history for {collection}/{path}")
        if (diff_from is None) != (diff_to is None):
            _fail("--from and --to must be given together")
        if diff_from is not None:
            try:
                lines = diff_versions(db, record.id, diff_from, diff_to)
            except ValueError as e:
                _fail(str(e))
            typer.echo("".join(lines), nl=False)
            return
        versions = list_versions(db, record.id)
        draft = " (draft)" if record.is_draft else ""
        typer.echo(f"current{draft}: {record.updated_at:%Y-%m-%d %H:%M:%S} {record.hash[:12]}")
        for v in versions:
            typer.echo(f"  v{v.version_num}: {v.created_at:%Y-%m-%d %H:%M:%S} {v.hash[:12]}")
