"""File name generation for new collection entries"""

import re
import unicodedata
from datetime import date
from typing import Any, Optional

from mdform.core.models import Collection


MAX_SLUG_LENGTH = 80

_NON_WORD = re.compile(r"[^a-z0-9]+")


def file_slug(value: Any) -> str:
    """Fold value to ASCII and join its words with hyphens: 'Café au lait!' -> 'cafe-au-lait'."""
    text = unicodedata.normalize("NFKD", str(value)).encode("ascii", "ignore").decode("ascii")
    slug = _NON_WORD.sub("-", text.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def ensure_extension(name: str, ext: str = ".md") -> str:
    """Append ext to name unless it already ends with it."""
    name = name.strip()
    return name if name.endswith(ext) else name + ext


def generate_file_name(collection: Collection, values: dict[str, Any], today: Optional[date] = None) -> str:
    """Suggest a file name (without extension) for a new entry.

    date  -> 'YYYY-MM-DD-<slug>'; the slug part is empty until the seed field has a value
    slug  -> '<slug>', or 'untitled'
    Collections without a generator get the bare 'YYYY-MM-DD-' prefix.
    """
    today = today or date.today()
    gen = collection.file_name_generator
    seed = values.get(gen.first) if gen and gen.first else None
    slug = file_slug(seed) if seed else ""

    if gen is None or gen.type == "date":
        return f"{today.isoformat()}-{slug}"
    if gen.type == "slug":
        return slug or "untitled"
    raise ValueError(f"Unknown file name generator type '{gen.type}' for collection '{collection.name}'")
