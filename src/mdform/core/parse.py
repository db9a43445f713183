"""Front matter splitting and YAML decoding into a Document"""

import logging
import re
from typing import Any, Optional

import yaml

from mdform.core.models import BODY_FIELD, Document


logger = logging.getLogger(__name__)

DELIMITER = "---"

_BOOL_TAG = "tag:yaml.org,2002:bool"


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader resolving only true/false (YAML 1.2 spellings) as booleans; yes/no/on/off stay strings."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FrontMatterLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF"))


def load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=FrontMatterLoader)


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def _split_frontmatter(text: str) -> Optional[tuple[str, str]]:
    """Return (block_text, body) if text opens with a closed --- block, else None.

    The single blank line written after the closing delimiter is consumed so
    that emitted documents parse back to the same body.
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _is_delimiter(lines[0]):
        return None

    for i in range(1, len(lines)):
        if _is_delimiter(lines[i]):
            block = "".join(lines[1:i])
            rest = lines[i + 1:]
            if rest and rest[0].strip() == "":
                rest = rest[1:]
            return block, "".join(rest)
    return None


def _decode(block: str) -> dict[str, Any]:
    """Decode a YAML block into a mapping. Raises ValueError if it is not one."""
    try:
        data = load_yaml(block) if block.strip() else None
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    if BODY_FIELD in data:
        raise ValueError(f"Invalid YAML frontmatter: '{BODY_FIELD}' is a reserved key")
    return {str(k): v for k, v in data.items()}


def parse(raw_text: str) -> Document:
    """Parse raw file content into a Document.

    Text without a closed front matter block is all body. A block that fails
    to decode leaves metadata empty and keeps the entire input as body, so a
    broken file stays viewable and nothing the user wrote is dropped.
    """
    raw_text = raw_text or ""
    split = _split_frontmatter(raw_text)
    if split is None:
        return Document(metadata={}, body=raw_text, raw_text=raw_text)

    block, body = split
    try:
        metadata = _decode(block)
    except ValueError as e:
        logger.warning("Front matter not decoded, treating file as body: %s", e)
        return Document(metadata={}, body=raw_text, raw_text=raw_text)
    return Document(metadata=metadata, body=body, raw_text=raw_text)
