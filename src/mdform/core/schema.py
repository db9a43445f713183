"""Collection schema loading from the repository's YAML config file"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from mdform.core.models import CollectionConfig


logger = logging.getLogger(__name__)


def parse_collections(text: str, source: str = "<string>") -> CollectionConfig:
    """Validate YAML text as a CollectionConfig. Raises ValueError on bad YAML or schema."""
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {source}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {source}: expected a mapping, got {type(data).__name__}")
    try:
        return CollectionConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid collection schema in {source}: {e}") from e


def load_collections(path: Path) -> CollectionConfig:
    """Read and validate the collection schema file at path."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Collection config not found: {path}")
    config = parse_collections(path.read_text(encoding="utf-8"), source=str(path))
    logger.info("Loaded %d collection(s) from %s", len(config.collections), path)
    return config
