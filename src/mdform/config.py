"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "mdform"
    db_url:           str = "sqlite:///mdform.db"
    repo_dir:         str = Field(default=".",                   description="Root of the content repository checkout")
    collections_file: str = Field(default=".mdform/config.yml",  description="Collection schema file, relative to repo_dir")
    max_versions:     int = Field(default=10, ge=0,              description="Max stored versions per file; 0 disables pruning")
    file_extension:   str = Field(default=".md",                 description="Extension appended to new file names")
    date_default:     str = Field(default="now", pattern="^(now|empty)$", description="Value for date fields with no stored value")
    log_level:        str = Field(default="WARNING",             description="Root logging level")

    @property
    def collections_path(self) -> Path:
        return Path(self.repo_dir) / self.collections_file


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDFORM_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDFORM_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
