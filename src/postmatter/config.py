"""Application configuration: settings schema and postmatter.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "postmatter.yaml"


class Settings(BaseModel):
    app_name:      str = "postmatter"
    db_url:        str = "sqlite:///postmatter.db"
    output_dir:    str = Field(default="dist", description="Directory for exported HTML + JSON files")
    media_dir:     str | None = Field(default=None, description="Directory image references resolve against")
    parser_preset: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    slug_fallback: bool = Field(default=False, description="Derive a missing slug from the file path")
    collections:   dict[str, str] = Field(
        default_factory=lambda: {"posts": "post", "pages": "page"},
        description="Top-level directory -> expected template",
    )
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("parser_preset")
    @classmethod
    def _known_preset(cls, v: str) -> str:
        try:
            MarkdownIt(v)
        except KeyError:
            raise ValueError(f"unknown markdown-it preset '{v}'") from None
        return v


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from postmatter.yaml, then POSTMATTER_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"POSTMATTER_{name.upper()}"):
            # Mapping-valued settings come in as inline YAML, e.g. "{posts: post}"
            data[name] = yaml.safe_load(val) if name == "collections" else val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
