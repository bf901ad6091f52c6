"""Configuration model for mediashelf."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "MEDIASHELF_CONFIG"
DEFAULT_CONFIG_FILE = "mediashelf.yaml"


class OverwritePolicy(str, Enum):
    """What to do when an export target already exists."""

    FAIL = "fail"  # Raise DestinationExists
    OVERWRITE = "overwrite"  # Replace the existing file
    RENAME = "rename"  # Write to the first free <stem>-N<suffix>


class ShelfConfig(BaseModel):
    """Settings shared by the library session and the CLI."""

    overwrite: OverwritePolicy = Field(
        default=OverwritePolicy.FAIL, description="Policy for existing export targets"
    )
    json_indent: int | None = Field(default=2, description="Indent for exported JSON")
    log_level: str = Field(default="WARNING")
    autoload: list[str] = Field(
        default_factory=list, description="Files loaded when the shell starts"
    )
    prompt: str = Field(default="> ")

    model_config = {"extra": "ignore"}

    @classmethod
    def from_yaml(cls, path: Path) -> "ShelfConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})

    @classmethod
    def load(cls, path: str | Path | None = None) -> "ShelfConfig":
        """Load from an explicit path, $MEDIASHELF_CONFIG, ./mediashelf.yaml, or defaults."""
        if path is not None:
            return cls.from_yaml(Path(path))

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return cls.from_yaml(Path(env_path))

        local = Path(DEFAULT_CONFIG_FILE)
        if local.exists():
            return cls.from_yaml(local)
        return cls()
