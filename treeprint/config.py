"""
Engine configuration.

Holds the reserved manifest file names and the hashing chunk size.
Values can be loaded from a YAML file; nothing is read from the environment.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from treeprint.core.hasher import DEFAULT_CHUNK_SIZE
from treeprint.core.manifest.codec import TEMP_SUFFIX
from treeprint.errors import ConfigError

DEFAULT_MANIFEST_FILENAME = ".fingerprints"
DEFAULT_BACKUP_FILENAME = ".fingerprints.bak"


class FingerprintConfig(BaseModel):
    """Settings shared by the reindexer and the verifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manifest_filename: str = Field(
        default=DEFAULT_MANIFEST_FILENAME,
        description="Name of the manifest file inside the fingerprinted directory",
    )
    backup_filename: str = Field(
        default=DEFAULT_BACKUP_FILENAME,
        description="Name the previous manifest is renamed to on rebuild",
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Bytes read per chunk while hashing",
    )

    @field_validator("manifest_filename", "backup_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or value in (".", ".."):
            raise ValueError("must be a non-empty file name")
        if "/" in value or "\\" in value or "\0" in value:
            raise ValueError("must not contain path separators")
        return value

    @model_validator(mode="after")
    def _distinct_names(self) -> FingerprintConfig:
        if self.backup_filename in (self.manifest_filename, self.temp_filename):
            raise ValueError("backup_filename must differ from the manifest and its scratch file")
        return self

    @property
    def temp_filename(self) -> str:
        """Scratch file the manifest is written to before replacing it."""
        return self.manifest_filename + TEMP_SUFFIX

    @property
    def reserved_names(self) -> frozenset[str]:
        """File names never included in a manifest."""
        return frozenset((self.manifest_filename, self.backup_filename, self.temp_filename))


def load_config(path: Path | str) -> FingerprintConfig:
    """
    Load configuration from a YAML file.

    An empty file yields the defaults.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds
            invalid values.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file `{path}`: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in `{path}`: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file `{path}` must contain a mapping")

    try:
        return FingerprintConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in `{path}`: {e}") from e
