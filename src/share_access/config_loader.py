"""share-access configuration loader with Pydantic v2 validation.

Loads and validates a ``share-access.yaml`` file into a typed
:class:`ShareAccessConfig` object.  Unknown keys are allowed to support
future schema additions without breakage.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("default_identity: '2025 Students'")
>>> config.default_identity
'2025 Students'
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from share_access.errors import ConfigError
from share_access.identities import DEFAULT_GROUPS, DEFAULT_YEARS_BACK


class StoreConfig(BaseModel):
    """Where descriptors are persisted."""

    model_config = {"extra": "allow"}

    path: Path = Field(default=Path("./share_acl.yaml"))


class AuditConfig(BaseModel):
    """Configuration for the audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=True)
    log_path: Path = Field(default=Path("./share_access_audit.jsonl"))


class SuggestionConfig(BaseModel):
    """Identity suggestions offered by the ``suggest`` command."""

    model_config = {"extra": "allow"}

    groups: list[str] = Field(default_factory=lambda: list(DEFAULT_GROUPS))
    years_back: int = Field(default=DEFAULT_YEARS_BACK, ge=0, le=50)


class ShareAccessConfig(BaseModel):
    """Top-level configuration schema.

    All sections are optional and fall back to defaults.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    default_identity: str = Field(default="AllStudents")
    store: StoreConfig = Field(default_factory=StoreConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)

    @field_validator("default_identity")
    @classmethod
    def validate_identity(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("default_identity must not be blank")
        return value


class ConfigLoader:
    """Loads and validates share-access YAML configuration."""

    def load(self, config_path: Path) -> ShareAccessConfig:
        """Load and validate a configuration file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ConfigError:
            When the YAML cannot be parsed or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"share-access config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            return self._build(fh.read(), str(config_path))

    def load_string(self, yaml_content: str) -> ShareAccessConfig:
        """Load and validate a YAML string directly."""
        return self._build(yaml_content, None)

    def defaults(self) -> ShareAccessConfig:
        """Return a configuration with all defaults applied."""
        return ShareAccessConfig()

    def _build(self, yaml_content: str, config_path: str | None) -> ShareAccessConfig:
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML: {exc}", config_path) from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration must be a YAML mapping.", config_path)
        try:
            return ShareAccessConfig.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(str(exc), config_path) from exc
