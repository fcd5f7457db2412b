"""Configuration management for Press Import using Pydantic.

This module provides type-safe configuration models for the content store,
source directories, importer defaults, SEO metadata mapping and logging.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreConfig(BaseModel):
    """Configuration for the content store the rows are reconciled against."""

    backend: str = Field(default="wordpress", description="Store backend (wordpress or memory)")
    url: str | None = Field(default=None, description="Site URL, e.g. https://example.com")
    username: str | None = Field(default=None, description="API user name")
    application_password: str | None = Field(
        default=None, description="Application password for the API user"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: int = Field(default=30, ge=1, le=600, description="API request timeout in seconds")
    rate_limit: int = Field(default=10, ge=1, le=50, description="Requests per second limit")
    retry_attempts: int = Field(default=3, ge=1, le=10, description="Attempts per API request")
    retry_backoff_min: float = Field(default=1, ge=0, description="Minimum retry wait in seconds")
    retry_backoff_max: float = Field(default=30, ge=0, description="Maximum retry wait in seconds")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate store backend."""
        v = v.lower()
        if v not in ("wordpress", "memory"):
            raise ValueError("Store backend must be 'wordpress' or 'memory'")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate and normalize URL."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_wordpress_settings(self) -> "StoreConfig":
        """The REST backend needs a URL and credentials."""
        if self.backend == "wordpress":
            missing = [
                name
                for name in ("url", "username", "application_password")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(f"WordPress store requires: {', '.join(missing)}")
        return self


class SourcePathsConfig(BaseModel):
    """Default input directory per source adapter."""

    excel: str = Field(default="imports/excel", description="Directory for spreadsheet files")
    content: str = Field(default="imports/content", description="Directory for text content files")

    def for_source(self, source: str) -> str | None:
        return getattr(self, source, None)


class ImporterConfig(BaseModel):
    """Row preprocessing defaults."""

    default_post_type: str = Field(default="post", description="Post type when a row has none")
    default_taxonomy: str | None = Field(
        default=None, description="Taxonomy when a term row has none"
    )
    category_taxonomy: str = Field(default="category", description="Taxonomy of 'categories'")
    tag_taxonomy: str = Field(default="post_tag", description="Taxonomy of 'tags'")
    list_delimiter: str = Field(default=",", description="Delimiter of list columns")
    meta_prefix: str = Field(default="m:", description="Column prefix routed into metadata")

    @field_validator("list_delimiter", "meta_prefix")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Delimiters and prefixes cannot be empty."""
        if not v:
            raise ValueError("Value cannot be empty")
        return v


class SeoConfig(BaseModel):
    """SEO metadata mapping."""

    plugin: str | None = Field(
        default=None, description="SEO plugin whose metadata keys are written (rank_math, yoast)"
    )

    @field_validator("plugin")
    @classmethod
    def validate_plugin(cls, v: str | None) -> str | None:
        """Validate SEO plugin name."""
        if v is None or v == "":
            return None
        v = v.lower()
        if v not in ("rank_math", "yoast"):
            raise ValueError("SEO plugin must be 'rank_math' or 'yoast'")
        return v


class PrefixConfig(BaseModel):
    """Rewrite prefixes of post types and taxonomies, keyed by name.

    The REST API does not expose rewrite slugs, so they are declared here.
    """

    post_types: dict[str, str] = Field(default_factory=dict)
    taxonomies: dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Console log level")
    file_level: str = Field(default="DEBUG", description="File log level")
    format: str = Field(default="json", description="Log file format (json or console)")
    file: str | None = Field(default="logs/import.log", description="Log file path")
    log_payloads: bool = Field(
        default=False, description="Log API request/response payloads at DEBUG level"
    )
    max_payload_size: int = Field(
        default=10000, ge=100, le=1000000, description="Maximum payload characters to log"
    )

    @field_validator("level", "file_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v


class ImportConfig(BaseSettings):
    """Main import configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PRESS_IMPORT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    store: StoreConfig = Field(
        default_factory=lambda: StoreConfig(backend="memory"),
        description="Content store configuration",
    )
    sources: SourcePathsConfig = Field(
        default_factory=SourcePathsConfig, description="Input directories per source"
    )
    importers: ImporterConfig = Field(
        default_factory=ImporterConfig, description="Importer configuration"
    )
    seo: SeoConfig = Field(default_factory=SeoConfig, description="SEO configuration")
    prefixes: PrefixConfig = Field(default_factory=PrefixConfig, description="Rewrite prefixes")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )


def load_config_from_yaml(config_path: str | Path) -> ImportConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        ImportConfig: Loaded configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        raise ValueError(f"Empty configuration file: {config_path}")

    config_data = _expand_env_vars(config_data)

    return ImportConfig(**config_data)


def _expand_env_vars(data: dict) -> dict:
    """Recursively expand environment variables in config dict.

    Supports ${VAR_NAME} syntax for environment variable substitution.

    Args:
        data: Configuration dictionary

    Returns:
        dict: Dictionary with expanded environment variables
    """
    if isinstance(data, dict):
        return {k: _expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        if data.startswith("${") and data.endswith("}"):
            var_name = data[2:-1]
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(
                    f"Environment variable '{var_name}' not found. "
                    f"Please set it in your environment or .env file."
                )
            return env_value
        return data
    else:
        return data
