"""Runtime settings (``REST_CATALOG_*`` environment variables).

CLI options take precedence; they are passed to :func:`load_settings` as
overrides.
"""

from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rest_catalog.exceptions import ConfigError

DEFAULT_SCHEMA_DIR = Path("lib/rest/static/decorated")
DEFAULT_VERSIONS_FILE = Path("lib/rest/versions.yaml")
MIN_SCHEMA_VERSIONS = 6
DEFAULT_LANGUAGES = ["Shell", "JavaScript"]


class CatalogSettings(BaseSettings):
    """Where the catalog inputs live and what the validators require."""

    model_config = SettingsConfigDict(env_prefix="REST_CATALOG_", extra="forbid")

    schema_dir: Path = Field(
        default=DEFAULT_SCHEMA_DIR, description="Directory of decorated schema documents"
    )
    versions_file: Path = Field(
        default=DEFAULT_VERSIONS_FILE, description="YAML registry of supported versions"
    )
    min_versions: int = Field(
        default=MIN_SCHEMA_VERSIONS, ge=0, description="Minimum number of schema versions"
    )
    languages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LANGUAGES),
        description="Languages every operation needs a code sample for",
    )
    log_level: str = Field(default="WARNING", description="Logging level")


def load_settings(**overrides) -> CatalogSettings:
    """Resolve settings from the environment, applying non-None overrides."""
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return CatalogSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
