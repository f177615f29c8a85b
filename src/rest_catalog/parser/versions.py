"""Version registry: supported versions and their schema document names."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rest_catalog.exceptions import RegistryError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"


class VersionInfo(BaseModel):
    """One supported version, e.g. ``enterprise-server@3.2``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    open_api_version_name: str = Field(alias="openApiVersionName")
    version_title: str = Field(default="", alias="versionTitle")
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="apiBaseUrl")

    @property
    def display_name(self) -> str:
        return self.version_title or self.key


class VersionRegistry:
    """Supported versions in declaration order."""

    def __init__(self, versions: list[VersionInfo]):
        self._versions = {v.key: v for v in versions}

    @classmethod
    def from_mapping(cls, data: dict) -> "VersionRegistry":
        if not isinstance(data, dict):
            raise RegistryError("Version registry must be a mapping of key -> version info")
        versions = []
        for key, info in data.items():
            if not isinstance(info, dict):
                raise RegistryError(f"Version '{key}' must be a mapping")
            try:
                versions.append(VersionInfo(key=key, **info))
            except ValidationError as e:
                raise RegistryError(f"Invalid version '{key}': {e}") from e
        return cls(versions)

    def __iter__(self):
        return iter(self._versions.values())

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, key: str) -> bool:
        return key in self._versions

    def get(self, key: str) -> VersionInfo | None:
        return self._versions.get(key)

    def openapi_names(self) -> list[str]:
        return [v.open_api_version_name for v in self._versions.values()]

    def for_openapi_name(self, name: str) -> VersionInfo | None:
        """Registered version whose schema document is ``name``, if any."""
        for version in self._versions.values():
            if version.open_api_version_name == name:
                return version
        return None


def load_registry(file_path: Path) -> VersionRegistry:
    """Load a YAML (or JSON) versions file."""
    file_path = Path(file_path)
    if not file_path.is_file():
        raise RegistryError(f"Versions file not found: {file_path}")
    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RegistryError(f"Cannot decode {file_path}: {e}") from e

    registry = VersionRegistry.from_mapping(data)
    logger.debug("Loaded %d versions from %s", len(registry), file_path)
    return registry
