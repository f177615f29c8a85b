"""Structural checks between the version registry, schema store and catalog."""

import logging
from collections.abc import Iterable

from rest_catalog.config import MIN_SCHEMA_VERSIONS
from rest_catalog.exceptions import (
    InsufficientVersionsError,
    MalformedCatalogError,
    MissingSchemaDocumentError,
)
from rest_catalog.parser.base import Operation
from rest_catalog.parser.versions import VersionRegistry

logger = logging.getLogger(__name__)


def check_schema_documents(registry: VersionRegistry, names: Iterable[str]) -> None:
    """Every registered version needs a schema document with its exact base name.

    Documents without a registered version (staged releases) are allowed.
    """
    names = set(names)
    missing = [v.key for v in registry if v.open_api_version_name not in names]
    if missing:
        raise MissingSchemaDocumentError(missing)

    registered = set(registry.openapi_names())
    for name in sorted(names - registered):
        logger.warning("Schema document '%s' has no registered version", name)


def check_version_count(catalog: dict, minimum: int = MIN_SCHEMA_VERSIONS) -> None:
    if len(catalog) < minimum:
        raise InsufficientVersionsError(len(catalog), minimum)


def check_catalog_shape(catalog) -> None:
    """Version, category and subcategory levels must be dicts; leaves lists of operations."""
    if not isinstance(catalog, dict):
        raise MalformedCatalogError(f"Catalog must be a mapping, got {type(catalog).__name__}")
    for version, categories in catalog.items():
        if not isinstance(categories, dict):
            raise MalformedCatalogError(f"Catalog[{version!r}] is not a mapping")
        for category, subcategories in categories.items():
            if not isinstance(subcategories, dict):
                raise MalformedCatalogError(f"Catalog[{version!r}][{category!r}] is not a mapping")
            for subcategory, operations in subcategories.items():
                where = f"Catalog[{version!r}][{category!r}][{subcategory!r}]"
                if not isinstance(operations, list):
                    raise MalformedCatalogError(f"{where} is not a list")
                if not all(isinstance(op, Operation) for op in operations):
                    raise MalformedCatalogError(f"{where} holds non-operation entries")


def verify_catalog(
    catalog: dict,
    registry: VersionRegistry,
    minimum: int = MIN_SCHEMA_VERSIONS,
) -> None:
    """Run every structural check; the first failure is raised."""
    check_catalog_shape(catalog)
    check_schema_documents(registry, catalog.keys())
    check_version_count(catalog, minimum)
