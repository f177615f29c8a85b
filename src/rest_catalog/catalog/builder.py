"""Operation catalog builder.

Merges the per-version schema documents into one catalog::

    {version: {category: {subcategory: [Operation, ...]}}}

Versions follow schema discovery order; categories and subcategories follow
first appearance in each document and operations keep document order.
Operations are never merged across versions.
"""

import logging

from rest_catalog.catalog.consistency import check_catalog_shape, check_schema_documents
from rest_catalog.config import CatalogSettings, load_settings
from rest_catalog.parser.base import Operation
from rest_catalog.parser.decorated import parse_decorated
from rest_catalog.parser.store import SchemaStore
from rest_catalog.parser.versions import VersionRegistry, load_registry

logger = logging.getLogger(__name__)

Catalog = dict[str, dict[str, dict[str, list[Operation]]]]


async def build_catalog(
    store: SchemaStore | None = None,
    registry: VersionRegistry | None = None,
    settings: CatalogSettings | None = None,
) -> Catalog:
    """Load every schema document and group its operations.

    Raises MissingSchemaDocumentError before loading anything when a
    registered version has no document.
    """
    if store is None or registry is None:
        settings = settings or load_settings()
        store = store or SchemaStore(settings.schema_dir)
        registry = registry or load_registry(settings.versions_file)

    check_schema_documents(registry, store.names())
    documents = await store.load_all()

    catalog: Catalog = {}
    for version, document in documents.items():
        catalog[version] = group_operations(parse_decorated(document, version))

    check_catalog_shape(catalog)
    logger.info(
        "Built catalog with %d versions and %d operations",
        len(catalog),
        sum(len(ops) for cats in catalog.values() for subs in cats.values() for ops in subs.values()),
    )
    return catalog


def group_operations(operations: list[Operation]) -> dict[str, dict[str, list[Operation]]]:
    groups: dict[str, dict[str, list[Operation]]] = {}
    for op in operations:
        groups.setdefault(op.category, {}).setdefault(op.subcategory, []).append(op)
    return groups
