import asyncio
import shutil
from pathlib import Path

import pytest

from rest_catalog.catalog.builder import build_catalog
from rest_catalog.catalog.consistency import (
    check_catalog_shape,
    check_schema_documents,
    check_version_count,
    verify_catalog,
)
from rest_catalog.exceptions import (
    InsufficientVersionsError,
    MalformedCatalogError,
    MissingSchemaDocumentError,
)
from rest_catalog.parser.store import SchemaStore
from rest_catalog.parser.versions import VersionRegistry, load_registry

FIXTURES = Path(__file__).parent / "fixtures"

DEPLOYMENT_TARGETS = ["api.github.com", "ghec", "ghae", "ghes-3.0", "ghes-3.1", "ghes-3.2"]


def _store_with(tmp_path: Path, names: list[str]) -> SchemaStore:
    for name in names:
        shutil.copy(FIXTURES / "decorated" / "api.github.com.json", tmp_path / f"{name}.json")
    return SchemaStore(tmp_path)


def _registry_for(names: list[str]) -> VersionRegistry:
    return VersionRegistry.from_mapping({f"key-{n}": {"openApiVersionName": n} for n in names})


class TestCheckSchemaDocuments:
    def test_every_registered_version_has_a_document(self):
        registry = load_registry(FIXTURES / "versions.yaml")
        check_schema_documents(registry, SchemaStore(FIXTURES / "decorated").names())

    def test_document_without_registered_version_is_allowed(self):
        registry = _registry_for(["api.github.com"])
        check_schema_documents(registry, ["api.github.com", "ghes-3.3"])

    def test_reports_every_missing_version(self):
        registry = _registry_for(["api.github.com", "ghae", "ghec"])
        with pytest.raises(MissingSchemaDocumentError) as exc:
            check_schema_documents(registry, ["api.github.com"])
        assert exc.value.versions == ["key-ghae", "key-ghec"]
        assert "key-ghae" in str(exc.value)

    def test_base_name_must_match_exactly(self):
        registry = _registry_for(["ghes-3.2"])
        with pytest.raises(MissingSchemaDocumentError):
            check_schema_documents(registry, ["ghes-3.2.deref"])


class TestCheckVersionCount:
    def test_six_versions_pass(self, tmp_path):
        store = _store_with(tmp_path, DEPLOYMENT_TARGETS)
        catalog = asyncio.run(build_catalog(store, _registry_for(DEPLOYMENT_TARGETS)))
        check_version_count(catalog)

    def test_five_versions_fail(self, tmp_path):
        names = DEPLOYMENT_TARGETS[:5]
        catalog = asyncio.run(build_catalog(_store_with(tmp_path, names), _registry_for(names)))
        with pytest.raises(InsufficientVersionsError) as exc:
            check_version_count(catalog)
        assert (exc.value.found, exc.value.minimum) == (5, 6)

    def test_custom_minimum(self):
        check_version_count({"a": {}, "b": {}}, minimum=2)


class TestCheckCatalogShape:
    @pytest.mark.parametrize("catalog", [None, [], "api.github.com", 6])
    def test_top_level_must_be_mapping(self, catalog):
        with pytest.raises(MalformedCatalogError):
            check_catalog_shape(catalog)

    def test_category_level_must_be_mapping(self):
        with pytest.raises(MalformedCatalogError):
            check_catalog_shape({"v1": []})

    def test_subcategory_level_must_be_mapping(self):
        with pytest.raises(MalformedCatalogError):
            check_catalog_shape({"v1": {"repos": ["x"]}})

    def test_leaves_must_hold_operations(self):
        with pytest.raises(MalformedCatalogError):
            check_catalog_shape({"v1": {"repos": {"repos": [{"verb": "GET"}]}}})

    def test_empty_catalog_is_well_formed(self):
        check_catalog_shape({})


class TestVerifyCatalog:
    def test_staged_version_passes(self, tmp_path):
        store = _store_with(tmp_path, DEPLOYMENT_TARGETS + ["ghes-3.3"])
        registry = _registry_for(DEPLOYMENT_TARGETS)
        catalog = asyncio.run(build_catalog(store, registry))
        verify_catalog(catalog, registry)
        assert "ghes-3.3" in catalog

    def test_fixture_catalog_needs_lower_minimum(self):
        store = SchemaStore(FIXTURES / "decorated")
        registry = load_registry(FIXTURES / "versions.yaml")
        catalog = asyncio.run(build_catalog(store, registry))
        with pytest.raises(InsufficientVersionsError):
            verify_catalog(catalog, registry)
        verify_catalog(catalog, registry, minimum=3)
