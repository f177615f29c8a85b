"""Schema store reader.

Walks a directory of decorated schema documents, one per version. The base
name of each file (``ghes-3.2.json`` -> ``ghes-3.2``) is its version
identifier.
"""

import asyncio
import json
import logging
from pathlib import Path

import yaml

from rest_catalog.exceptions import SchemaDecodeError, SchemaStoreError

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


class SchemaStore:
    """Read-only view over a directory of decorated schema documents."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def discover(self) -> dict[str, Path]:
        """Map each version identifier to its file, sorted by relative path."""
        if not self.root.is_dir():
            raise SchemaStoreError(f"Schema directory not found: {self.root}")

        found: dict[str, Path] = {}
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or path.suffix not in SCHEMA_SUFFIXES:
                continue
            name = path.name[: -len(path.suffix)]
            if name in found:
                raise SchemaStoreError(
                    f"Duplicate schema documents for '{name}': {found[name]} and {path}"
                )
            found[name] = path
        return found

    def names(self) -> list[str]:
        return list(self.discover())

    def load(self, name: str) -> dict:
        """Read and decode the document for one version identifier."""
        files = self.discover()
        if name not in files:
            raise SchemaStoreError(f"No schema document named '{name}' in {self.root}")
        return load_document(files[name])

    async def load_all(self) -> dict[str, dict]:
        """Load every discovered document, keyed by version identifier."""
        files = self.discover()
        documents = await asyncio.gather(
            *(asyncio.to_thread(load_document, path) for path in files.values())
        )
        logger.info("Loaded %d schema documents from %s", len(documents), self.root)
        return dict(zip(files, documents))


def load_document(path: Path) -> dict:
    """Decode a JSON or YAML schema document that must be a mapping."""
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            doc = json.loads(text)
        else:
            doc = yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaDecodeError(f"Cannot decode {path}: {e}") from e

    if not isinstance(doc, dict):
        raise SchemaDecodeError(f"Schema document {path} is not a mapping")
    logger.debug("Read %s", path)
    return doc
