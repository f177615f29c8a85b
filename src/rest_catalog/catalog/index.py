"""Flat, ordered view over the catalog.

The index holds references to the catalog's Operation records in
version -> category -> subcategory -> operation order. It is rebuilt from
the catalog, never edited.
"""

from collections.abc import Iterator

from rest_catalog.exceptions import MalformedOperationError
from rest_catalog.parser.base import Operation


class OperationIndex:
    """Ordered sequence of operations with linear-scan lookups."""

    def __init__(self, operations):
        self._operations = tuple(operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations)

    def __getitem__(self, position: int) -> Operation:
        return self._operations[position]

    def versions(self) -> list[str]:
        return list(dict.fromkeys(op.version for op in self._operations))

    def filter(self, version: str | None = None, category: str | None = None) -> "OperationIndex":
        return OperationIndex(
            op
            for op in self._operations
            if (version is None or op.version == version)
            and (category is None or op.category == category)
        )

    def find(self, verb: str, request_path: str) -> Operation | None:
        """First operation matching verb and path, in traversal order.

        The version of the result is unspecified when several versions
        define the same endpoint; it is whichever version was discovered
        first. Use :meth:`find_in_version` for a specific version.
        """
        verb = verb.lower()
        for op in self._operations:
            if op.request_path == request_path and op.verb.lower() == verb:
                return op
        return None

    def find_in_version(self, version: str, verb: str, request_path: str) -> Operation | None:
        return self.filter(version=version).find(verb, request_path)


def flatten(catalog: dict) -> OperationIndex:
    """Build the index; records without verb or path abort the build."""
    operations = []
    for version, categories in catalog.items():
        for category, subcategories in categories.items():
            for subcategory, ops in subcategories.items():
                for position, op in enumerate(ops):
                    where = f"{version}/{category}/{subcategory}#{position}"
                    if not op.verb:
                        raise MalformedOperationError(where, "missing verb")
                    if not op.request_path:
                        raise MalformedOperationError(where, "missing request path")
                    if (op.version, op.category, op.subcategory) != (version, category, subcategory):
                        raise MalformedOperationError(where, f"record belongs to {op.key}")
                    operations.append(op)
    return OperationIndex(operations)


def find_operation(index: OperationIndex, verb: str, request_path: str) -> Operation | None:
    return index.find(verb, request_path)
