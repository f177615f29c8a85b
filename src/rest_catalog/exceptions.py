"""Exception hierarchy for rest-catalog.

Structural problems (unreadable documents, registered versions without a
schema file, malformed operations) abort the build and are raised as
subclasses of :class:`CatalogError`. Content problems in code samples are
never raised; the validators collect them as
:class:`~rest_catalog.generator.validator.Violation` values instead.

Subclass hierarchy::

    CatalogError (exit 1)
    +-- ConfigError                 (exit 2)
    +-- RegistryError               (exit 2)
    +-- SchemaStoreError            (exit 3)
    +-- SchemaDecodeError           (exit 3)
    +-- MissingSchemaDocumentError  (exit 3)
    +-- MalformedOperationError     (exit 5)
    +-- MalformedCatalogError       (exit 5)
    +-- InsufficientVersionsError   (exit 6)
"""

EXIT_GENERIC_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_SCHEMA_ERROR = 3
EXIT_NOT_FOUND = 4
EXIT_MALFORMED = 5
EXIT_TOO_FEW_VERSIONS = 6


class CatalogError(Exception):
    """Base exception for all rest-catalog errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(CatalogError):
    """Raised when settings cannot be resolved from the environment or CLI."""

    exit_code = EXIT_CONFIG_ERROR


class RegistryError(CatalogError):
    """Raised when the versions file is missing or has the wrong shape."""

    exit_code = EXIT_CONFIG_ERROR


class SchemaStoreError(CatalogError):
    """Raised when the schema directory cannot be walked unambiguously."""

    exit_code = EXIT_SCHEMA_ERROR


class SchemaDecodeError(CatalogError):
    """Raised when a schema document is not valid JSON/YAML or not a mapping."""

    exit_code = EXIT_SCHEMA_ERROR


class MissingSchemaDocumentError(CatalogError):
    """Raised when registered versions have no matching schema document."""

    exit_code = EXIT_SCHEMA_ERROR

    def __init__(self, versions: list[str]):
        self.versions = list(versions)
        names = ", ".join(self.versions)
        super().__init__(f"Missing schema file for version(s): {names}")


class MalformedOperationError(CatalogError):
    """Raised when an operation lacks a verb or path, or cannot be decoded.

    ``position`` locates the record, e.g. ``api.github.com GET /repos`` while
    decoding or ``api.github.com/repos/repos#0`` while flattening.
    """

    exit_code = EXIT_MALFORMED

    def __init__(self, position: str, reason: str):
        self.position = position
        self.reason = reason
        super().__init__(f"Malformed operation at {position}: {reason}")


class MalformedCatalogError(CatalogError):
    """Raised when a catalog level is not a mapping (or a leaf is not a list)."""

    exit_code = EXIT_MALFORMED


class InsufficientVersionsError(CatalogError):
    """Raised when fewer schema versions were discovered than required."""

    exit_code = EXIT_TOO_FEW_VERSIONS

    def __init__(self, found: int, minimum: int):
        self.found = found
        self.minimum = minimum
        super().__init__(
            f"Expected at least {minimum} schema versions, found {found}"
        )
