"""Decorated OpenAPI document parser.

Decodes one decorated document (operations already enriched with
``x-github`` metadata and ``x-codeSamples``) into Operation models.
"""

import logging

from pydantic import ValidationError

from rest_catalog.exceptions import MalformedOperationError

from .base import HTTP_VERBS, CodeSample, Operation, Param, Preview

logger = logging.getLogger(__name__)


def parse_decorated(doc: dict, version: str) -> list[Operation]:
    """Parse a decorated document into operations, in document order.

    ``doc`` is either a bare ``path -> verb -> operation`` mapping or a full
    OpenAPI document carrying a ``paths`` key.
    """
    paths = doc["paths"] if isinstance(doc.get("paths"), dict) else doc

    operations = []
    seen = set()
    for path, methods in paths.items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            if method.lower() not in HTTP_VERBS:
                continue
            position = f"{version} {method.upper()} {path}"
            if not isinstance(operation, dict):
                raise MalformedOperationError(position, "operation is not a mapping")
            parsed = _parse_operation(path, method, operation, version, position)
            if (parsed.verb, parsed.request_path) in seen:
                raise MalformedOperationError(position, "duplicate operation")
            seen.add((parsed.verb, parsed.request_path))
            operations.append(parsed)

    logger.debug("Decoded %d operations for %s", len(operations), version)
    return operations


def _parse_operation(
    path: str, method: str, operation: dict, version: str, position: str
) -> Operation:
    x_github = operation.get("x-github") or {}
    category = operation.get("category", x_github.get("category"))
    if not category:
        raise MalformedOperationError(position, "missing category")

    try:
        return Operation(
            verb=operation.get("verb", method),
            request_path=operation.get("requestPath", path),
            category=category,
            subcategory=operation.get("subcategory", x_github.get("subcategory")) or "",
            version=version,
            summary=operation.get("summary", ""),
            operation_id=operation.get("operationId", ""),
            parameters=_parse_parameters(operation.get("parameters", [])),
            request_body=_parse_request_body(operation.get("requestBody")),
            content_type=_detect_content_type(operation.get("requestBody")),
            previews=[Preview(**p) for p in x_github.get("previews", [])],
            code_samples=[CodeSample(**s) for s in operation.get("x-codeSamples", [])],
        )
    except (ValidationError, TypeError, KeyError) as exc:
        raise MalformedOperationError(position, str(exc)) from exc


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        schema = p.get("schema", {})
        constraints = {}
        for key in ("minimum", "maximum", "minLength", "maxLength", "pattern", "enum"):
            if key in schema:
                constraints[key] = schema[key]

        result.append(
            Param(
                name=p["name"],
                location=p.get("in", "query"),
                required=p.get("required", False),
                param_type=schema.get("type", "string"),
                description=p.get("description", ""),
                constraints=constraints,
                example=p.get("example", schema.get("example")),
            )
        )
    return result


def _parse_request_body(body: dict | None) -> dict | None:
    if not body:
        return None
    content = body.get("content", {})
    if "application/json" in content:
        return content["application/json"].get("schema")
    # Fallback: first declared media type
    for ct_data in content.values():
        return ct_data.get("schema")
    return None


def _detect_content_type(body: dict | None) -> str:
    if not body:
        return "application/json"
    content = body.get("content", {})
    if not content or "application/json" in content:
        return "application/json"
    return next(iter(content))
