"""CLI entry point for rest-catalog."""

import asyncio
import functools
import logging
import sys
from pathlib import Path

import click

from rest_catalog.catalog.builder import build_catalog
from rest_catalog.catalog.consistency import verify_catalog
from rest_catalog.catalog.index import OperationIndex, flatten
from rest_catalog.config import CatalogSettings, load_settings
from rest_catalog.exceptions import EXIT_NOT_FOUND, CatalogError
from rest_catalog.generator.samples import GENERATORS
from rest_catalog.generator.validator import validate_examples
from rest_catalog.parser.base import Operation
from rest_catalog.parser.store import SchemaStore
from rest_catalog.parser.versions import DEFAULT_API_BASE_URL, VersionRegistry, load_registry


def _catalog_errors(func):
    """Turn CatalogError into an error message and its exit code."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CatalogError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.exit_code)

    return wrapper


def _load(settings: CatalogSettings) -> tuple[VersionRegistry, dict, OperationIndex]:
    """Read registry and schemas, build the catalog and its index."""
    registry = load_registry(settings.versions_file)
    store = SchemaStore(settings.schema_dir)
    catalog = asyncio.run(build_catalog(store, registry))
    return registry, catalog, flatten(catalog)


def _lookup(index: OperationIndex, verb: str, path: str, version: str | None) -> Operation:
    if version:
        op = index.find_in_version(version, verb, path)
    else:
        op = index.find(verb, path)
    if op is None:
        where = f" in {version}" if version else ""
        click.echo(f"No operation {verb.upper()} {path}{where}", err=True)
        sys.exit(EXIT_NOT_FOUND)
    return op


@click.group()
@click.option("--schema-dir", type=click.Path(path_type=Path), default=None, help="Directory of decorated schema documents.")
@click.option("--versions-file", type=click.Path(path_type=Path), default=None, help="YAML registry of supported versions.")
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), help="Logging level.")
@click.pass_context
@_catalog_errors
def main(ctx, schema_dir: Path | None, versions_file: Path | None, log_level: str | None):
    """Merge versioned OpenAPI documents and check their code samples."""
    settings = load_settings(schema_dir=schema_dir, versions_file=versions_file, log_level=log_level)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@main.command()
@click.option("--min-versions", type=int, default=None, help="Minimum number of schema versions.")
@click.option("--lang", "languages", multiple=True, help="Required sample language (repeatable).")
@click.pass_obj
@_catalog_errors
def validate(settings: CatalogSettings, min_versions: int | None, languages: tuple[str, ...]):
    """Check catalog structure and every operation's code samples."""
    registry, catalog, index = _load(settings)
    minimum = settings.min_versions if min_versions is None else min_versions
    verify_catalog(catalog, registry, minimum)
    click.echo(f"Catalog: {len(catalog)} versions, {len(index)} operations.")

    violations = validate_examples(index, list(languages) or settings.languages)
    for violation in violations:
        click.echo(f"  {violation}")
    if violations:
        click.echo(f"{len(violations)} violations found.")
        sys.exit(1)
    click.echo("All code samples are valid.")


@main.command()
@click.argument("verb")
@click.argument("path")
@click.option("--version", "version", default=None, help="Only search this schema version.")
@click.pass_obj
@_catalog_errors
def find(settings: CatalogSettings, verb: str, path: str, version: str | None):
    """Show an operation and the code samples it carries."""
    _, _, index = _load(settings)
    op = _lookup(index, verb, path, version)

    click.echo(f"{op.verb} {op.request_path}")
    click.echo(f"  version: {op.version}")
    click.echo(f"  category: {op.category} / {op.subcategory or '-'}")
    if op.previews:
        names = ", ".join(f"{p.name}{' (required)' if p.required else ''}" for p in op.previews)
        click.echo(f"  previews: {names}")
    for sample in op.code_samples:
        click.echo(f"\n[{sample.lang}]\n{sample.source}")


@main.command()
@click.argument("verb")
@click.argument("path")
@click.option("--version", "version", default=None, help="Only search this schema version.")
@click.option("--lang", "languages", multiple=True, help="Language to generate (repeatable).")
@click.pass_obj
@_catalog_errors
def samples(settings: CatalogSettings, verb: str, path: str, version: str | None, languages: tuple[str, ...]):
    """Generate fresh code samples for an operation."""
    registry, _, index = _load(settings)
    op = _lookup(index, verb, path, version)
    info = registry.for_openapi_name(op.version)
    base_url = info.api_base_url if info else DEFAULT_API_BASE_URL

    for lang in languages or settings.languages:
        generator = GENERATORS.get(lang)
        if generator is None:
            raise CatalogError(f"No generator for language '{lang}'")
        click.echo(f"[{lang}]\n{generator.generate(op, base_url).source}\n")


@main.command()
@click.pass_obj
@_catalog_errors
def stats(settings: CatalogSettings):
    """Count operations per version and category."""
    registry, catalog, index = _load(settings)
    for version, categories in catalog.items():
        info = registry.for_openapi_name(version)
        label = info.display_name if info else "unregistered"
        total = sum(len(ops) for subs in categories.values() for ops in subs.values())
        click.echo(f"{version} ({label}): {total} operations")
        for category, subcategories in categories.items():
            count = sum(len(ops) for ops in subcategories.values())
            click.echo(f"  {category}: {count}")
    click.echo(f"Total: {len(index)} operations")
