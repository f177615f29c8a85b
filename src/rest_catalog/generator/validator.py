"""Validates the code samples carried by every operation.

Violations are collected across the whole index and returned together;
no check stops at the first problem.
"""

import logging

from pydantic import BaseModel

from rest_catalog.catalog.index import OperationIndex
from rest_catalog.generator.samples import (
    CHECK_ACCEPT_HEADER,
    CHECK_PREVIEW_DECLARATION,
    GENERATORS,
    CodeSampleGenerator,
    strip_markup,
)
from rest_catalog.parser.base import Operation

logger = logging.getLogger(__name__)

CHECK_MISSING_EXAMPLE = "missing-example"
CHECK_DUPLICATE_EXAMPLE = "duplicate-example"
CHECK_PRESENTATION = "presentation"

PREVIEW_CHECKS = {CHECK_ACCEPT_HEADER, CHECK_PREVIEW_DECLARATION}


class Violation(BaseModel):
    """One failed check for one operation and language."""

    operation: str  # VERB path
    version: str
    language: str
    check: str
    message: str

    def __str__(self) -> str:
        return f"{self.operation} ({self.version}) [{self.language}] {self.check}: {self.message}"


def _violation(op: Operation, language: str, check: str, message: str) -> Violation:
    return Violation(
        operation=f"{op.verb} {op.request_path}",
        version=op.version,
        language=language,
        check=check,
        message=message,
    )


def validate_presence(index: OperationIndex, languages: list[str]) -> list[Violation]:
    """Every operation needs exactly one sample per language."""
    violations = []
    for op in index:
        for lang in languages:
            count = len(op.samples_for(lang))
            if count == 0:
                violations.append(_violation(op, lang, CHECK_MISSING_EXAMPLE, "no code sample"))
            elif count > 1:
                violations.append(
                    _violation(op, lang, CHECK_DUPLICATE_EXAMPLE, f"{count} code samples, expected 1")
                )
    return violations


def validate_content(
    index: OperationIndex,
    languages: list[str],
    generators: dict[str, CodeSampleGenerator] | None = None,
) -> list[Violation]:
    """Run each language's generator checks against the first sample."""
    generators = GENERATORS if generators is None else generators
    for lang in languages:
        if lang not in generators:
            logger.warning("No generator for %s; its samples get no content checks", lang)
    violations = []
    for op in index:
        for lang in languages:
            generator = generators.get(lang)
            sample = op.sample(lang)
            if generator is None or sample is None:
                continue
            for check, message in generator.check(op, sample):
                violations.append(_violation(op, lang, check, message))
    return violations


def validate_presentation(index: OperationIndex) -> list[Violation]:
    """HTML form minus markup must equal the plain source."""
    violations = []
    for op in index:
        for sample in op.code_samples:
            plain = strip_markup(sample.source_html)
            if plain != sample.source.strip():
                violations.append(
                    _violation(op, sample.lang, CHECK_PRESENTATION, "sourceHTML text differs from source")
                )
    return violations


def validate_examples(
    index: OperationIndex,
    languages: list[str],
    generators: dict[str, CodeSampleGenerator] | None = None,
) -> list[Violation]:
    """Run all sample validations.

    Returns the collected violations, empty when every sample is correct.
    """
    violations = []
    violations.extend(validate_presence(index, languages))
    violations.extend(validate_content(index, languages, generators))
    violations.extend(validate_presentation(index))
    return violations


def preview_bijection(
    index: OperationIndex, lang: str, generator: CodeSampleGenerator | None = None
) -> tuple[int, int]:
    """Count operations with required previews vs. those whose sample declares them.

    The two numbers are equal for a healthy catalog.
    """
    generator = generator or GENERATORS[lang]
    with_previews = [op for op in index if op.required_previews]
    declared = 0
    for op in with_previews:
        sample = op.sample(lang)
        if sample is None:
            continue
        checks = {check for check, _ in generator.check(op, sample)}
        if not checks & PREVIEW_CHECKS:
            declared += 1
    return len(with_previews), declared
