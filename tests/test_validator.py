import asyncio
import logging
from pathlib import Path

import pytest

from rest_catalog.catalog.builder import build_catalog
from rest_catalog.catalog.index import OperationIndex, flatten
from rest_catalog.generator.validator import (
    CHECK_DUPLICATE_EXAMPLE,
    CHECK_MISSING_EXAMPLE,
    CHECK_PRESENTATION,
    preview_bijection,
    validate_content,
    validate_examples,
    validate_presence,
    validate_presentation,
)
from rest_catalog.parser.base import CodeSample, Operation, Preview
from rest_catalog.parser.store import SchemaStore
from rest_catalog.parser.versions import load_registry

FIXTURES = Path(__file__).parent / "fixtures"
LANGUAGES = ["Shell", "JavaScript"]


@pytest.fixture(scope="module")
def index():
    store = SchemaStore(FIXTURES / "decorated")
    registry = load_registry(FIXTURES / "versions.yaml")
    return flatten(asyncio.run(build_catalog(store, registry)))


def _op(path: str, samples: list[CodeSample], previews: list[Preview] | None = None) -> Operation:
    return Operation(
        verb="GET",
        request_path=path,
        category="misc",
        version="api.github.com",
        previews=previews or [],
        code_samples=samples,
    )


class TestValidateExamples:
    def test_fixture_catalog_is_valid(self, index):
        assert validate_examples(index, LANGUAGES) == []

    def test_collects_every_violation_in_one_pass(self, index):
        bad_shell = CodeSample(lang="Shell", source="curl https://api.github.com/a", sourceHTML="<pre>curl</pre>")
        broken = OperationIndex([
            _op("/a", [bad_shell]),
            _op("/b", []),
            *index,
        ])
        violations = validate_examples(broken, LANGUAGES)
        keys = {(v.operation, v.language, v.check) for v in violations}
        assert ("GET /a", "JavaScript", CHECK_MISSING_EXAMPLE) in keys
        assert ("GET /a", "Shell", "accept-header") in keys
        assert ("GET /a", "Shell", CHECK_PRESENTATION) in keys
        assert ("GET /b", "Shell", CHECK_MISSING_EXAMPLE) in keys
        assert ("GET /b", "JavaScript", CHECK_MISSING_EXAMPLE) in keys
        assert len(violations) == 5

    def test_violation_text_names_operation_language_and_check(self):
        ops = OperationIndex([_op("/b", [])])
        [violation] = validate_examples(ops, ["Shell"])
        assert str(violation) == "GET /b (api.github.com) [Shell] missing-example: no code sample"

    def test_languages_without_generator_only_need_presence(self, index):
        assert validate_content(index, ["Python"]) == []
        assert len(validate_presence(index, ["Python"])) == len(index)

    def test_language_without_generator_is_logged(self, index, caplog):
        caplog.set_level(logging.WARNING)
        validate_content(index, ["Python", "Shell"])
        assert "No generator for Python" in caplog.text
        assert "No generator for Shell" not in caplog.text


class TestValidatePresence:
    def test_duplicate_sample(self):
        sample = CodeSample(lang="Shell", source="curl", sourceHTML="curl")
        ops = OperationIndex([_op("/a", [sample, sample])])
        [violation] = validate_presence(ops, ["Shell"])
        assert violation.check == CHECK_DUPLICATE_EXAMPLE


class TestValidatePresentation:
    def test_markup_is_ignored(self):
        sample = CodeSample(
            lang="JavaScript",
            source="await octokit.request('GET /a')",
            sourceHTML="<pre><code><span class=\"hljs-keyword\">await</span> octokit.request('GET /a')</code></pre>\n",
        )
        assert validate_presentation(OperationIndex([_op("/a", [sample])])) == []

    def test_divergent_text(self):
        sample = CodeSample(lang="Shell", source="curl a", sourceHTML="<pre>curl b</pre>")
        [violation] = validate_presentation(OperationIndex([_op("/a", [sample])]))
        assert violation.check == CHECK_PRESENTATION
        assert violation.language == "Shell"


class TestPreviewBijection:
    @pytest.mark.parametrize("lang", LANGUAGES)
    def test_fixture_counts_match(self, index, lang):
        required, declared = preview_bijection(index, lang)
        assert required == declared == 2

    def test_undeclared_preview_breaks_bijection(self):
        previews = [Preview(name="mercy", required=True)]
        sample = CodeSample(lang="JavaScript", source="await octokit.request('GET /a')")
        ops = OperationIndex([_op("/a", [sample], previews)])
        assert preview_bijection(ops, "JavaScript") == (1, 0)
