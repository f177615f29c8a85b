"""Code sample generators.

Each generator produces the usage example for one client integration and
knows how to check an existing example against an operation. The checks
compare against structured data from the Operation (media type, arguments)
rather than re-deriving it from rendered text.
"""

import html
import json
import re
from abc import ABC, abstractmethod

from rest_catalog.parser.base import BASELINE_MEDIA_TYPE, CodeSample, Operation, Param, first_typed
from rest_catalog.parser.versions import DEFAULT_API_BASE_URL

# Realistic values for URLs; everything else uses the parameter name.
EXAMPLE_VALUES = {
    "owner": "octocat",
    "repo": "hello-world",
    "username": "octocat",
    "email": "octocat@github.com",
    "org": "octo-org",
    "team_slug": "justice-league",
}

ACCEPT_HEADER = re.compile(r'-H "Accept: ([^"]+)"')
REQUEST_URL = re.compile(r"https?://\S+")
PREVIEW_DECLARATION = re.compile(r"mediaType: \{\s+previews: ")
JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
MARKUP_TAG = re.compile(r"<[^>]+>")

CHECK_ACCEPT_HEADER = "accept-header"
CHECK_REQUEST_METHOD = "request-method"
CHECK_REQUEST_URL = "request-url"
CHECK_PREVIEW_DECLARATION = "preview-declaration"
CHECK_SDK_ARGUMENTS = "sdk-arguments"


def placeholder_value(name: str, schema: dict | None):
    """Self-describing example value: a field named ``sha`` gets ``'sha'``.

    Objects expand each property; arrays hold one representative item.
    """
    schema = first_typed(schema or {})
    kind = schema.get("type")
    if kind == "object" and schema.get("properties"):
        return {
            prop: placeholder_value(prop, prop_schema)
            for prop, prop_schema in schema["properties"].items()
            if not prop_schema.get("deprecated")
        }
    if kind == "array":
        return [placeholder_value(name, schema.get("items"))]
    return name


def url_value(param: Param) -> str:
    """Realistic URL text for a parameter; arrays join as comma lists."""
    example = param.example
    if isinstance(example, list):
        return ",".join(str(item) for item in example)
    if example is None or isinstance(example, dict):
        return EXAMPLE_VALUES.get(param.name, param.name)
    return str(example)


def to_js_literal(value, level: int = 0) -> str:
    """Render a value the way ``javascript-stringify`` does with indent 2."""
    pad = "  " * level
    if isinstance(value, dict):
        if not value:
            return "{}"
        entries = [f"{pad}  {_js_key(k)}: {to_js_literal(v, level + 1)}" for k, v in value.items()]
        return "{\n" + ",\n".join(entries) + f"\n{pad}}}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [f"{pad}  {to_js_literal(v, level + 1)}" for v in value]
        return "[\n" + ",\n".join(items) + f"\n{pad}]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def _js_key(key: str) -> str:
    return key if JS_IDENTIFIER.match(key) else to_js_literal(key)


def render_html(generator: "CodeSampleGenerator", source: str) -> str:
    escaped = html.escape(source, quote=False)
    return f'<pre><code class="hljs language-{generator.highlight_class}">{escaped}</code></pre>'


def strip_markup(source_html: str) -> str:
    """Plain text of a presentation-form sample."""
    return html.unescape(MARKUP_TAG.sub("", source_html)).strip()


class CodeSampleGenerator(ABC):
    """Contract for one client integration's usage examples."""

    lang: str
    highlight_class: str

    @abstractmethod
    def render(self, operation: Operation, base_url: str) -> str:
        """Plain source of the example."""

    @abstractmethod
    def check(self, operation: Operation, sample: CodeSample) -> list[tuple[str, str]]:
        """Return ``(check, message)`` pairs for every problem in ``sample``."""

    def generate(self, operation: Operation, base_url: str = DEFAULT_API_BASE_URL) -> CodeSample:
        source = self.render(operation, base_url)
        return CodeSample(lang=self.lang, source=source, source_html=render_html(self, source))


class CurlSampleGenerator(CodeSampleGenerator):
    """Raw HTTP example as a curl command."""

    lang = "Shell"
    highlight_class = "shell"

    def render(self, operation: Operation, base_url: str) -> str:
        path = operation.request_path
        for param in operation.path_parameters:
            path = path.replace(f"{{{param.name}}}", url_value(param))
        query = "&".join(f"{p.name}={url_value(p)}" for p in operation.required_query_parameters)
        url = f"{base_url.rstrip('/')}{path}" + (f"?{query}" if query else "")

        args = ["curl"]
        if operation.verb != "GET":
            args.append(f"-X {operation.verb}")
        args.append(f'-H "Accept: {operation.media_type.accept}"')
        args.append(url)
        if operation.has_raw_body:
            args.append("-d 'data'")
        else:
            body = {name: placeholder_value(name, schema) for name, schema in operation.body_properties().items()}
            if body:
                args.append(f"-d '{json.dumps(body, separators=(',', ':'))}'")
        return " \\\n  ".join(args)

    def check(self, operation: Operation, sample: CodeSample) -> list[tuple[str, str]]:
        problems = []
        source = sample.source
        expected = operation.media_type

        headers = ACCEPT_HEADER.findall(source)
        if len(headers) != 1:
            problems.append((CHECK_ACCEPT_HEADER, f"expected one Accept header, found {len(headers)}"))
        elif headers[0] != expected.accept:
            problems.append((CHECK_ACCEPT_HEADER, f"Accept is '{headers[0]}', expected '{expected.accept}'"))
        if not expected.is_baseline and BASELINE_MEDIA_TYPE in source:
            problems.append(
                (CHECK_ACCEPT_HEADER, f"falls back to {BASELINE_MEDIA_TYPE} despite required previews")
            )

        if operation.verb != "GET" and f"-X {operation.verb}" not in source:
            problems.append((CHECK_REQUEST_METHOD, f"missing '-X {operation.verb}'"))

        urls = REQUEST_URL.findall(source)
        if not urls:
            problems.append((CHECK_REQUEST_URL, "no request URL"))
        elif "{" in urls[0] or "}" in urls[0]:
            problems.append((CHECK_REQUEST_URL, f"unresolved path parameter in {urls[0]}"))
        return problems


class OctokitSampleGenerator(CodeSampleGenerator):
    """Typed SDK example as an ``octokit.request`` call."""

    lang = "JavaScript"
    highlight_class = "javascript"

    def arguments(self, operation: Operation) -> dict:
        """Named arguments of the call, in path, query, body, preview order."""
        args: dict = {}
        for param in operation.path_parameters + operation.required_query_parameters:
            args[param.name] = param.name
        if operation.has_raw_body:
            args["data"] = "data"
            args["headers"] = {"content-type": operation.content_type}
        else:
            for name, schema in operation.body_properties().items():
                args[name] = placeholder_value(name, schema)
        if operation.media_type.previews:
            args["mediaType"] = {"previews": list(operation.media_type.previews)}
        return args

    def render(self, operation: Operation, base_url: str) -> str:
        route = to_js_literal(f"{operation.verb} {operation.request_path}")
        args = self.arguments(operation)
        if not args:
            return f"await octokit.request({route})"
        return f"await octokit.request({route}, {to_js_literal(args)})"

    def check(self, operation: Operation, sample: CodeSample) -> list[tuple[str, str]]:
        problems = []
        source = sample.source
        previews = operation.media_type.previews

        declared = PREVIEW_DECLARATION.search(source) is not None
        if previews and not declared:
            problems.append((CHECK_PREVIEW_DECLARATION, "missing mediaType previews declaration"))
        elif declared and not previews:
            problems.append((CHECK_PREVIEW_DECLARATION, "declares previews but none are required"))
        for name in previews:
            if to_js_literal(name) not in source:
                problems.append((CHECK_PREVIEW_DECLARATION, f"preview '{name}' not declared"))

        route = to_js_literal(f"{operation.verb} {operation.request_path}")
        if f"octokit.request({route}" not in source:
            problems.append((CHECK_SDK_ARGUMENTS, f"request route is not {route}"))
        for name, value in self.arguments(operation).items():
            if name == "mediaType":
                continue
            entry = f"  {_js_key(name)}: {to_js_literal(value, 1)}"
            if entry not in source:
                problems.append((CHECK_SDK_ARGUMENTS, f"argument '{name}' missing or not {to_js_literal(value)}"))
        return problems


GENERATORS: dict[str, CodeSampleGenerator] = {
    g.lang: g for g in (CurlSampleGenerator(), OctokitSampleGenerator())
}
