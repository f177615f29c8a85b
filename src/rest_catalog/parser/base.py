"""Data models for decorated OpenAPI operations.

Every schema document is decoded into these models once, at load time.
Downstream code (catalog, index, generators, validators) works with typed
records only and never looks at the raw document again.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

BASELINE_MEDIA_TYPE = "application/vnd.github.v3+json"

HTTP_VERBS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def preview_media_type(name: str) -> str:
    """Custom media type that opts a request into the named preview."""
    return f"application/vnd.github.{name}-preview+json"


def first_typed(schema: dict) -> dict:
    """Pick the first ``oneOf``/``anyOf`` branch that declares a type."""
    for key in ("oneOf", "anyOf"):
        branches = schema.get(key) or []
        if branches and isinstance(branches[0], dict) and branches[0].get("type"):
            return branches[0]
    return schema


class Preview(BaseModel):
    """An opt-in preview; ``required`` previews must be sent in ``Accept``."""

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = False


class CodeSample(BaseModel):
    """One usage example: plain source plus its highlighted HTML."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lang: str
    source: str
    source_html: str = Field(default="", alias="sourceHTML")


class MediaType(BaseModel):
    """Structured media-type declaration derived from required previews."""

    model_config = ConfigDict(frozen=True)

    accept: str
    previews: list[str] = []

    @property
    def is_baseline(self) -> bool:
        return not self.previews


class Param(BaseModel):
    """A single API parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # query / path / header / cookie
    required: bool
    param_type: str  # string / integer / boolean / array / object
    description: str = ""
    constraints: dict = {}  # min, max, pattern, enum, etc.
    example: Any = None  # scalar, list or object, as in the document


class Operation(BaseModel):
    """One documented endpoint at one API version."""

    model_config = ConfigDict(frozen=True)

    verb: str  # GET / POST / PUT / DELETE / PATCH
    request_path: str  # /repos/{owner}/{repo}
    category: str
    subcategory: str = ""
    version: str
    summary: str = ""
    operation_id: str = ""
    parameters: tuple[Param, ...] = ()
    request_body: dict | None = None
    content_type: str = "application/json"
    previews: tuple[Preview, ...] = ()
    code_samples: tuple[CodeSample, ...] = ()

    @field_validator("verb")
    @classmethod
    def _canonical_verb(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("verb must not be empty")
        return value

    @field_validator("request_path")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("request path must not be empty")
        return value

    @property
    def key(self) -> str:
        return f"{self.verb} {self.request_path} ({self.version})"

    @property
    def required_previews(self) -> list[Preview]:
        return [p for p in self.previews if p.required]

    @property
    def media_type(self) -> MediaType:
        """Accept header the operation must be called with.

        The first required preview selects the media type; without required
        previews the baseline versioned media type applies.
        """
        names = [p.name for p in self.required_previews]
        if not names:
            return MediaType(accept=BASELINE_MEDIA_TYPE)
        return MediaType(accept=preview_media_type(names[0]), previews=names)

    @property
    def path_parameters(self) -> list[Param]:
        return [p for p in self.parameters if p.location == "path"]

    @property
    def required_query_parameters(self) -> list[Param]:
        return [p for p in self.parameters if p.location == "query" and p.required]

    @property
    def has_raw_body(self) -> bool:
        """True when the body is sent as-is rather than as a JSON object."""
        if self.request_body is None:
            return False
        schema = first_typed(self.request_body)
        return not self.content_type.endswith("json") or schema.get("type") == "string"

    def body_properties(self) -> dict[str, dict]:
        """Body fields a usage example should pass.

        Required properties when the schema lists any, otherwise the first
        non-deprecated property.
        """
        if self.request_body is None or self.has_raw_body:
            return {}
        schema = first_typed(self.request_body)
        properties = {
            name: first_typed(prop)
            for name, prop in (schema.get("properties") or {}).items()
            if not prop.get("deprecated")
        }
        required = [name for name in schema.get("required", []) if name in properties]
        names = required or list(properties)[:1]
        return {name: properties[name] for name in names}

    def samples_for(self, lang: str) -> list[CodeSample]:
        return [s for s in self.code_samples if s.lang == lang]

    def sample(self, lang: str) -> CodeSample | None:
        samples = self.samples_for(lang)
        return samples[0] if samples else None
