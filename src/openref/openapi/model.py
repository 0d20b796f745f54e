"""In-memory model of an OpenAPI 3 document.

Every place where the OpenAPI specification allows a Reference Object holds a `Ref`.
Resolution fills `Ref.value` in place, nodes are never replaced.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from openref.core import HTTP_METHODS

T = TypeVar("T")

_HANDLES = itertools.count()


class Ref(Generic[T]):
    """A slot holding a reference string, a concrete value, or both once resolved.

    `handle` is unique per instance and identifies the node during resolution.
    Equality is identity, so cyclic graphs can be compared without recursion.
    """

    __slots__ = ("ref", "value", "handle")

    def __init__(self, ref: str = "", value: T | None = None) -> None:
        self.ref = ref
        self.value = value
        self.handle = next(_HANDLES)

    @property
    def is_resolved(self) -> bool:
        return self.value is not None

    def __repr__(self) -> str:
        if self.ref:
            return f"Ref({self.ref!r})"
        return f"Ref(value={type(self.value).__name__})"


@dataclass
class Schema:
    type: str | list[str] | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    nullable: bool = False
    required: list[str] = field(default_factory=list)
    enum: list[Any] | None = None
    items: Ref[Schema] | None = None
    properties: dict[str, Ref[Schema]] = field(default_factory=dict)
    additional_properties: Ref[Schema] | None = None
    # Boolean form of `additionalProperties`
    additional_properties_allowed: bool | None = None
    all_of: list[Ref[Schema]] = field(default_factory=list)
    any_of: list[Ref[Schema]] = field(default_factory=list)
    one_of: list[Ref[Schema]] = field(default_factory=list)
    not_: Ref[Schema] | None = None
    # Keywords without nested schemas (`minimum`, `pattern`, `default`, `x-*`, ...)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class Example:
    summary: str | None = None
    description: str | None = None
    value: Any = None
    external_value: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class Header:
    description: str | None = None
    required: bool = False
    schema: Ref[Schema] | None = None
    examples: dict[str, Ref[Example]] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class Parameter:
    name: str
    # Where the parameter is located: `path`, `query`, `header` or `cookie`
    location: str
    description: str | None = None
    required: bool = False
    schema: Ref[Schema] | None = None
    examples: dict[str, Ref[Example]] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class MediaType:
    schema: Ref[Schema] | None = None
    examples: dict[str, Ref[Example]] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class RequestBody:
    description: str | None = None
    required: bool = False
    content: dict[str, MediaType | None] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class Response:
    description: str | None = None
    headers: dict[str, Ref[Header]] = field(default_factory=dict)
    content: dict[str, MediaType | None] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class SecurityScheme:
    type: str
    description: str | None = None
    name: str | None = None
    location: str | None = None
    scheme: str | None = None
    bearer_format: str | None = None
    flows: dict[str, Any] | None = None
    open_id_connect_url: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class Components:
    """Reusable definitions. A table missing from the source document is `None`."""

    headers: dict[str, Ref[Header]] | None = None
    parameters: dict[str, Ref[Parameter]] | None = None
    request_bodies: dict[str, Ref[RequestBody]] | None = None
    responses: dict[str, Ref[Response]] | None = None
    schemas: dict[str, Ref[Schema]] | None = None
    security_schemes: dict[str, Ref[SecurityScheme]] | None = None
    examples: dict[str, Ref[Example]] | None = None


@dataclass
class Operation:
    operation_id: str | None = None
    summary: str | None = None
    parameters: list[Ref[Parameter]] = field(default_factory=list)
    request_body: Ref[RequestBody] | None = None
    responses: dict[str, Ref[Response]] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class PathItem:
    summary: str | None = None
    description: str | None = None
    parameters: list[Ref[Parameter]] = field(default_factory=list)
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """Operations defined for this path, keyed by upper-cased HTTP method."""
        result = {}
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                result[method.upper()] = operation
        return result


@dataclass
class Document:
    openapi: str | None = None
    info: dict[str, Any] = field(default_factory=dict)
    components: Components = field(default_factory=Components)
    paths: dict[str, PathItem | None] = field(default_factory=dict)
    # URI the document was loaded from. Relative external references are resolved against it
    location: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)
