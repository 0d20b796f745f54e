"""Component kinds that can be referenced via `#/components/<table>/<name>`."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from operator import attrgetter
from typing import Any

from openref.openapi.model import (
    Components,
    Header,
    MediaType,
    Parameter,
    Ref,
    RequestBody,
    Response,
    Schema,
)

NestedReferences = Iterator[tuple["ComponentKind", Ref]]


@dataclass
class ComponentKind:
    """How references of one kind are looked up and which references their values contain."""

    # Table name as it appears in reference strings
    name: str
    # Human-readable name for error messages
    label: str
    table: Callable[[Components], Mapping[str, Ref] | None]
    children: Callable[[Any], NestedReferences]

    __slots__ = ("name", "label", "table", "children")

    @property
    def prefix(self) -> str:
        return f"#/components/{self.name}/"

    def __repr__(self) -> str:
        return f"ComponentKind({self.name!r})"


def _no_children(value: Any) -> NestedReferences:
    return iter(())


def _iter_examples(examples: Mapping[str, Ref]) -> NestedReferences:
    for example in examples.values():
        yield EXAMPLE, example


def _iter_content(content: Mapping[str, MediaType | None]) -> NestedReferences:
    for media_type in content.values():
        if media_type is None:
            continue
        if media_type.schema is not None:
            yield SCHEMA, media_type.schema
        yield from _iter_examples(media_type.examples)


def _header_children(header: Header) -> NestedReferences:
    if header.schema is not None:
        yield SCHEMA, header.schema
    yield from _iter_examples(header.examples)


def _parameter_children(parameter: Parameter) -> NestedReferences:
    if parameter.schema is not None:
        yield SCHEMA, parameter.schema
    yield from _iter_examples(parameter.examples)


def _request_body_children(request_body: RequestBody) -> NestedReferences:
    yield from _iter_content(request_body.content)


def _response_children(response: Response) -> NestedReferences:
    for header in response.headers.values():
        yield HEADER, header
    yield from _iter_content(response.content)


def _schema_children(schema: Schema) -> NestedReferences:
    if schema.items is not None:
        yield SCHEMA, schema.items
    for subschema in schema.properties.values():
        yield SCHEMA, subschema
    if schema.additional_properties is not None:
        yield SCHEMA, schema.additional_properties
    for subschema in (*schema.all_of, *schema.any_of, *schema.one_of):
        yield SCHEMA, subschema
    if schema.not_ is not None:
        yield SCHEMA, schema.not_


HEADER = ComponentKind("headers", "Header", attrgetter("headers"), _header_children)
PARAMETER = ComponentKind("parameters", "Parameter", attrgetter("parameters"), _parameter_children)
REQUEST_BODY = ComponentKind("requestBodies", "Request Body", attrgetter("request_bodies"), _request_body_children)
RESPONSE = ComponentKind("responses", "Response", attrgetter("responses"), _response_children)
SCHEMA = ComponentKind("schemas", "Schema", attrgetter("schemas"), _schema_children)
SECURITY_SCHEME = ComponentKind("securitySchemes", "Security Scheme", attrgetter("security_schemes"), _no_children)
EXAMPLE = ComponentKind("examples", "Example", attrgetter("examples"), _no_children)

ALL_KINDS = (HEADER, PARAMETER, REQUEST_BODY, RESPONSE, SCHEMA, SECURITY_SCHEME, EXAMPLE)
