"""Build a `Document` from an already deserialized OpenAPI 3 mapping."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from openref.core import HTTP_METHODS
from openref.core.errors import LoaderError, LoaderErrorKind
from openref.openapi.model import (
    Components,
    Document,
    Example,
    Header,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    Ref,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
)

T = TypeVar("T")
Path = tuple[str, ...]

OPENAPI_VERSION_RE = re.compile(r"^3\.[01]\.[0-9](-.+)?$")
SCHEMA_INVALID_ERROR = "The provided API document does not appear to be a valid OpenAPI 3 document"

# Schema keywords that are modeled explicitly
_SCHEMA_KEYWORDS = frozenset(
    (
        "type",
        "format",
        "title",
        "description",
        "nullable",
        "required",
        "enum",
        "items",
        "properties",
        "additionalProperties",
        "allOf",
        "anyOf",
        "oneOf",
        "not",
    )
)


def _invalid(path: Path, message: str) -> LoaderError:
    location = " -> ".join(path) or "[root]"
    return LoaderError(
        LoaderErrorKind.OPEN_API_INVALID_SCHEMA,
        SCHEMA_INVALID_ERROR,
        extras=[f"Location: {location}", message],
    )


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def _expect_mapping(value: Any, path: Path) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise _invalid(path, f"Expected an object, got {_type_name(value)}")
    return value


def _expect_list(value: Any, path: Path) -> list[Any]:
    if not isinstance(value, list):
        raise _invalid(path, f"Expected an array, got {_type_name(value)}")
    return value


def _optional_str(data: Mapping[str, Any], key: str, path: Path) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise _invalid((*path, key), f"Expected a string, got {_type_name(value)}")
    return value


def _extensions(data: Mapping[str, Any], known: frozenset[str] | set[str]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in known}


def build_ref(data: Any, path: Path, build: Callable[[Mapping[str, Any], Path], T]) -> Ref[T]:
    """Create a `Ref` from either a Reference Object or an inline definition."""
    data = _expect_mapping(data, path)
    if "$ref" in data:
        reference = data["$ref"]
        if not isinstance(reference, str) or not reference:
            raise _invalid((*path, "$ref"), "Reference should be a non-empty string")
        # Siblings of `$ref` are ignored in OpenAPI 3.0
        return Ref(ref=reference)
    return Ref(value=build(data, path))


def _build_map(data: Any, path: Path, build: Callable[[Mapping[str, Any], Path], T]) -> dict[str, Ref[T]]:
    data = _expect_mapping(data, path)
    return {str(key): build_ref(value, (*path, str(key)), build) for key, value in data.items()}


def build_schema_ref(data: Any, path: Path) -> Ref[Schema]:
    # OpenAPI 3.1 allows boolean schemas
    if data is True:
        return Ref(value=Schema())
    if data is False:
        return Ref(value=Schema(not_=Ref(value=Schema())))
    return build_ref(data, path, build_schema)


def build_schema(data: Mapping[str, Any], path: Path) -> Schema:
    schema = Schema(
        type=data.get("type"),
        format=_optional_str(data, "format", path),
        title=_optional_str(data, "title", path),
        description=_optional_str(data, "description", path),
        nullable=bool(data.get("nullable", False)),
        required=list(_expect_list(data.get("required", []), (*path, "required"))),
        enum=data.get("enum"),
        extensions=_extensions(data, _SCHEMA_KEYWORDS),
    )
    if "items" in data:
        items = data["items"]
        if isinstance(items, list):
            # Tuple validation from older drafts is kept as a raw keyword
            schema.extensions["items"] = items
        else:
            schema.items = build_schema_ref(items, (*path, "items"))
    if "properties" in data:
        properties = _expect_mapping(data["properties"], (*path, "properties"))
        schema.properties = {
            str(name): build_schema_ref(value, (*path, "properties", str(name))) for name, value in properties.items()
        }
    if "additionalProperties" in data:
        additional = data["additionalProperties"]
        if isinstance(additional, bool):
            schema.additional_properties_allowed = additional
        else:
            schema.additional_properties = build_schema_ref(additional, (*path, "additionalProperties"))
    for keyword, attribute in (("allOf", "all_of"), ("anyOf", "any_of"), ("oneOf", "one_of")):
        if keyword in data:
            entries = _expect_list(data[keyword], (*path, keyword))
            setattr(
                schema,
                attribute,
                [build_schema_ref(entry, (*path, keyword, str(idx))) for idx, entry in enumerate(entries)],
            )
    if "not" in data:
        schema.not_ = build_schema_ref(data["not"], (*path, "not"))
    return schema


def build_example(data: Mapping[str, Any], path: Path) -> Example:
    return Example(
        summary=_optional_str(data, "summary", path),
        description=_optional_str(data, "description", path),
        value=data.get("value"),
        external_value=_optional_str(data, "externalValue", path),
        extensions=_extensions(data, {"summary", "description", "value", "externalValue"}),
    )


def _build_examples(data: Mapping[str, Any], path: Path) -> dict[str, Ref[Example]]:
    if "examples" not in data:
        return {}
    return _build_map(data["examples"], (*path, "examples"), build_example)


def _build_optional_schema(data: Mapping[str, Any], path: Path) -> Ref[Schema] | None:
    if "schema" not in data:
        return None
    return build_schema_ref(data["schema"], (*path, "schema"))


def build_header(data: Mapping[str, Any], path: Path) -> Header:
    return Header(
        description=_optional_str(data, "description", path),
        required=bool(data.get("required", False)),
        schema=_build_optional_schema(data, path),
        examples=_build_examples(data, path),
        extensions=_extensions(data, {"description", "required", "schema", "examples"}),
    )


def build_parameter(data: Mapping[str, Any], path: Path) -> Parameter:
    name = data.get("name")
    location = data.get("in")
    if not isinstance(name, str):
        raise _invalid((*path, "name"), "Parameter name should be a string")
    if not isinstance(location, str):
        raise _invalid((*path, "in"), "Parameter location should be a string")
    return Parameter(
        name=name,
        location=location,
        description=_optional_str(data, "description", path),
        required=bool(data.get("required", False)),
        schema=_build_optional_schema(data, path),
        examples=_build_examples(data, path),
        extensions=_extensions(data, {"name", "in", "description", "required", "schema", "examples"}),
    )


def build_media_type(data: Mapping[str, Any], path: Path) -> MediaType:
    return MediaType(
        schema=_build_optional_schema(data, path),
        examples=_build_examples(data, path),
        extensions=_extensions(data, {"schema", "examples"}),
    )


def _build_content(data: Mapping[str, Any], path: Path) -> dict[str, MediaType | None]:
    content = _expect_mapping(data.get("content", {}), (*path, "content"))
    result: dict[str, MediaType | None] = {}
    for media_type, definition in content.items():
        entry_path = (*path, "content", str(media_type))
        result[str(media_type)] = (
            None if definition is None else build_media_type(_expect_mapping(definition, entry_path), entry_path)
        )
    return result


def build_request_body(data: Mapping[str, Any], path: Path) -> RequestBody:
    return RequestBody(
        description=_optional_str(data, "description", path),
        required=bool(data.get("required", False)),
        content=_build_content(data, path),
        extensions=_extensions(data, {"description", "required", "content"}),
    )


def build_response(data: Mapping[str, Any], path: Path) -> Response:
    headers = _build_map(data["headers"], (*path, "headers"), build_header) if "headers" in data else {}
    return Response(
        description=_optional_str(data, "description", path),
        headers=headers,
        content=_build_content(data, path),
        extensions=_extensions(data, {"description", "headers", "content"}),
    )


def build_security_scheme(data: Mapping[str, Any], path: Path) -> SecurityScheme:
    kind = data.get("type")
    if not isinstance(kind, str):
        raise _invalid((*path, "type"), "Security scheme type should be a string")
    flows = data.get("flows")
    return SecurityScheme(
        type=kind,
        description=_optional_str(data, "description", path),
        name=_optional_str(data, "name", path),
        location=_optional_str(data, "in", path),
        scheme=_optional_str(data, "scheme", path),
        bearer_format=_optional_str(data, "bearerFormat", path),
        flows=dict(_expect_mapping(flows, (*path, "flows"))) if flows is not None else None,
        open_id_connect_url=_optional_str(data, "openIdConnectUrl", path),
        extensions=_extensions(
            data, {"type", "description", "name", "in", "scheme", "bearerFormat", "flows", "openIdConnectUrl"}
        ),
    )


# Key in the source document -> (attribute name, builder)
COMPONENT_TABLES: dict[str, tuple[str, Callable[[Mapping[str, Any], Path], Any]]] = {
    "headers": ("headers", build_header),
    "parameters": ("parameters", build_parameter),
    "requestBodies": ("request_bodies", build_request_body),
    "responses": ("responses", build_response),
    "schemas": ("schemas", build_schema),
    "securitySchemes": ("security_schemes", build_security_scheme),
    "examples": ("examples", build_example),
}


def build_components(data: Mapping[str, Any], path: Path) -> Components:
    components = Components()
    for key, (attribute, build) in COMPONENT_TABLES.items():
        if key not in data or data[key] is None:
            continue
        if key == "schemas":
            table = _expect_mapping(data[key], (*path, key))
            value = {str(name): build_schema_ref(entry, (*path, key, str(name))) for name, entry in table.items()}
        else:
            value = _build_map(data[key], (*path, key), build)
        setattr(components, attribute, value)
    return components


def _build_parameters(data: Mapping[str, Any], path: Path) -> list[Ref[Parameter]]:
    entries = _expect_list(data.get("parameters", []), (*path, "parameters"))
    return [build_ref(entry, (*path, "parameters", str(idx)), build_parameter) for idx, entry in enumerate(entries)]


def build_operation(data: Mapping[str, Any], path: Path) -> Operation:
    request_body = None
    if data.get("requestBody") is not None:
        request_body = build_ref(data["requestBody"], (*path, "requestBody"), build_request_body)
    responses = _build_map(data.get("responses", {}), (*path, "responses"), build_response)
    return Operation(
        operation_id=_optional_str(data, "operationId", path),
        summary=_optional_str(data, "summary", path),
        parameters=_build_parameters(data, path),
        request_body=request_body,
        responses=responses,
        extensions=_extensions(data, {"operationId", "summary", "parameters", "requestBody", "responses"}),
    )


def build_path_item(data: Mapping[str, Any], path: Path) -> PathItem:
    item = PathItem(
        summary=_optional_str(data, "summary", path),
        description=_optional_str(data, "description", path),
        parameters=_build_parameters(data, path),
    )
    for method in HTTP_METHODS:
        definition = data.get(method)
        if definition is not None:
            operation_path = (*path, method)
            setattr(item, method, build_operation(_expect_mapping(definition, operation_path), operation_path))
    return item


def build_document(data: Any, *, location: str | None = None) -> Document:
    """Convert a deserialized OpenAPI 3 document into the document model.

    References are kept as-is, use `Engine.resolve` to link them.
    """
    if not isinstance(data, Mapping):
        raise LoaderError(LoaderErrorKind.OPEN_API_INVALID_SCHEMA, SCHEMA_INVALID_ERROR, url=location)
    version = data.get("openapi")
    if version is not None and not (isinstance(version, str) and OPENAPI_VERSION_RE.match(version)):
        raise LoaderError(
            LoaderErrorKind.OPEN_API_UNSUPPORTED_VERSION,
            f"The provided document uses Open API {version}, which is currently not supported.",
            url=location,
        )
    if "swagger" in data:
        raise LoaderError(
            LoaderErrorKind.OPEN_API_UNSUPPORTED_VERSION,
            f"The provided document uses Swagger {data['swagger']}, only Open API 3.0 and 3.1 are supported.",
            url=location,
        )
    info = data.get("info", {})
    components = data.get("components")
    paths: dict[str, PathItem | None] = {}
    for key, definition in _expect_mapping(data.get("paths", {}), ("paths",)).items():
        item_path = ("paths", str(key))
        if definition is None:
            paths[str(key)] = None
        else:
            paths[str(key)] = build_path_item(_expect_mapping(definition, item_path), item_path)
    return Document(
        openapi=version,
        info=dict(_expect_mapping(info, ("info",))),
        components=build_components(_expect_mapping(components, ("components",)), ("components",))
        if components is not None
        else Components(),
        paths=paths,
        location=location,
        extensions=_extensions(data, {"openapi", "info", "components", "paths"}),
    )
