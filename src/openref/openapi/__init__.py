from openref.openapi.builder import build_document
from openref.openapi.loaders import from_dict, from_file, from_path, from_url
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

__all__ = [
    "build_document",
    "from_dict",
    "from_file",
    "from_path",
    "from_url",
    "Components",
    "Document",
    "Example",
    "Header",
    "MediaType",
    "Operation",
    "Parameter",
    "PathItem",
    "Ref",
    "RequestBody",
    "Response",
    "Schema",
    "SecurityScheme",
]
