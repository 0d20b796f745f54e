from openref.openapi.references.documents import DocumentLoader, load_file, load_remote_uri, make_loader
from openref.openapi.references.engine import Engine, ResolutionContext, resolve_ref
from openref.openapi.references.kinds import (
    ALL_KINDS,
    EXAMPLE,
    HEADER,
    PARAMETER,
    REQUEST_BODY,
    RESPONSE,
    SCHEMA,
    SECURITY_SCHEME,
    ComponentKind,
)
from openref.openapi.references.locator import locate, split_reference

__all__ = [
    "ALL_KINDS",
    "ComponentKind",
    "DocumentLoader",
    "EXAMPLE",
    "Engine",
    "HEADER",
    "PARAMETER",
    "REQUEST_BODY",
    "RESPONSE",
    "ResolutionContext",
    "SCHEMA",
    "SECURITY_SCHEME",
    "load_file",
    "load_remote_uri",
    "locate",
    "make_loader",
    "resolve_ref",
    "split_reference",
]
