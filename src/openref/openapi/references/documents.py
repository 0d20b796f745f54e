"""Loading documents that external references point to."""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Callable, Mapping
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

from openref.core.deserialization import deserialize_yaml
from openref.core.errors import LoaderError, LoaderErrorKind
from openref.core.loaders import load_from_url
from openref.openapi.builder import build_document

if TYPE_CHECKING:
    from openref.openapi.model import Document

logger = logging.getLogger(__name__)

# Any callable that turns a location into a document
DocumentLoader = Callable[[str], "Document"]

LOCAL_SCHEMES = ("", "file")
REMOTE_SCHEMES = ("http", "https")
SCHEMA_SYNTAX_ERROR = "API document does not appear syntactically valid"


class ContentType(enum.Enum):
    """Known content types for API documents."""

    JSON = enum.auto()
    YAML = enum.auto()
    UNKNOWN = enum.auto()


def detect_content_type(*, headers: Mapping[str, str] | None = None, path: str | None = None) -> ContentType:
    """Detect content type from response headers or the file extension."""
    if headers is not None:
        content_type = headers.get("Content-Type", "").lower()
        if "json" in content_type:
            return ContentType.JSON
        if "yaml" in content_type:
            return ContentType.YAML
    if path is not None:
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return ContentType.JSON
        if suffix in (".yaml", ".yml"):
            return ContentType.YAML
    return ContentType.UNKNOWN


def load_content(content: str | bytes, content_type: ContentType) -> Any:
    """Load content using the appropriate parser."""
    if content_type == ContentType.JSON:
        return _load_json(content)
    if content_type == ContentType.YAML:
        return _load_yaml(content)
    # YAML is a superset of JSON, but the JSON parser is much faster
    try:
        return _load_json(content)
    except LoaderError:
        return _load_yaml(content)


def _load_json(content: str | bytes) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise LoaderError(
            LoaderErrorKind.SYNTAX_ERROR,
            SCHEMA_SYNTAX_ERROR,
            extras=[entry for entry in str(exc).splitlines() if entry],
        ) from exc


def _load_yaml(content: str | bytes) -> Any:
    import yaml

    try:
        return deserialize_yaml(content)
    except yaml.YAMLError as exc:
        raise LoaderError(
            LoaderErrorKind.SYNTAX_ERROR,
            SCHEMA_SYNTAX_ERROR,
            extras=[entry for entry in str(exc).splitlines() if entry],
        ) from exc


def _unsupported(location: str, hint: str = "") -> LoaderError:
    return LoaderError(LoaderErrorKind.UNSUPPORTED_URI, f"Unsupported URI: `{location}`{hint}", url=location)


def load_file(location: str, *, encoding: str = "utf-8") -> Document:
    """Load a document from a local path or a `file:` URI."""
    parts = urlsplit(location)
    if parts.scheme not in LOCAL_SCHEMES or parts.netloc not in ("", "localhost") or parts.query:
        raise _unsupported(location, ". Only local files are supported")
    path = url2pathname(parts.path) if parts.scheme == "file" else parts.path
    try:
        with open(path, encoding=encoding) as fd:
            content = fd.read()
    except FileNotFoundError as exc:
        raise LoaderError(LoaderErrorKind.FILE_NOT_FOUND, f"Document `{path}` does not exist", url=location) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise LoaderError(
            LoaderErrorKind.UNREADABLE, f"Failed to read document `{path}`", url=location, extras=[str(exc)]
        ) from exc
    return _parse(location, content, detect_content_type(path=path), Path(path).absolute().as_uri())


_HTML_MARKERS = (b"<!doctype", b"<html", b"<head", b"<body")


def _looks_like_html(content_type: str | None, body: bytes) -> bool:
    if content_type and "html" in content_type.lower():
        return True
    head = body.lstrip()[:64].lower()
    return any(head.startswith(marker) for marker in _HTML_MARKERS)


def load_remote_uri(location: str, **kwargs: Any) -> Document:
    """Fetch a document over HTTP(S) and parse it as YAML / JSON."""
    import requests

    response = load_from_url(requests.get, url=location, **kwargs)
    content_type = response.headers.get("Content-Type", "")
    body = response.content or b""
    if _looks_like_html(content_type, body):
        raise LoaderError(
            LoaderErrorKind.UNEXPECTED_CONTENT_TYPE,
            f"Expected YAML/JSON, got HTML "
            f"(HTTP {response.status_code}, Content-Type={content_type}, size={len(body)})",
            url=location,
        )
    content_type = detect_content_type(headers=response.headers, path=urlsplit(location).path)
    return _parse(location, response.text, content_type, location)


def _parse(location: str, content: str, content_type: ContentType, document_location: str) -> Document:
    try:
        return build_document(load_content(content, content_type), location=document_location)
    except LoaderError as exc:
        exc.url = location
        raise


def make_loader(*, allow_remote: bool = False, encoding: str = "utf-8") -> DocumentLoader:
    """Create a loader that dispatches on the URI scheme.

    Only local files are loaded unless `allow_remote` is set.
    """
    handlers: dict[str, DocumentLoader] = dict.fromkeys(LOCAL_SCHEMES, partial(load_file, encoding=encoding))
    if allow_remote:
        handlers.update(dict.fromkeys(REMOTE_SCHEMES, load_remote_uri))

    def load(location: str) -> Document:
        scheme = urlsplit(location).scheme
        handler = handlers.get(scheme)
        if handler is None:
            hint = ". Remote references are disabled" if scheme in REMOTE_SCHEMES else ""
            raise _unsupported(location, hint)
        logger.debug("Loading document from `%s`", location)
        return handler(location)

    return load
