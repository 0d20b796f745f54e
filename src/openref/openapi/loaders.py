from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from openref.config import OpenRefConfig
from openref.core.errors import LoaderError, LoaderErrorKind
from openref.openapi.builder import build_document
from openref.openapi.references.documents import ContentType, detect_content_type, load_content, load_remote_uri
from openref.openapi.references.engine import Engine

if TYPE_CHECKING:
    from openref.openapi.model import Document


def from_dict(
    data: dict[str, Any], *, config: OpenRefConfig | None = None, location: str | None = None
) -> Document:
    """Build an OpenAPI document from a dictionary and resolve all its references.

    Args:
        data: Dictionary containing the parsed OpenAPI document
        config: Custom configuration. If `None`, uses auto-discovered config
        location: URI of the document. Relative external references are resolved against it

    Example:
        ```python
        import openref

        document = openref.openapi.from_dict(
            {
                "openapi": "3.0.3",
                "info": {"title": "Pets", "version": "1.0.0"},
                "paths": {},
                "components": {
                    "schemas": {
                        "Pet": {"type": "object", "properties": {"owner": {"$ref": "#/components/schemas/Person"}}},
                        "Person": {"type": "object"},
                    }
                },
            }
        )
        ```

    """
    document = build_document(data, location=location)
    return _resolve(document, config)


def from_file(file: IO[str] | str, *, config: OpenRefConfig | None = None, location: str | None = None) -> Document:
    """Load an OpenAPI document from a file-like object or string.

    Args:
        file: File-like object or raw string containing the document (JSON / YAML)
        config: Custom configuration. If `None`, uses auto-discovered config
        location: URI of the document. Relative external references are resolved against it

    """
    if isinstance(file, str):
        content = file
    else:
        content = file.read()
    return from_dict(load_content(content, ContentType.UNKNOWN), config=config, location=location)


def from_path(path: PathLike | str, *, config: OpenRefConfig | None = None, encoding: str | None = None) -> Document:
    """Load an OpenAPI document from a filesystem path.

    Args:
        path: File path to the document (JSON / YAML)
        config: Custom configuration. If `None`, uses auto-discovered config
        encoding: Text encoding for reading the file. Defaults to the configured one

    Example:
        ```python
        import openref

        document = openref.openapi.from_path("./specs/openapi.yaml")
        ```

    """
    if config is None:
        config = OpenRefConfig.discover()
    try:
        with open(path, encoding=encoding or config.encoding) as file:
            content = file.read()
    except FileNotFoundError as exc:
        raise LoaderError(LoaderErrorKind.FILE_NOT_FOUND, f"Document `{path}` does not exist", url=str(path)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise LoaderError(
            LoaderErrorKind.UNREADABLE, f"Failed to read document `{path}`", url=str(path), extras=[str(exc)]
        ) from exc
    location = Path(path).absolute().as_uri()
    try:
        data = load_content(content, detect_content_type(path=str(path)))
    except LoaderError as exc:
        exc.url = location
        raise
    return from_dict(data, config=config, location=location)


def from_url(url: str, *, config: OpenRefConfig | None = None, **kwargs: Any) -> Document:
    """Load an OpenAPI document from a URL.

    Args:
        url: Full URL to the document
        config: Custom configuration. If `None`, uses auto-discovered config
        **kwargs: Additional parameters passed to `requests.get()` (headers, auth, etc.)

    """
    document = load_remote_uri(url, **kwargs)
    return _resolve(document, config)


def _resolve(document: Document, config: OpenRefConfig | None) -> Document:
    if config is None:
        config = OpenRefConfig.discover()
    Engine.from_config(config).resolve(document)
    return document
