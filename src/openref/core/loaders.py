from __future__ import annotations

import http.client
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn

from openref.core import DEFAULT_RESPONSE_TIMEOUT, USER_AGENT
from openref.core.errors import LoaderError, LoaderErrorKind, get_request_error_extras, get_request_error_message

if TYPE_CHECKING:
    import requests


def prepare_request_kwargs(kwargs: dict[str, Any]) -> None:
    """Prepare common request kwargs."""
    kwargs.setdefault("timeout", DEFAULT_RESPONSE_TIMEOUT)
    headers = kwargs.setdefault("headers", {})
    if "user-agent" not in {header.lower() for header in headers}:
        headers["User-Agent"] = USER_AGENT


def handle_request_error(exc: requests.RequestException) -> NoReturn:
    """Handle request-level errors."""
    import requests

    url = exc.request.url if exc.request is not None else None
    if isinstance(exc, requests.exceptions.SSLError):
        kind = LoaderErrorKind.CONNECTION_SSL
    elif isinstance(exc, requests.exceptions.ConnectionError):
        kind = LoaderErrorKind.CONNECTION_OTHER
    else:
        kind = LoaderErrorKind.NETWORK_OTHER
    raise LoaderError(
        kind=kind,
        message=get_request_error_message(exc),
        url=url,
        extras=get_request_error_extras(exc),
    ) from exc


def raise_for_status(response: requests.Response) -> requests.Response:
    """Turn 4xx / 5xx responses into loader errors."""
    status_code = response.status_code
    if status_code < 400:
        return response

    reason = http.client.responses.get(status_code, "Unknown")
    if status_code >= 500:
        message = f"Failed to load document due to server error (HTTP {status_code} {reason})"
        kind = LoaderErrorKind.HTTP_SERVER_ERROR
    else:
        message = f"Failed to load document due to client error (HTTP {status_code} {reason})"
        kind = (
            LoaderErrorKind.HTTP_FORBIDDEN
            if status_code == 403
            else LoaderErrorKind.HTTP_NOT_FOUND
            if status_code == 404
            else LoaderErrorKind.HTTP_CLIENT_ERROR
        )
    raise LoaderError(kind=kind, message=message, url=response.url)


def load_from_url(func: Callable[..., requests.Response], *, url: str, **kwargs: Any) -> requests.Response:
    """Fetch a document over HTTP with error handling."""
    import requests

    prepare_request_kwargs(kwargs)
    try:
        response = func(url, **kwargs)
    except requests.RequestException as exc:
        handle_request_error(exc)
    return raise_for_status(response)
