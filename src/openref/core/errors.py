"""Base error handling that is not tied to any specific entry point."""

from __future__ import annotations

import enum
import re
import sys
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import RequestException


class OpenRefError(Exception):
    """Base exception class for all openref errors."""


class UnresolvableReference(OpenRefError):
    """A reference cannot be resolved."""

    def __init__(self, reference: str) -> None:
        self.reference = reference

    def __str__(self) -> str:
        return f"Reference `{self.reference}` cannot be resolved"


class DisallowedExternalRef(UnresolvableReference):
    """A reference points to another document while external references are disabled."""

    def __str__(self) -> str:
        return (
            f"Reference `{self.reference}` points to another document, but external references are not allowed. "
            "Enable them via `external-refs = true` or `--external-refs`"
        )


class MalformedRefURI(UnresolvableReference):
    """An external reference is not a valid URI."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason

    def __str__(self) -> str:
        return f"Reference `{self.reference}` is not a valid URI: {self.reason}"


class UnresolvableFragment(UnresolvableReference):
    """The fragment of a reference does not point to the expected component table."""

    def __init__(self, reference: str, kind: str, prefix: str) -> None:
        self.reference = reference
        self.kind = kind
        self.prefix = prefix

    def __str__(self) -> str:
        return (
            f"Failed to resolve fragment in reference `{self.reference}`: "
            f"{self.kind} references should start with `{self.prefix}`"
        )


class UnresolvableFragmentPart(UnresolvableReference):
    """A part of the reference fragment does not exist or is not supported."""

    def __init__(self, reference: str, part: str, table: str, detail: str) -> None:
        self.reference = reference
        self.part = part
        self.table = table
        self.detail = detail

    def __str__(self) -> str:
        return f"Failed to resolve `{self.part}` in reference `{self.reference}`: {self.detail}"


@enum.unique
class LoaderErrorKind(str, enum.Enum):
    # Connection related issues
    CONNECTION_SSL = "connection_ssl"
    CONNECTION_OTHER = "connection_other"
    NETWORK_OTHER = "network_other"

    # HTTP error codes
    HTTP_SERVER_ERROR = "http_server_error"
    HTTP_CLIENT_ERROR = "http_client_error"
    HTTP_NOT_FOUND = "http_not_found"
    HTTP_FORBIDDEN = "http_forbidden"

    # Local files
    FILE_NOT_FOUND = "file_not_found"
    UNREADABLE = "unreadable"
    UNSUPPORTED_URI = "unsupported_uri"

    # Content decoding issues
    SYNTAX_ERROR = "syntax_error"
    UNEXPECTED_CONTENT_TYPE = "unexpected_content_type"

    # Open API structure
    OPEN_API_INVALID_SCHEMA = "open_api_invalid_schema"
    OPEN_API_UNSUPPORTED_VERSION = "open_api_unsupported_version"

    # Unclassified
    UNCLASSIFIED = "unclassified"


class LoaderError(OpenRefError):
    """Failed to load an API document."""

    def __init__(
        self,
        kind: LoaderErrorKind,
        message: str,
        url: str | None = None,
        extras: list[str] | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.url = url
        self.extras = extras or []

    def __str__(self) -> str:
        return self.message


def add_note(error: BaseException, note: str) -> None:
    if sys.version_info >= (3, 11):
        error.add_note(note)
    else:
        error.__notes__ = [*getattr(error, "__notes__", []), note]


def get_request_error_extras(exc: RequestException) -> list[str]:
    """Extract additional context from a request exception."""
    from requests.exceptions import ConnectionError, SSLError
    from urllib3.exceptions import MaxRetryError

    if isinstance(exc, SSLError):
        reason = str(exc.args[0].reason)
        return [re.sub(r"\(_ssl\.c:\d+\)", "", reason).strip()]
    if isinstance(exc, ConnectionError):
        inner = exc.args[0]
        if isinstance(inner, MaxRetryError) and inner.reason is not None:
            arg = inner.reason.args[0]
            if isinstance(arg, str):
                reason = arg.split(":", maxsplit=1)[-1]
            else:
                reason = f"Max retries exceeded with url: {inner.url}"
            return [reason.strip()]
        return [" ".join(map(str, getattr(inner, "args", [inner])))]
    return []


def get_request_error_message(exc: RequestException) -> str:
    """Extract user-facing message from a request exception."""
    from requests.exceptions import ConnectionError, ReadTimeout, SSLError

    if isinstance(exc, ReadTimeout):
        return "Read timed out"
    if isinstance(exc, SSLError):
        return "SSL verification problem"
    if isinstance(exc, ConnectionError):
        return "Connection failed"
    return str(exc)


def format_exception(error: BaseException, *, with_traceback: bool = False) -> str:
    """Format exception with optional traceback."""
    if with_traceback:
        lines = traceback.format_exception(type(error), error, error.__traceback__)
    else:
        lines = traceback.format_exception_only(type(error), error)
    return "".join(lines).strip()
