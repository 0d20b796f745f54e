"""Public openref errors."""

from openref.config import ConfigError
from openref.core.errors import (
    DisallowedExternalRef,
    LoaderError,
    LoaderErrorKind,
    MalformedRefURI,
    OpenRefError,
    UnresolvableFragment,
    UnresolvableFragmentPart,
    UnresolvableReference,
)

__all__ = [
    "ConfigError",
    "DisallowedExternalRef",
    "LoaderError",
    "LoaderErrorKind",
    "MalformedRefURI",
    "OpenRefError",
    "UnresolvableFragment",
    "UnresolvableFragmentPart",
    "UnresolvableReference",
]
