from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import unquote, urljoin, urlsplit, urlunsplit

from openref.core.errors import DisallowedExternalRef, MalformedRefURI, UnresolvableFragment, UnresolvableFragmentPart

if TYPE_CHECKING:
    from openref.openapi.model import Document
    from openref.openapi.references.engine import ResolutionContext
    from openref.openapi.references.kinds import ComponentKind

_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")
_INVALID_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def is_local(reference: str) -> bool:
    return reference.startswith("#")


def split_reference(reference: str) -> tuple[str, str]:
    """Split an external reference into the document locator and the fragment."""
    if _CONTROL_CHARACTERS.search(reference):
        raise MalformedRefURI(reference, "contains control characters")
    match = _INVALID_ESCAPE.search(reference)
    if match is not None:
        raise MalformedRefURI(reference, f"invalid percent-escape at position {match.start()}")
    try:
        parts = urlsplit(reference)
    except ValueError as exc:
        raise MalformedRefURI(reference, str(exc)) from None
    return urlunsplit(parts._replace(fragment="")), parts.fragment


def locate(
    reference: str, kind: ComponentKind, document: Document, context: ResolutionContext
) -> tuple[Document, str]:
    """Find the document and the component name a reference points to.

    Only flat lookups like `#/components/schemas/Pet` are supported, optionally prefixed
    with the location of another document: `common.yaml#/components/schemas/Pet`.
    """
    if is_local(reference):
        fragment = reference[1:]
    else:
        if not context.allow_external_refs:
            raise DisallowedExternalRef(reference)
        locator, fragment = split_reference(reference)
        if locator:
            location = urljoin(document.location, locator) if document.location else locator
            document = context.load(location, reference)
    fragment = "#" + unquote(fragment)
    prefix = kind.prefix
    if not fragment.startswith(prefix):
        raise UnresolvableFragment(reference, kind.label, prefix)
    name = fragment[len(prefix) :]
    if not name:
        raise UnresolvableFragmentPart(reference, fragment, kind.name, "component name is empty")
    if "/" in name:
        raise UnresolvableFragmentPart(
            reference, name, kind.name, f"only direct children of `{prefix}` are supported"
        )
    # JSON Pointer escapes
    return document, name.replace("~1", "/").replace("~0", "~")
