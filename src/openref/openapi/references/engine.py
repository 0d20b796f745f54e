from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from openref.core.errors import LoaderError, LoaderErrorKind, UnresolvableFragmentPart, add_note
from openref.openapi.references.documents import DocumentLoader, make_loader
from openref.openapi.references.kinds import ALL_KINDS, PARAMETER, REQUEST_BODY, RESPONSE, ComponentKind
from openref.openapi.references.locator import locate

if TYPE_CHECKING:
    from openref.config import OpenRefConfig
    from openref.openapi.model import Document, Ref

logger = logging.getLogger(__name__)


class ResolutionContext:
    """State of a single resolution pass.

    A new context is created for every `Engine.resolve` call and is never shared between passes.
    """

    __slots__ = ("allow_external_refs", "loader", "visited", "documents", "references")

    def __init__(self, *, allow_external_refs: bool, loader: DocumentLoader) -> None:
        self.allow_external_refs = allow_external_refs
        self.loader = loader
        # Handles of `Ref` nodes that were already processed in this pass
        self.visited: set[int] = set()
        # Documents by location, each one is loaded at most once per pass
        self.documents: dict[str, Document] = {}
        # Number of reference strings followed
        self.references = 0

    def visit(self, ref: Ref) -> bool:
        """Mark the node as visited. Returns `False` if it was visited before."""
        if ref.handle in self.visited:
            return False
        self.visited.add(ref.handle)
        return True

    def register(self, document: Document) -> None:
        if document.location is not None:
            self.documents.setdefault(document.location, document)

    def load(self, location: str, reference: str) -> Document:
        document = self.documents.get(location)
        if document is not None:
            return document
        logger.debug("Loading `%s` to resolve `%s`", location, reference)
        try:
            document = self.loader(location)
        except LoaderError as exc:
            add_note(exc, f"While resolving reference `{reference}`")
            raise
        except Exception as exc:
            raise LoaderError(
                LoaderErrorKind.UNCLASSIFIED,
                f"Failed to load `{location}` while resolving reference `{reference}`: {exc}",
                url=location,
            ) from exc
        if document.location is None:
            document.location = location
        self.documents[location] = document
        self.register(document)
        return document


class Engine:
    """Links references in OpenAPI documents to their targets."""

    __slots__ = ("allow_external_refs", "loader")

    def __init__(self, *, allow_external_refs: bool = False, loader: DocumentLoader | None = None) -> None:
        self.allow_external_refs = allow_external_refs
        self.loader = loader if loader is not None else make_loader()

    @classmethod
    def from_config(cls, config: OpenRefConfig) -> Engine:
        return cls(
            allow_external_refs=config.external_refs,
            loader=make_loader(allow_remote=config.remote_refs, encoding=config.encoding),
        )

    def new_context(self, document: Document) -> ResolutionContext:
        context = ResolutionContext(allow_external_refs=self.allow_external_refs, loader=self.loader)
        context.register(document)
        return context

    def resolve(self, document: Document) -> ResolutionContext:
        """Resolve every reference reachable from components and operations, in place.

        Raises on the first reference that can not be resolved, the document may be partially
        resolved in that case and should be discarded.
        """
        context = self.new_context(document)
        components = document.components
        for kind in ALL_KINDS:
            table = kind.table(components)
            if table is None:
                continue
            for ref in table.values():
                resolve_ref(kind, ref, document, context)
        for item in document.paths.values():
            if item is None:
                continue
            for parameter in item.parameters:
                resolve_ref(PARAMETER, parameter, document, context)
            for operation in item.operations().values():
                for parameter in operation.parameters:
                    resolve_ref(PARAMETER, parameter, document, context)
                if operation.request_body is not None:
                    resolve_ref(REQUEST_BODY, operation.request_body, document, context)
                for response in operation.responses.values():
                    resolve_ref(RESPONSE, response, document, context)
        logger.debug(
            "Resolved %s: %d nodes visited, %d references followed, %d documents",
            document.location or "document",
            len(context.visited),
            context.references,
            len(context.documents),
        )
        return context

    def resolve_ref(self, kind: ComponentKind, ref: Ref, document: Document) -> ResolutionContext:
        """Resolve a single reference and everything reachable from it."""
        context = self.new_context(document)
        resolve_ref(kind, ref, document, context)
        return context


def lookup(
    kind: ComponentKind, reference: str, document: Document, context: ResolutionContext
) -> tuple[Ref, Document]:
    """Find the node a reference points to and the document it belongs to."""
    context.references += 1
    target_document, name = locate(reference, kind, document, context)
    table = kind.table(target_document.components)
    if table is None:
        raise UnresolvableFragmentPart(
            reference, kind.name, kind.name, f"the document has no `components/{kind.name}` section"
        )
    target = table.get(name)
    if target is None:
        raise UnresolvableFragmentPart(reference, name, kind.name, f"no such entry in `components/{kind.name}`")
    return target, target_document


def resolve_ref(kind: ComponentKind, ref: Ref, document: Document, context: ResolutionContext) -> None:
    """Resolve a node of the given kind and all nodes nested in its value.

    Reference chains are flattened, i.e. `ref.value` becomes the concrete value at the end of the chain.
    """
    if not context.visit(ref):
        return
    if ref.ref:
        target, target_document = lookup(kind, ref.ref, document, context)
        # Nested references are resolved relative to the document that contains them
        resolve_ref(kind, target, target_document, context)
        if target.is_resolved:
            ref.value = target.value
        else:
            # The target is still being flattened further up the stack
            ref.value = _follow_chain(kind, target, target_document, context)
    elif ref.value is not None:
        for child_kind, child in kind.children(ref.value):
            resolve_ref(child_kind, child, document, context)


def _follow_chain(kind: ComponentKind, start: Ref, document: Document, context: ResolutionContext) -> Any:
    seen = {start.handle}
    cycle = [start.ref]
    current = start
    while current.value is None and current.ref:
        current, document = lookup(kind, current.ref, document, context)
        if current.handle in seen:
            # Only references, nothing concrete to point to. The referrer stays without a value
            logger.warning(
                "Reference `%s` is a part of a cycle without a concrete definition: %s",
                start.ref,
                " -> ".join([*cycle, cycle[0]]),
            )
            return None
        seen.add(current.handle)
        if current.ref:
            cycle.append(current.ref)
    return current.value
