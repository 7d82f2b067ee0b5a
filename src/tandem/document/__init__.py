"""Document text sources consumed by the engine."""

from tandem.document.base import (
    DocumentTextSource,
    Element,
    ElementKind,
    Section,
    TagReference,
)
from tandem.document.org import OrgDocument, format_tag_reference

__all__ = [
    "DocumentTextSource",
    "Element",
    "ElementKind",
    "OrgDocument",
    "Section",
    "TagReference",
    "format_tag_reference",
]
