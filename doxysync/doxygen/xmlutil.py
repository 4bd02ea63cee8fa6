"""lxml helpers for loading Doxygen documents and reading required fields.

Accessors prefixed ``required_`` raise :class:`SchemaViolationError` when the
Doxygen schema guarantees presence but the document lacks the element or
attribute, which indicates an incompatible export version.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from lxml import etree

from doxysync.exceptions import SchemaViolationError

if typ.TYPE_CHECKING:
    Element = etree._Element  # noqa: SLF001
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any


def load_document(path: Path) -> Element:
    """Parse ``path`` and return its root element.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    SchemaViolationError
        If the document is not well-formed XML.
    """
    if not path.is_file():
        msg = f"XML document '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        tree = etree.parse(str(path), parser)  # noqa: S320 - local Doxygen output
    except etree.XMLSyntaxError as exc:
        msg = f"Malformed XML: {exc}"
        raise SchemaViolationError(msg, document=str(path)) from exc
    return tree.getroot()


def load_compounddef(xml_dir: Path, refid: str) -> Element:
    """Load ``{xml_dir}/{refid}.xml`` and return its ``<compounddef>``."""
    path = xml_dir / f"{refid}.xml"
    root = load_document(path)
    compounddef = root.find("compounddef")
    if compounddef is None:
        msg = "Document has no <compounddef> element"
        raise SchemaViolationError(msg, document=str(path), identifier=refid)
    return compounddef


def document_name(node: Element) -> str:
    """Return the path of the document ``node`` was parsed from."""
    return node.getroottree().docinfo.URL or "<memory>"


def required_child(node: Element, tag: str, *, identifier: str | None = None) -> Element:
    """Return the first ``tag`` child of ``node`` or raise."""
    child = node.find(tag)
    if child is None:
        msg = f"<{node.tag}> is missing required <{tag}> (line {node.sourceline})"
        raise SchemaViolationError(
            msg, document=document_name(node), identifier=identifier
        )
    return child


def required_attr(node: Element, name: str, *, identifier: str | None = None) -> str:
    """Return attribute ``name`` of ``node`` or raise."""
    value = node.get(name)
    if value is None:
        msg = (
            f"<{node.tag}> is missing required attribute '{name}' "
            f"(line {node.sourceline})"
        )
        raise SchemaViolationError(
            msg, document=document_name(node), identifier=identifier
        )
    return value


def child_text(node: Element, tag: str) -> str | None:
    """Return the full text of the first ``tag`` child, or None when absent."""
    child = node.find(tag)
    if child is None:
        return None
    return "".join(child.itertext())


def required_child_text(
    node: Element, tag: str, *, identifier: str | None = None
) -> str:
    """Return the full text of a required ``tag`` child."""
    return "".join(required_child(node, tag, identifier=identifier).itertext())


__all__ = [
    "Element",
    "child_text",
    "document_name",
    "load_compounddef",
    "load_document",
    "required_attr",
    "required_child",
    "required_child_text",
]
