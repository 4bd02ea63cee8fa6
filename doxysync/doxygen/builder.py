"""Build File and Page entities from a Doxygen XML export.

:func:`read_index` lists the compounds of ``index.xml``; :class:`EntityBuilder`
turns one index entry into a :class:`~doxysync.doxygen.models.File` or
:class:`~doxysync.doxygen.models.Page`. Each XML document gets its own
:class:`~doxysync.doxygen.models.RenderContext` and transcoder, so entries can
be built concurrently.

Example
-------
>>> from pathlib import Path
>>> from doxysync.doxygen.builder import EntityBuilder, read_index
>>> xml_dir = Path("build/xml")
>>> builder = EntityBuilder(xml_dir)  # doctest: +SKIP
>>> [builder.build(entry) for entry in read_index(xml_dir)]  # doctest: +SKIP
[File(identifier='foo_8h', ...), Page(identifier='indexpage', ...)]
"""

from __future__ import annotations

import logging
import typing as typ

from doxysync._constants import INDEX_DOCUMENT
from doxysync.renderer import HtmlContentRenderer

from .models import (
    EnumValue,
    File,
    IndexEntry,
    Member,
    Page,
    RenderContext,
    Scope,
    Section,
)
from .signatures import (
    render_enum_values,
    render_member_definition,
    render_scope_name,
    render_template_params,
)
from .transcoder import MarkupTranscoder
from .xmlutil import (
    child_text,
    document_name,
    load_compounddef,
    load_document,
    required_attr,
    required_child_text,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .xmlutil import Element

logger = logging.getLogger(__name__)

# Labels for ``<sectiondef>`` elements that carry no ``<header>``.
SECTION_LABELS: dict[str, str] = {
    "public-type": "Public Types",
    "public-func": "Public Functions",
    "public-attrib": "Public Attributes",
    "public-slot": "Public Slots",
    "public-static-func": "Static Public Functions",
    "public-static-attrib": "Static Public Attributes",
    "signal": "Signals",
    "property": "Properties",
    "event": "Events",
    "typedef": "Typedefs",
    "enum": "Enumerations",
    "func": "Functions",
    "var": "Variables",
    "define": "Macros",
    "related": "Related Functions",
}

ANCHOR_XPATH = (
    ".//sect1/@id | .//sect2/@id | .//sect3/@id | .//sect4/@id | .//sect5/@id"
    " | .//anchor/@id"
)


def _anchors(*nodes: Element | None) -> list[str]:
    """Return the section and anchor ids found below ``nodes``."""
    return [
        str(value)
        for node in nodes
        if node is not None
        for value in node.xpath(ANCHOR_XPATH)
    ]


def section_label(kind: str | None) -> str | None:
    """Return the default heading for a ``<sectiondef kind>``.

    Examples
    --------
    >>> section_label("public-func")
    'Public Functions'
    >>> section_label("user-defined") is None
    True
    """
    if kind is None:
        return None
    return SECTION_LABELS.get(kind)


def read_index(xml_dir: Path) -> list[IndexEntry]:
    """Return the compounds listed in ``{xml_dir}/index.xml`` in document order.

    Raises
    ------
    FileNotFoundError
        If the index document does not exist.
    SchemaViolationError
        If a compound lacks its ``refid``, ``kind`` or ``<name>``.
    """
    root = load_document(xml_dir / INDEX_DOCUMENT)
    entries: list[IndexEntry] = []
    for compound in root.iterchildren("compound"):
        refid = required_attr(compound, "refid")
        entries.append(
            IndexEntry(
                refid=refid,
                kind=required_attr(compound, "kind", identifier=refid),
                name=required_child_text(compound, "name", identifier=refid),
            )
        )
    return entries


def header_matches(includes: str, file_name: str, file_path: str) -> bool:
    """Return whether an ``<includes>`` header names the given file.

    Examples
    --------
    >>> header_matches("foo.h", "foo.h", "include/foo.h")
    True
    >>> header_matches("lib/foo.h", "foo.h", "include/lib/foo.h")
    True
    >>> header_matches("bar.h", "foo.h", "include/foo.h")
    False
    """
    includes = includes.strip()
    if includes in (file_name, file_path):
        return True
    return file_path.endswith("/" + includes)


class EntityBuilder:
    """Construct entities for index entries of one Doxygen export."""

    def __init__(
        self,
        xml_dir: Path,
        *,
        include: cabc.Callable[[str], bool] | None = None,
        code_renderer: HtmlContentRenderer | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        xml_dir : Path
            Directory holding ``index.xml`` and the compound documents.
        include : callable, optional
            Predicate over file compound names; files it rejects are skipped
            without being parsed. Defaults to accepting every file.
        code_renderer : HtmlContentRenderer, optional
            Renderer shared by the transcoders for code listings.
        """
        self.xml_dir = xml_dir
        self.include = include
        self.code_renderer = code_renderer or HtmlContentRenderer()

    def build(self, entry: IndexEntry) -> File | Page | None:
        """Build the entity for ``entry``, or ``None`` when it yields no page."""
        if entry.kind == "file":
            if self.include is not None and not self.include(entry.name):
                logger.debug("Skipping excluded file %s", entry.name)
                return None
            return self.build_file(entry.refid)
        if entry.kind == "page":
            return self.build_page(entry.refid)
        return None

    def _transcoder(self, compounddef: Element, refid: str) -> MarkupTranscoder:
        context = RenderContext(document=document_name(compounddef), identifier=refid)
        return MarkupTranscoder(context, self.code_renderer)

    def _description(self, transcoder: MarkupTranscoder, node: Element) -> str:
        """Render brief followed by detailed documentation of ``node``."""
        return transcoder.render(node.find("briefdescription")) + transcoder.render(
            node.find("detaileddescription")
        )

    def build_file(self, refid: str) -> File | None:
        """Build a File with the scopes defined in it.

        Returns ``None`` when no scope with documented public members remains.
        """
        logger.info("Building file %s", refid)
        compounddef = load_compounddef(self.xml_dir, refid)
        identifier = required_attr(compounddef, "id", identifier=refid)
        name = required_child_text(compounddef, "compoundname", identifier=identifier)
        location = compounddef.find("location")
        path = name
        if location is not None:
            path = location.get("file") or name
        entity = File(identifier=identifier, path=path, title=name)
        for inner in compounddef.iterchildren("innerclass", "innernamespace"):
            inner_refid = required_attr(inner, "refid", identifier=identifier)
            scope = self.build_scope(inner_refid, entity)
            if scope is not None:
                entity.scopes.append(scope)
        if not entity.scopes:
            logger.debug("Dropping file %s without documented scopes", name)
            return None
        return entity

    def build_scope(self, refid: str, parent: File) -> Scope | None:
        """Build the part of a class or namespace that belongs to ``parent``.

        Returns ``None`` when the compound document is missing, when the class
        is declared by another header, or when no section keeps a member.
        """
        try:
            compounddef = load_compounddef(self.xml_dir, refid)
        except FileNotFoundError:
            logger.debug("No document for inner compound %s", refid)
            return None
        includes = child_text(compounddef, "includes")
        if includes is not None and not header_matches(
            includes, parent.title, parent.path
        ):
            return None

        identifier = required_attr(compounddef, "id", identifier=refid)
        kind = required_attr(compounddef, "kind", identifier=identifier)
        transcoder = self._transcoder(compounddef, identifier)
        name = render_scope_name(
            required_child_text(compounddef, "compoundname", identifier=identifier),
            render_template_params(transcoder, compounddef),
        )
        sections = [
            section
            for sectiondef in compounddef.iterchildren("sectiondef")
            if (section := self._build_section(transcoder, sectiondef, parent))
            is not None
        ]
        if not sections:
            return None
        scope = Scope(
            identifier=identifier,
            name=name,
            kind=kind,
            sections=sections,
            description=self._description(transcoder, compounddef),
        )
        parent.anchors.extend(self._scope_anchors(compounddef, parent))
        parent.has_math = parent.has_math or transcoder.context.has_math
        return scope

    def _scope_anchors(self, compounddef: Element, parent: File) -> list[str]:
        """Return the anchor ids inside the text ``parent`` renders for a scope."""
        anchors = _anchors(
            compounddef.find("briefdescription"),
            compounddef.find("detaileddescription"),
        )
        for sectiondef in compounddef.iterchildren("sectiondef"):
            kept = [
                memberdef
                for memberdef in sectiondef.iterchildren("memberdef")
                if self._keeps_member(memberdef, parent)
            ]
            if kept:
                anchors.extend(_anchors(sectiondef.find("description"), *kept))
        return anchors

    def _build_section(
        self, transcoder: MarkupTranscoder, sectiondef: Element, parent: File
    ) -> Section | None:
        members = [
            self._build_member(transcoder, memberdef)
            for memberdef in sectiondef.iterchildren("memberdef")
            if self._keeps_member(memberdef, parent)
        ]
        if not members:
            return None
        header = child_text(sectiondef, "header")
        if header is None:
            header = section_label(sectiondef.get("kind"))
        description = transcoder.render(sectiondef.find("description")) or None
        return Section(header=header, description=description, members=members)

    @staticmethod
    def _keeps_member(memberdef: Element, parent: File) -> bool:
        """Return whether a member is public API declared in ``parent``."""
        identifier = memberdef.get("id")
        if required_attr(memberdef, "prot", identifier=identifier) != "public":
            return False
        if required_attr(memberdef, "kind", identifier=identifier) == "friend":
            return False
        location = memberdef.find("location")
        if location is None:
            return True
        declared_in = location.get("declfile") or location.get("file")
        return declared_in is None or declared_in == parent.path

    def _build_member(self, transcoder: MarkupTranscoder, memberdef: Element) -> Member:
        identifier = required_attr(memberdef, "id")
        kind = required_attr(memberdef, "kind", identifier=identifier)
        enum_values = [
            EnumValue(
                identifier=value_id,
                name=value_name,
                initializer=initializer,
                description=description,
            )
            for value_id, value_name, initializer, description in render_enum_values(
                transcoder, memberdef
            )
        ]
        return Member(
            identifier=identifier,
            kind=kind,
            definition=render_member_definition(transcoder, memberdef, identifier),
            description=self._description(transcoder, memberdef),
            enum_values=enum_values,
        )

    def build_page(self, refid: str) -> Page:
        """Build a documentation Page with its child page references."""
        logger.info("Building page %s", refid)
        compounddef = load_compounddef(self.xml_dir, refid)
        identifier = required_attr(compounddef, "id", identifier=refid)
        name = required_child_text(compounddef, "compoundname", identifier=identifier)
        title = (child_text(compounddef, "title") or "").strip() or name
        transcoder = self._transcoder(compounddef, identifier)
        subpage_refs = [
            required_attr(inner, "refid", identifier=identifier)
            for inner in compounddef.iterchildren("innerpage")
        ]
        anchors = _anchors(compounddef)
        location = compounddef.find("location")
        path = name
        if location is not None:
            path = location.get("file") or name
        description = self._description(transcoder, compounddef)
        return Page(
            identifier=identifier,
            path=path,
            title=title,
            has_math=transcoder.context.has_math,
            subpage_refs=subpage_refs,
            anchors=anchors,
            description=description,
        )


__all__ = [
    "SECTION_LABELS",
    "EntityBuilder",
    "header_matches",
    "read_index",
    "section_label",
]
