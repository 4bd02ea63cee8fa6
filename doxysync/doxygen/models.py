"""Entity dataclasses produced from a Doxygen XML export.

Entities are built once per run by :mod:`doxysync.doxygen.builder`, their
rich-text fields rewritten once by the cross-reference resolver, and then
handed to the templates. Rich-text fields hold pre-rendered HTML.
"""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(slots=True)
class RenderContext:
    """Mutable state shared by every render call for one XML document.

    Attributes
    ----------
    document : str
        Path of the XML document being rendered, used in diagnostics.
    identifier : str
        Doxygen identifier of the compound being rendered.
    has_math : bool
        Set by the transcoder when a formula is rendered.
    """

    document: str
    identifier: str
    has_math: bool = False


@dc.dataclass(slots=True)
class IndexEntry:
    """One ``<compound>`` listed in ``index.xml``."""

    refid: str
    kind: str
    name: str


@dc.dataclass(slots=True)
class EnumValue:
    """A single enumerator of an enum member."""

    identifier: str
    name: str
    initializer: str | None
    description: str


@dc.dataclass(slots=True)
class Member:
    """A documented member: function, typedef, variable, enum or macro."""

    identifier: str
    kind: str
    definition: str
    description: str
    enum_values: list[EnumValue] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class Section:
    """A group of members as declared by a ``<sectiondef>``."""

    header: str | None
    description: str | None
    members: list[Member]


@dc.dataclass(slots=True)
class Scope:
    """A class, struct, union or namespace documented within a file."""

    identifier: str
    name: str
    kind: str
    sections: list[Section]
    description: str = ""


@dc.dataclass(slots=True)
class File:
    """A documented source file and the scopes defined in it.

    Attributes
    ----------
    identifier : str
        Doxygen identifier; also the output filename stem.
    path : str
        Originating source path, ``/``-separated.
    title : str
        Display title (the file name).
    has_math : bool
        Whether any rendered string contains a formula.
    subpage_refs : list[str]
        Child page identifiers; always empty for files.
    anchors : list[str]
        Identifiers anchored inside this file's documentation text.
    scopes : list[Scope]
        Classes and namespaces attributed to this file.
    """

    identifier: str
    path: str
    title: str
    has_math: bool = False
    subpage_refs: list[str] = dc.field(default_factory=list)
    anchors: list[str] = dc.field(default_factory=list)
    scopes: list[Scope] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class Page:
    """A free-form documentation page, possibly with child pages."""

    identifier: str
    path: str
    title: str
    has_math: bool = False
    subpage_refs: list[str] = dc.field(default_factory=list)
    anchors: list[str] = dc.field(default_factory=list)
    description: str = ""


Compound = File | Page


__all__ = [
    "Compound",
    "EnumValue",
    "File",
    "IndexEntry",
    "Member",
    "Page",
    "RenderContext",
    "Scope",
    "Section",
]
