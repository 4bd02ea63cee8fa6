"""Synthesize the sidebar tree from file paths and page parent links.

Files are grouped by the directories of their source path; pages form a forest
following each page's child list. :func:`to_nav_data` flattens both into the
``[[title, href], [children...]]`` literal read by ``sidebar.js``, and
:func:`write_nav_script` stores it as ``var nav = ...;``.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

import msgspec.json as msgspec_json

from doxysync.exceptions import SchemaViolationError

from .link_resolver import page_filename

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from doxysync.doxygen.models import File, Page

logger = logging.getLogger(__name__)

NavData = list[typ.Any]


@dc.dataclass(slots=True)
class NavLink:
    """A leaf entry pointing at a generated page."""

    title: str
    href: str


@dc.dataclass(slots=True)
class NavSection:
    """A directory in the file tree."""

    title: str
    sections: list[NavSection] = dc.field(default_factory=list)
    links: list[NavLink] = dc.field(default_factory=list)

    def child(self, title: str) -> NavSection:
        """Return the subsection named ``title``, creating it when missing."""
        for section in self.sections:
            if section.title == title:
                return section
        section = NavSection(title)
        self.sections.append(section)
        return section

    def sort(self) -> None:
        """Order subsections and links by title, recursively."""
        self.sections.sort(key=lambda section: section.title)
        self.links.sort(key=lambda link: link.title)
        for section in self.sections:
            section.sort()


@dc.dataclass(slots=True)
class NavNode:
    """A page and the pages nested beneath it."""

    title: str
    href: str
    children: list[NavNode] = dc.field(default_factory=list)


def build_file_tree(files: cabc.Iterable[File]) -> NavSection:
    """Group ``files`` into nested sections keyed by path segment.

    Returns the unnamed root section; its subsections are the top-level
    directories and its links the files without a directory.

    Examples
    --------
    >>> from doxysync.doxygen.models import File
    >>> root = build_file_tree([File("a_8h", "include/a.h", "a.h")])
    >>> root.sections[0].title, root.sections[0].links
    ('include', [NavLink(title='a.h', href='a_8h.html')])
    """
    root = NavSection("")
    for entity in files:
        *directories, _name = [part for part in entity.path.split("/") if part]
        section = root
        for directory in directories:
            section = section.child(directory)
        section.links.append(NavLink(entity.title, page_filename(entity.identifier)))
    root.sort()
    return root


def build_page_forest(pages: cabc.Sequence[Page]) -> list[NavNode]:
    """Return the page trees rooted at pages that are nobody's child.

    Roots keep the order of ``pages``; children follow each page's
    ``subpage_refs``. Unknown child identifiers are skipped with a warning.

    Raises
    ------
    SchemaViolationError
        If the parent/child links contain a cycle.
    """
    by_id = {page.identifier: page for page in pages}
    referenced = {ref for page in pages for ref in page.subpage_refs}
    reached: set[str] = set()

    def node(page: Page, ancestors: tuple[str, ...]) -> NavNode:
        if page.identifier in ancestors:
            chain = " -> ".join((*ancestors, page.identifier))
            msg = f"Page hierarchy contains a cycle: {chain}"
            raise SchemaViolationError(msg, identifier=page.identifier)
        reached.add(page.identifier)
        path = (*ancestors, page.identifier)
        children: list[NavNode] = []
        for ref in page.subpage_refs:
            child = by_id.get(ref)
            if child is None:
                logger.warning(
                    "Page '%s' lists unknown child page '%s'", page.identifier, ref
                )
                continue
            children.append(node(child, path))
        return NavNode(page.title, page_filename(page.identifier), children)

    roots = [node(page, ()) for page in pages if page.identifier not in referenced]
    # Pages hanging off no root can only be reached through a closed loop;
    # walking each of them surfaces that loop as an error.
    for page in pages:
        if page.identifier not in reached:
            node(page, ())
    return roots


def _section_data(section: NavSection) -> NavData:
    children: list[NavData] = [_section_data(sub) for sub in section.sections]
    children.extend([[link.title, link.href], []] for link in section.links)
    return [[section.title, ""], children]


def _node_data(item: NavNode) -> NavData:
    return [[item.title, item.href], [_node_data(child) for child in item.children]]


def to_nav_data(file_tree: NavSection, page_forest: cabc.Iterable[NavNode]) -> NavData:
    """Return the sidebar literal: page trees first, then the file tree.

    Each node is ``[[title, href], [children...]]``; directory nodes carry an
    empty href and render as plain labels.
    """
    data: NavData = [_node_data(item) for item in page_forest]
    data.extend(_section_data(section) for section in file_tree.sections)
    data.extend([[link.title, link.href], []] for link in file_tree.links)
    return data


def write_nav_script(path: Path, data: NavData) -> Path:
    """Write ``data`` to ``path`` as a ``var nav = ...;`` script."""
    payload = msgspec_json.encode(data).decode("utf-8")
    path.write_text(f"var nav = {payload};\n", encoding="utf-8")
    return path


__all__ = [
    "NavLink",
    "NavNode",
    "NavSection",
    "build_file_tree",
    "build_page_forest",
    "to_nav_data",
    "write_nav_script",
]
