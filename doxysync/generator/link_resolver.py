"""Rewrite placeholder links and image sources once every entity is known.

Rendering leaves ``refid://{id}`` hrefs and ``doxyimg://{path}`` sources in
the stored HTML. After the whole run has been built, :func:`build_location_map`
maps every identifier to its page (and fragment), and the resolvers below
substitute the placeholders by plain regular-expression replacement.

Example
-------
>>> from doxysync.doxygen.models import Page
>>> locations = build_location_map([Page("intro", "intro.md", "Intro")])
>>> ReferenceResolver(locations).resolve('<a href="refid://intro">Intro</a>')
'<a href="intro.html">Intro</a>'
"""

from __future__ import annotations

import logging
import re
import shutil
import threading
import typing as typ
from html import escape, unescape
from pathlib import Path, PurePosixPath

from doxysync._constants import (
    IMAGE_SCHEME,
    IMAGES_DIRNAME,
    NOT_FOUND_HREF,
    PAGE_FILENAME_TEMPLATE,
    REF_SCHEME,
)
from doxysync.doxygen.models import File, Page

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from doxysync.doxygen.models import Compound

logger = logging.getLogger(__name__)

# Placeholders only occur inside double-quoted, HTML-escaped attribute values.
REF_PATTERN = re.compile(re.escape(REF_SCHEME) + r'([^"]*)')
IMAGE_PATTERN = re.compile(re.escape(IMAGE_SCHEME) + r'([^"]*)')


def page_filename(identifier: str) -> str:
    """Return the output filename of a file or page entity."""
    return PAGE_FILENAME_TEMPLATE.format(refid=identifier)


def _anchored_identifiers(entity: Compound) -> cabc.Iterator[str]:
    """Yield every identifier located inside ``entity``'s page."""
    yield from entity.anchors
    if isinstance(entity, File):
        for scope in entity.scopes:
            yield scope.identifier
            for section in scope.sections:
                for member in section.members:
                    yield member.identifier
                    for value in member.enum_values:
                        yield value.identifier


def build_location_map(entities: cabc.Iterable[Compound]) -> dict[str, str]:
    """Map every identifier of the run to its final HTML location.

    Files and pages map to ``{id}.html``; scopes, members, enumerators and
    anchors map to ``{owner}.html#{id}``. When an identifier occurs under
    several entities (namespaces spread over many files), the first entity in
    run order wins so the result does not depend on scheduling.
    """
    locations: dict[str, str] = {}
    for entity in entities:
        filename = page_filename(entity.identifier)
        locations.setdefault(entity.identifier, filename)
        for identifier in _anchored_identifiers(entity):
            locations.setdefault(identifier, f"{filename}#{identifier}")
    return locations


class ReferenceResolver:
    """Replace ``refid://`` placeholders with final locations."""

    def __init__(self, locations: cabc.Mapping[str, str]) -> None:
        self.locations = locations

    def resolve(self, text: str) -> str:
        """Return ``text`` with every placeholder link resolved.

        Unknown identifiers resolve to ``#not-found`` and log a warning; this
        method never raises for dangling references.
        """
        return REF_PATTERN.sub(self._substitute, text)

    def _substitute(self, match: re.Match[str]) -> str:
        identifier = unescape(match.group(1))
        location = self.locations.get(identifier)
        if location is None:
            logger.warning("Unresolved reference to '%s'", identifier)
            return NOT_FOUND_HREF
        return escape(location, quote=True)


class ImageResolver:
    """Copy referenced images into the output tree and rewrite their sources.

    Copies are deduplicated by destination filename: the first request copies
    the file, later ones (from any thread) reuse it.
    """

    def __init__(self, image_root: Path, output_dir: Path) -> None:
        self.image_root = image_root
        self.output_dir = output_dir
        self._copied: set[str] = set()
        self._lock = threading.Lock()

    @property
    def images_dir(self) -> Path:
        """Directory receiving the copied images."""
        return self.output_dir / IMAGES_DIRNAME

    def resolve(self, text: str) -> str:
        """Return ``text`` with every image placeholder resolved."""
        return IMAGE_PATTERN.sub(self._substitute, text)

    def _substitute(self, match: re.Match[str]) -> str:
        relative = unescape(match.group(1))
        source = self.image_root / relative
        if not source.is_file():
            logger.warning("Image '%s' not found under %s", relative, self.image_root)
            return escape(relative, quote=True)
        name = PurePosixPath(relative).name
        self._copy(source, name)
        return escape(f"{IMAGES_DIRNAME}/{name}", quote=True)

    def _copy(self, source: Path, name: str) -> None:
        with self._lock:
            if name in self._copied:
                return
            self.images_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, self.images_dir / name)
            self._copied.add(name)
            logger.debug("Copied image %s", name)


def resolve_entity(entity: Compound, rewrite: cabc.Callable[[str], str]) -> None:
    """Apply ``rewrite`` to every stored rich-text string of ``entity``."""
    if isinstance(entity, Page):
        entity.description = rewrite(entity.description)
        return
    for scope in entity.scopes:
        scope.name = rewrite(scope.name)
        scope.description = rewrite(scope.description)
        for section in scope.sections:
            if section.description is not None:
                section.description = rewrite(section.description)
            for member in section.members:
                member.definition = rewrite(member.definition)
                member.description = rewrite(member.description)
                for value in member.enum_values:
                    if value.initializer is not None:
                        value.initializer = rewrite(value.initializer)
                    value.description = rewrite(value.description)


def chain_rewrites(
    *rewrites: cabc.Callable[[str], str],
) -> cabc.Callable[[str], str]:
    """Compose string rewrites, applied left to right."""

    def rewrite(text: str) -> str:
        for step in rewrites:
            text = step(text)
        return text

    return rewrite


__all__ = [
    "IMAGE_PATTERN",
    "REF_PATTERN",
    "ImageResolver",
    "ReferenceResolver",
    "build_location_map",
    "chain_rewrites",
    "page_filename",
    "resolve_entity",
]
