"""Typed dataclasses describing doxysync site configuration."""

from __future__ import annotations

import dataclasses as dc
import fnmatch
from pathlib import Path

from doxysync._constants import DEFAULT_MATH_SCRIPT_URL

DEFAULT_WORKERS = 4


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ProjectConfig:
    """Project metadata shown in page titles, headers and the landing page."""

    name: str = "API Reference"
    description: str = ""
    footer_note: str = ""
    page_title_suffix: str = "Docs"


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved generation run configuration."""

    xml_dir: Path
    output_dir: Path = Path("public")
    image_root: Path | None = None
    templates_dir: Path | None = None
    include: list[str] = dc.field(default_factory=list)
    workers: int = DEFAULT_WORKERS
    pygments_style: str = "monokai"
    math_script_url: str = DEFAULT_MATH_SCRIPT_URL
    project: ProjectConfig = dc.field(default_factory=ProjectConfig)

    @property
    def resolved_image_root(self) -> Path:
        """Return the image root, defaulting to the XML directory.

        Doxygen copies every referenced image into its XML output directory,
        so that directory is the natural fallback.
        """
        return self.image_root or self.xml_dir

    def includes_file(self, name: str) -> bool:
        """Return whether a file compound named ``name`` should be rendered."""
        if not self.include:
            return True
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.include)


__all__ = ["DEFAULT_WORKERS", "ProjectConfig", "SiteConfig", "SiteConfigError"]
