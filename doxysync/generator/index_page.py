"""Render the ``index.html`` landing page of a generated site.

The landing page lists every documentation page and source file written by
the run, under the project name and an optional Markdown description taken
from the ``project`` block of the site configuration.

>>> from pathlib import Path
>>> from doxysync.config import SiteConfig
>>> from doxysync.generator.index_page import IndexPageBuilder
>>> builder = IndexPageBuilder(SiteConfig(xml_dir=Path("xml")))  # doctest: +SKIP
>>> builder.run(entities)  # doctest: +SKIP
PosixPath('public/index.html')
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from doxysync._constants import LANDING_PAGE_FILENAME
from doxysync.doxygen.models import File, Page
from doxysync.renderer import HtmlContentRenderer

from .link_resolver import page_filename

if typ.TYPE_CHECKING:  # pragma: no cover - import for type hints only
    import collections.abc as cabc

    from doxysync.config import SiteConfig
    from doxysync.doxygen.models import Compound


class IndexPageBuilder:
    """Render a landing page enumerating the generated pages."""

    def __init__(
        self, site_config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the landing page builder.

        Parameters
        ----------
        site_config : SiteConfig
            Configuration of the run; supplies the project metadata and the
            output directory.
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            configured ``templates_dir`` or the packaged templates.
        """
        self.site_config = site_config
        self.templates_dir = (
            templates_dir
            or site_config.templates_dir
            or Path(__file__).resolve().parents[1] / "templates"
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("index.jinja")

    def run(
        self, entities: cabc.Sequence[Compound], *, output_dir: Path | None = None
    ) -> Path:
        """Write ``index.html`` listing ``entities`` and return its path."""
        project = self.site_config.project
        output_path = (output_dir or self.site_config.output_dir) / (
            LANDING_PAGE_FILENAME
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        context = {
            "project": project,
            "description_html": HtmlContentRenderer.markdown(project.description),
            "pages": self._entries(e for e in entities if isinstance(e, Page)),
            "files": self._entries(e for e in entities if isinstance(e, File)),
            "generated_at": dt.datetime.now(dt.UTC),
            "html_title": f"{project.name} | {project.page_title_suffix}",
            "footer_note": project.footer_note,
            "math_script_url": None,
            "path_to_root": "",
        }
        output_path.write_text(self.template.render(**context), encoding="utf-8")
        return output_path

    @staticmethod
    def _entries(entities: cabc.Iterable[Compound]) -> list[dict[str, str]]:
        entries = [
            {
                "label": entity.title,
                "path": entity.path,
                "href": page_filename(entity.identifier),
            }
            for entity in entities
        ]
        return sorted(entries, key=lambda entry: entry["path"])


__all__ = ["IndexPageBuilder"]
