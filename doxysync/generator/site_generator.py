"""High-level orchestration for static site generation.

:class:`SiteGenerator` runs the pipeline in three steps:

1. build every compound listed in ``index.xml`` on a thread pool, keeping
   index order;
2. once all builds have finished, map each identifier to its final location
   and synthesize the navigation tree;
3. on the pool again, resolve placeholders in each entity, render it with the
   Jinja templates and write ``{id}.html``.

Shared assets (``nav.js``, ``pygments.css``, the static scripts and
stylesheet, the landing page) are written afterwards.

Example
-------
>>> from pathlib import Path
>>> from doxysync.config import load_site_config
>>> from doxysync.generator import SiteGenerator
>>> config = load_site_config(Path("doxysync.yaml"))  # doctest: +SKIP
>>> SiteGenerator(config).run()  # doctest: +SKIP
[PosixPath('public/foo_8h.html'), ...]
"""

from __future__ import annotations

import datetime as dt
import logging
import shutil
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from doxysync._constants import NAV_SCRIPT_FILENAME, PYGMENTS_CSS_FILENAME
from doxysync.doxygen.builder import EntityBuilder, read_index
from doxysync.doxygen.models import File, Page
from doxysync.renderer import HtmlContentRenderer

from .index_page import IndexPageBuilder
from .link_resolver import (
    ImageResolver,
    ReferenceResolver,
    build_location_map,
    chain_rewrites,
    page_filename,
    resolve_entity,
)
from .navigation import (
    build_file_tree,
    build_page_forest,
    to_nav_data,
    write_nav_script,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Template

    from doxysync.config import SiteConfig
    from doxysync.doxygen.models import Compound

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parents[1]
STATIC_DIR = PACKAGE_DIR / "static"


class SiteGenerator:
    """Turn a Doxygen XML export into a linked HTML site."""

    def __init__(
        self,
        site_config: SiteConfig,
        *,
        templates_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        """Initialize the generator with configuration and template context.

        Parameters
        ----------
        site_config : SiteConfig
            Run configuration: input and output directories, worker count,
            styling and project metadata.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the configured
            ``templates_dir`` or the package templates.
        output_dir : Path, optional
            Override for the output directory.
        """
        self.config = site_config
        self.output_dir_override = output_dir
        self.templates_dir = (
            templates_dir or site_config.templates_dir or PACKAGE_DIR / "templates"
        )
        self.renderer = HtmlContentRenderer(site_config.pygments_style)
        self.builder = EntityBuilder(
            site_config.xml_dir,
            include=site_config.includes_file,
            code_renderer=self.renderer,
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.templates: dict[type, Template] = {
            File: self.env.get_template("file_page.jinja"),
            Page: self.env.get_template("doc_page.jinja"),
        }
        self.generated_at = dt.datetime.now(dt.UTC)

    @property
    def output_dir(self) -> Path:
        """Directory receiving every generated artifact."""
        return self.output_dir_override or self.config.output_dir

    def run(self) -> list[Path]:
        """Generate the whole site.

        Returns
        -------
        list[Path]
            Paths of the written entity pages in index order, followed by the
            navigation script and the landing page.

        Raises
        ------
        SchemaViolationError
            When any XML document violates the Doxygen schema. Worker
            exceptions abort the run.
        """
        entries = read_index(self.config.xml_dir)
        logger.info("Index lists %d compounds", len(entries))
        self.output_dir.mkdir(parents=True, exist_ok=True)

        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            built = list(executor.map(self.builder.build, entries))
            entities = [entity for entity in built if entity is not None]

            locations = build_location_map(entities)
            nav_data = to_nav_data(
                build_file_tree(e for e in entities if isinstance(e, File)),
                build_page_forest([e for e in entities if isinstance(e, Page)]),
            )
            images = ImageResolver(self.config.resolved_image_root, self.output_dir)
            rewrite = chain_rewrites(
                ReferenceResolver(locations).resolve, images.resolve
            )
            written = list(
                executor.map(
                    lambda entity: self._write_entity(entity, rewrite), entities
                )
            )

        written.append(
            write_nav_script(self.output_dir / NAV_SCRIPT_FILENAME, nav_data)
        )
        self._write_assets()
        landing = IndexPageBuilder(self.config, templates_dir=self.templates_dir)
        written.append(landing.run(entities, output_dir=self.output_dir))
        return written

    def _write_entity(
        self, entity: Compound, rewrite: cabc.Callable[[str], str]
    ) -> Path:
        """Resolve placeholders in ``entity`` and write its HTML page."""
        resolve_entity(entity, rewrite)
        template = self.templates[type(entity)]
        html = template.render(**self._context(entity))
        output_path = self.output_dir / page_filename(entity.identifier)
        output_path.write_text(html, encoding="utf-8")
        logger.info("Wrote %s", output_path)
        return output_path

    def _context(self, entity: Compound) -> dict[str, typ.Any]:
        project = self.config.project
        math_script_url = self.config.math_script_url if entity.has_math else None
        return {
            "entity": entity,
            "project": project,
            "html_title": f"{entity.title} | {project.name} {project.page_title_suffix}",
            "math_script_url": math_script_url,
            "footer_note": project.footer_note,
            "generated_at": self.generated_at,
            "path_to_root": "",
        }

    def _write_assets(self) -> None:
        """Write the Pygments stylesheet and copy the static assets."""
        (self.output_dir / PYGMENTS_CSS_FILENAME).write_text(
            self.renderer.stylesheet, encoding="utf-8"
        )
        for asset in sorted(STATIC_DIR.iterdir()):
            if asset.is_file():
                shutil.copyfile(asset, self.output_dir / asset.name)


__all__ = ["SiteGenerator"]
