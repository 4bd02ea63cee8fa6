"""Cyclopts CLI entrypoint for turning Doxygen XML into a static HTML site.

The ``doxysync`` console script reads a YAML site configuration (or just an
``--xml-dir``), generates one page per documented source file and
documentation page, and prints the paths it wrote. Recoverable problems are
logged as warnings and counted; schema violations and configuration errors
abort the run with exit status 1.

Examples
--------
Generate a site from the default ``doxysync.yaml``:

>>> from doxysync.cli import main
>>> main()  # doctest: +SKIP

Generate without a configuration file:

>>> from doxysync.cli import app
>>> app.run(
...     ["generate", "--xml-dir", "build/xml", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import SiteConfig, SiteConfigError, load_site_config
from .exceptions import DoxysyncError
from .generator import SiteGenerator
from .logger import VERBOSITY_WARNINGS, setup_logging

DEFAULT_CONFIG = Path("doxysync.yaml")

app = App(name="doxysync", config=cyclopts.config.Env("DOXYSYNC_", command=False))  # type: ignore[unknown-argument]

logger = logging.getLogger(__name__)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(config: Path | None, xml_dir: Path | None) -> SiteConfig:
    """Load the configuration file, or build a default one around ``xml_dir``."""
    if config is not None:
        site_config = load_site_config(config)
    elif DEFAULT_CONFIG.exists():
        site_config = load_site_config(DEFAULT_CONFIG)
    elif xml_dir is not None:
        site_config = SiteConfig(xml_dir=xml_dir)
    else:
        msg = (
            f"No configuration found: pass --config, create {DEFAULT_CONFIG} "
            "or pass --xml-dir."
        )
        raise SiteConfigError(msg)
    if xml_dir is not None:
        site_config.xml_dir = xml_dir
    return site_config


@app.command(help="Generate the HTML site from a Doxygen XML export.")
def generate(
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to site config", env_var="DOXYSYNC_CONFIG"),
    ] = None,
    xml_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the Doxygen XML folder", env_var="DOXYSYNC_XML_DIR"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="DOXYSYNC_OUTPUT_DIR"),
    ] = None,
    image_root: typ.Annotated[
        Path | None,
        Parameter(
            help="Override the folder images are looked up in",
            env_var="DOXYSYNC_IMAGE_ROOT",
        ),
    ] = None,
    workers: typ.Annotated[
        int | None,
        Parameter(help="Number of worker threads", env_var="DOXYSYNC_WORKERS"),
    ] = None,
    verbosity: typ.Annotated[
        int,
        Parameter(
            name=["--verbosity", "-v"],
            help="0 errors, 1 warnings, 2 progress, 3 debug",
            env_var="DOXYSYNC_VERBOSITY",
        ),
    ] = VERBOSITY_WARNINGS,
) -> None:
    """Generate the documentation site.

    Parameters
    ----------
    config : Path or None, optional
        Path to the YAML configuration; defaults to ``doxysync.yaml`` when it
        exists.
    xml_dir : Path or None, optional
        Doxygen XML directory; overrides the configured one and allows running
        without a configuration file.
    output_dir : Path or None, optional
        Override for the output directory.
    image_root : Path or None, optional
        Override for the directory images are copied from.
    workers : int or None, optional
        Override for the size of the thread pool.
    verbosity : int, optional
        Logging verbosity; warnings are shown by default.

    Raises
    ------
    SystemExit
        With status 1 when the configuration is invalid or the XML export
        violates the Doxygen schema.
    """
    tally = setup_logging(verbosity)
    try:
        site_config = _resolve_config(config, xml_dir)
        if output_dir is not None:
            site_config.output_dir = output_dir
        if image_root is not None:
            site_config.image_root = image_root
        if workers is not None:
            if workers < 1:
                msg = "workers must be a positive integer."
                raise SiteConfigError(msg)
            site_config.workers = workers
        written = SiteGenerator(site_config).run()
    except (DoxysyncError, SiteConfigError, FileNotFoundError) as exc:
        logger.error("%s", exc)  # noqa: TRY400 - the message is the diagnostic
        raise SystemExit(1) from exc

    for path in written:
        print(f"wrote {_format_path(path)}")
    if tally.count:
        print(f"{tally.count} warning(s) reported")


def main() -> None:
    """Invoke the Cyclopts application that powers the `doxysync` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
