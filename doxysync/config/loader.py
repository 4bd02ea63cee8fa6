"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from doxysync._constants import DEFAULT_MATH_SCRIPT_URL

from .models import DEFAULT_WORKERS, ProjectConfig, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a generation run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``doxysync.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required fields are missing or invalid (for example, no
        ``xml_dir`` is configured).

    Examples
    --------
    >>> from pathlib import Path
    >>> from doxysync.config import load_site_config
    >>> config = load_site_config(Path("doxysync.yaml"))  # doctest: +SKIP
    >>> config.xml_dir  # doctest: +SKIP
    PosixPath('build/xml')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    xml_dir = raw.get("xml_dir")
    if not xml_dir:
        msg = f"Configuration file '{path}' does not define 'xml_dir'."
        raise SiteConfigError(msg)

    return SiteConfig(
        xml_dir=Path(xml_dir),
        output_dir=Path(raw.get("output_dir", "public")),
        image_root=_optional_path(raw.get("image_root")),
        templates_dir=_optional_path(raw.get("templates_dir")),
        include=_string_list(raw.get("include"), field="include"),
        workers=_parse_workers(raw.get("workers", DEFAULT_WORKERS)),
        pygments_style=raw.get("pygments_style", "monokai"),
        math_script_url=raw.get("math_script_url", DEFAULT_MATH_SCRIPT_URL),
        project=_build_project_config(raw.get("project") or {}),
    )


def _optional_path(value: object | None) -> Path | None:
    """Return a Path for non-empty values, or None."""
    if value is None:
        return None
    text = str(value).strip()
    return Path(text) if text else None


def _string_list(value: object | None, *, field: str) -> list[str]:
    """Normalize a scalar or list entry into a list of non-empty strings."""
    match value:
        case None:
            return []
        case str() as text:
            return [text] if text.strip() else []
        case list() as items:
            return [str(item).strip() for item in items if str(item).strip()]
        case _:
            msg = f"'{field}' must be a string or a list of strings."
            raise SiteConfigError(msg)


def _parse_workers(value: object) -> int:
    """Validate the worker count used for parallel fan-out."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'workers' must be a positive integer, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _build_project_config(payload: typ.Mapping[str, typ.Any]) -> ProjectConfig:
    """Build a ProjectConfig from the ``project`` mapping."""
    if not isinstance(payload, dict):
        msg = "'project' must be a mapping."
        raise SiteConfigError(msg)
    base = ProjectConfig()
    return ProjectConfig(
        name=payload.get("name", base.name),
        description=payload.get("description", base.description),
        footer_note=payload.get("footer_note", base.footer_note),
        page_title_suffix=payload.get("page_title_suffix", base.page_title_suffix),
    )


__all__ = ["load_site_config"]
