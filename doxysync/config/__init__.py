"""Load and validate doxysync run configuration.

This subpackage parses the project's ``doxysync.yaml`` file into typed
dataclasses (:class:`SiteConfig`, :class:`ProjectConfig`) that the site
generator consumes. The primary entry point is :func:`load_site_config`, which
ensures required fields are present and applies defaults.

Examples
--------
>>> from pathlib import Path
>>> from doxysync.config import load_site_config
>>> site = load_site_config(Path("doxysync.yaml"))  # doctest: +SKIP
>>> site.output_dir  # doctest: +SKIP
PosixPath('public')
"""

from .loader import load_site_config
from .models import DEFAULT_WORKERS, ProjectConfig, SiteConfig, SiteConfigError

__all__ = [
    "DEFAULT_WORKERS",
    "ProjectConfig",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
