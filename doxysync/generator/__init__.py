"""Resolve, lay out and write the HTML site for built entities."""

from .index_page import IndexPageBuilder
from .link_resolver import ImageResolver, ReferenceResolver, build_location_map
from .navigation import build_file_tree, build_page_forest, write_nav_script
from .site_generator import SiteGenerator

__all__ = [
    "ImageResolver",
    "IndexPageBuilder",
    "ReferenceResolver",
    "SiteGenerator",
    "build_file_tree",
    "build_location_map",
    "build_page_forest",
    "write_nav_script",
]
