"""Read a Doxygen XML export into entity models with pre-rendered HTML."""

from .builder import EntityBuilder, read_index
from .models import (
    Compound,
    EnumValue,
    File,
    IndexEntry,
    Member,
    Page,
    RenderContext,
    Scope,
    Section,
)
from .transcoder import MarkupTranscoder

__all__ = [
    "Compound",
    "EntityBuilder",
    "EnumValue",
    "File",
    "IndexEntry",
    "MarkupTranscoder",
    "Member",
    "Page",
    "RenderContext",
    "Scope",
    "Section",
    "read_index",
]
