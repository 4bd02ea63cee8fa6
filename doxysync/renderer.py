"""Utilities for rendering code listings and Markdown blurbs consistently."""

from __future__ import annotations

from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter
from pygments.token import (
    STANDARD_TYPES,
    Comment,
    Keyword,
    Name,
    Operator,
    String,
    Text,
    _TokenType,
)

# Doxygen ``<highlight class="...">`` values mapped onto Pygments token types so
# the Pygments stylesheet colours Doxygen's pre-tokenized listings.
HIGHLIGHT_TOKENS: dict[str, _TokenType] = {
    "comment": Comment,
    "keyword": Keyword,
    "keywordtype": Keyword.Type,
    "keywordflow": Keyword.Reserved,
    "preprocessor": Comment.Preproc,
    "stringliteral": String,
    "charliteral": String.Char,
    "vhdlchar": String.Char,
    "vhdlkeyword": Keyword,
    "vhdllogic": Operator,
    "vhdldigit": Name.Constant,
    "normal": Text,
}

_MARKDOWN_EXTENSIONS = ["sane_lists", "tables", "fenced_code"]


class HtmlContentRenderer:
    """Render code listings and Markdown with consistent styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with the Pygments style used for listings.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults
            to ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    @staticmethod
    def token_class(highlight: str) -> str:
        """Return the CSS class for a Doxygen highlight class.

        Unknown classes keep a ``hl-`` prefixed name so they remain stylable.
        """
        token = HIGHLIGHT_TOKENS.get(highlight)
        if token is None:
            return f"hl-{highlight}"
        return STANDARD_TYPES.get(token, "")

    @staticmethod
    def code_block(lines: list[str], language: str | None = None) -> str:
        """Wrap already rendered listing lines in a ``codehilite`` block.

        Parameters
        ----------
        lines : list[str]
            HTML for each source line, without trailing newlines.
        language : str, optional
            Language label stored in ``data-language``; defaults to ``"text"``.

        Returns
        -------
        str
            HTML for the complete listing.
        """
        safe_lang = escape(language or "text", quote=True)
        body = "\n".join(lines)
        return (
            f'<div class="codehilite" data-language="{safe_lang}">'
            f"<pre><code>{body}</code></pre></div>"
        )

    @staticmethod
    def markdown(text: str) -> str:
        """Render a Markdown blurb (such as a project description) into HTML."""
        normalized = (text or "").strip()
        if not normalized:
            return ""
        md = Markdown(extensions=_MARKDOWN_EXTENSIONS, output_format="html")
        return md.convert(normalized)


__all__ = ["HIGHLIGHT_TOKENS", "HtmlContentRenderer"]
