r"""Transcode Doxygen rich-text markup into HTML fragments.

Doxygen describes documentation prose (``<briefdescription>``,
``<detaileddescription>``, parameter docs, page bodies) with a nested markup
schema of a few dozen tags. :class:`MarkupTranscoder` walks such a tree and
returns an HTML string, dispatching on the tag name through a handler table.

Cross-references are not resolved here: ``<ref refid="X">`` becomes a
``refid://X`` placeholder link and ``<image name="a.png">`` a ``doxyimg://a.png``
source, both rewritten once every entity of the run is known (see
:mod:`doxysync.generator.link_resolver`).

Example
-------
>>> from lxml import etree
>>> from doxysync.doxygen.models import RenderContext
>>> from doxysync.doxygen.transcoder import MarkupTranscoder
>>> node = etree.fromstring("<para>See <ref refid='classFoo'>Foo</ref>.</para>")
>>> MarkupTranscoder(RenderContext("foo.xml", "foo")).render(node)
'<p>See <a href="refid://classFoo">Foo</a>.</p>'
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import logging
import re
import typing as typ
from html import escape

from doxysync._constants import IMAGE_PLACEHOLDER, REF_PLACEHOLDER
from doxysync.renderer import HtmlContentRenderer

from .xmlutil import required_attr, required_child

if typ.TYPE_CHECKING:
    from .models import RenderContext
    from .xmlutil import Element

    Handler = cabc.Callable[[Element], str]

logger = logging.getLogger(__name__)

# Tags whose content is rendered without any wrapper of their own.
TRANSPARENT_TAGS = frozenset(
    {
        "briefdescription",
        "detaileddescription",
        "inbodydescription",
        "description",
        "parameterdescription",
        "internal",
        "parblock",
        "type",
        "defval",
        "declname",
        "initializer",
        "term",
        "xrefdescription",
        "codeline",
    }
)

# Tags rendered by wrapping their content in a single HTML element.
WRAPPER_TAGS: dict[str, str] = {
    "para": "p",
    "listitem": "li",
    "blockquote": "blockquote",
    "itemizedlist": "ul",
    "orderedlist": "ol",
    "toclist": "ul",
    "bold": "strong",
    "emphasis": "em",
    "computeroutput": "code",
    "underline": "u",
    "strike": "s",
    "superscript": "sup",
    "subscript": "sub",
    "small": "small",
    "verbatim": "pre",
    "preformatted": "pre",
    "caption": "caption",
    "details": "details",
    "summary": "summary",
}

ENTITY_TAGS: dict[str, str] = {
    "ndash": "&ndash;",
    "mdash": "&mdash;",
    "zwj": "&zwj;",
    "zwnj": "&zwnj;",
    "nonbreakablespace": "&nbsp;",
    "copy": "&copy;",
    "trademark": "&trade;",
    "registered": "&reg;",
    "lsquo": "&lsquo;",
    "rsquo": "&rsquo;",
    "ldquo": "&ldquo;",
    "rdquo": "&rdquo;",
    "linebreak": "<br/>",
    "hruler": "<hr/>",
}

# Output-format specific passthrough blocks for formats other than HTML.
FOREIGN_FORMAT_TAGS = frozenset(
    {"latexonly", "rtfonly", "manonly", "xmlonly", "docbookonly"}
)

# Titles are consumed by the element that owns them.
SUPPRESSED_TAGS = frozenset({"title", "xreftitle"})

SECTION_LEVELS = {"sect1": 2, "sect2": 3, "sect3": 4, "sect4": 5, "sect5": 6}

ALERT_TREATMENTS: dict[str, str] = {
    "warning": "warning",
    "attention": "warning",
    "important": "warning",
    "bug": "warning",
    "note": "info",
    "remark": "info",
    "todo": "info",
    "xrefsect": "info",
}

ADMONITION_LABELS: dict[str, str] = {
    "return": "Returns",
    "see": "See also",
    "pre": "Precondition",
    "post": "Postcondition",
    "param": "Parameters",
    "retval": "Return values",
    "exception": "Exceptions",
    "templateparam": "Template parameters",
}

INLINE_STYLE_PATTERN = re.compile(r"^\{([^{}\n]*)\}")


def admonition_label(kind: str) -> str:
    """Return the display label for a ``simplesect``/``parameterlist`` kind."""
    return ADMONITION_LABELS.get(kind, kind.title())


def split_inline_style(text: str | None) -> tuple[str | None, str]:
    """Split a leading ``{key: value; ...}`` annotation off ``text``.

    Returns
    -------
    tuple[str | None, str]
        The normalized CSS declaration (or ``None`` when ``text`` does not
        start with a style annotation) and the remaining text.

    Examples
    --------
    >>> split_inline_style("{width: 50%} caption")
    ('width: 50%', ' caption')
    >>> split_inline_style("plain text")
    (None, 'plain text')
    """
    text = text or ""
    match = INLINE_STYLE_PATTERN.match(text)
    if match is None:
        return None, text
    declarations: list[str] = []
    for chunk in match.group(1).split(";"):
        if not chunk.strip():
            continue
        key, sep, value = chunk.partition(":")
        if not sep or not key.strip() or not value.strip():
            return None, text
        declarations.append(f"{key.strip()}: {value.strip()}")
    if not declarations:
        return None, text
    return "; ".join(declarations), text[match.end() :]


def convert_formula(text: str) -> str:
    r"""Re-wrap a Doxygen formula for MathJax.

    ``$...$`` becomes inline ``\(...\)``; ``\[...\]`` stays a display formula;
    environments (``\begin{...}``) are wrapped as display formulas.
    """
    body = text.strip()
    if len(body) >= 2 and body.startswith("$") and body.endswith("$"):
        return f"\\({body[1:-1].strip()}\\)"
    if body.startswith("\\[") and body.endswith("\\]"):
        return f"\\[{body[2:-2].strip()}\\]"
    if body.startswith("\\(") and body.endswith("\\)"):
        return body
    return f"\\[{body}\\]"


def listing_text(node: Element) -> str:
    """Return the plain text of a listing node, with ``<sp/>`` as spaces."""
    parts = [node.text or ""]
    for child in node:
        if child.tag == "sp":
            parts.append(" ")
        elif isinstance(child.tag, str):
            parts.append(listing_text(child))
        parts.append(child.tail or "")
    return "".join(parts)


def leading_whitespace(text: str) -> int:
    """Return the number of leading space/tab units in ``text``."""
    return len(text) - len(text.lstrip(" \t"))


def common_indent(lines: cabc.Iterable[str]) -> int:
    """Return the minimum leading whitespace across the non-blank ``lines``."""
    return min(
        (leading_whitespace(line) for line in lines if line.strip()), default=0
    )


def _trailing_image(node: Element) -> Element:
    """Return the element whose tail holds ``node``'s style annotation.

    Renditions of an image for other output formats may follow the HTML one
    back to back; the annotation then trails the last of them. Another HTML
    image ends the run.
    """
    last = node
    while not (last.tail or "").strip():
        sibling = last.getnext()
        if (
            sibling is None
            or sibling.tag != "image"
            or sibling.get("type") in (None, "html")
        ):
            break
        last = sibling
    return last


class MarkupTranscoder:
    """Render Doxygen markup nodes into HTML strings.

    One instance renders one XML document: the shared
    :class:`~doxysync.doxygen.models.RenderContext` records whether a formula
    was seen, and listing dedentation keeps per-line state.
    """

    def __init__(
        self,
        context: RenderContext,
        code_renderer: HtmlContentRenderer | None = None,
    ) -> None:
        self.context = context
        self.code_renderer = code_renderer or HtmlContentRenderer()
        self._indent_budget = 0
        self._handlers: dict[str, Handler] = {
            "ref": self._ref,
            "ulink": self._ulink,
            "anchor": self._anchor,
            "image": self._image,
            "simplesect": self._simplesect,
            "xrefsect": self._xrefsect,
            "parameterlist": self._parameterlist,
            "programlisting": self._programlisting,
            "highlight": self._highlight,
            "sp": self._sp,
            "formula": self._formula,
            "htmlonly": self._htmlonly,
            "heading": self._heading,
            "table": self._table,
            "row": self._row,
            "entry": self._entry,
            "variablelist": self._variablelist,
            "tocitem": self._tocitem,
            "emoji": self._emoji,
        }
        for tag in TRANSPARENT_TAGS:
            self._handlers[tag] = self.render_children
        for tag, html_tag in WRAPPER_TAGS.items():
            self._handlers[tag] = functools.partial(self._wrap, html_tag)
        for tag, entity in ENTITY_TAGS.items():
            self._handlers[tag] = functools.partial(self._constant, entity)
        for tag in FOREIGN_FORMAT_TAGS | SUPPRESSED_TAGS:
            self._handlers[tag] = functools.partial(self._constant, "")
        for tag, level in SECTION_LEVELS.items():
            self._handlers[tag] = functools.partial(self._section, level)

    def render(self, node: Element | None) -> str:
        """Render ``node`` (and its descendants) to HTML.

        ``None`` renders as an empty string so optional description elements
        can be passed straight through. Unsupported tags are skipped with a
        warning.
        """
        if node is None:
            return ""
        handler = self._handlers.get(node.tag)
        if handler is None:
            logger.warning(
                "Skipping unsupported <%s> in %s line %s (%s)",
                node.tag,
                self.context.document,
                node.sourceline,
                self.context.identifier,
            )
            return ""
        return handler(node)

    def render_children(self, node: Element) -> str:
        """Render the text, child elements and tails inside ``node``."""
        parts = [self._text(node.text)]
        for child in node:
            if isinstance(child.tag, str):
                parts.append(self.render(child))
            parts.append(self._tail(child))
        return "".join(parts)

    def _text(self, text: str | None) -> str:
        if not text:
            return ""
        if self._indent_budget:
            stripped = text.lstrip(" \t")
            consumed = min(self._indent_budget, len(text) - len(stripped))
            text = text[consumed:]
            self._indent_budget -= consumed
            if text.strip():
                self._indent_budget = 0
        return escape(text, quote=False)

    def _tail(self, child: Element) -> str:
        tail = child.tail
        if child.tag == "image":
            _style, tail = split_inline_style(tail)
        return self._text(tail)

    def _wrap(self, html_tag: str, node: Element) -> str:
        return f"<{html_tag}>{self.render_children(node)}</{html_tag}>"

    @staticmethod
    def _constant(value: str, _node: Element) -> str:
        return value

    def _ref(self, node: Element) -> str:
        refid = required_attr(node, "refid", identifier=self.context.identifier)
        href = escape(REF_PLACEHOLDER.format(refid=refid), quote=True)
        return f'<a href="{href}">{self.render_children(node)}</a>'

    def _ulink(self, node: Element) -> str:
        url = required_attr(node, "url", identifier=self.context.identifier)
        return f'<a href="{escape(url, quote=True)}">{self.render_children(node)}</a>'

    def _anchor(self, node: Element) -> str:
        anchor_id = required_attr(node, "id", identifier=self.context.identifier)
        return f'<a id="{escape(anchor_id, quote=True)}"></a>'

    def _tocitem(self, node: Element) -> str:
        target = required_attr(node, "id", identifier=self.context.identifier)
        href = escape(REF_PLACEHOLDER.format(refid=target), quote=True)
        return f'<li><a href="{href}">{self.render_children(node)}</a></li>'

    def _emoji(self, node: Element) -> str:
        return escape(node.get("unicode") or node.get("name") or "", quote=False)

    def _image(self, node: Element) -> str:
        if node.get("type") not in (None, "html"):
            return ""
        name = required_attr(node, "name", identifier=self.context.identifier)
        src = IMAGE_PLACEHOLDER.format(path=name)
        caption = "".join(node.itertext()).strip()
        attrs = [
            f'src="{escape(src, quote=True)}"',
            f'alt="{escape(caption or name, quote=True)}"',
        ]
        for dimension in ("width", "height"):
            value = node.get(dimension)
            if value:
                attrs.append(f'{dimension}="{escape(value, quote=True)}"')
        style, _rest = split_inline_style(_trailing_image(node).tail)
        if style:
            attrs.append(f'style="{escape(style, quote=True)}"')
        return f"<img {' '.join(attrs)}>"

    def _admonition(self, kind: str, label: str, body: str) -> str:
        safe_kind = escape(kind, quote=True)
        treatment = ALERT_TREATMENTS.get(kind)
        if treatment:
            return (
                f'<div class="alert alert-{treatment} {safe_kind}">'
                f'<p class="alert-title">{label}</p>{body}</div>'
            )
        return f'<dl class="section {safe_kind}"><dt>{label}</dt><dd>{body}</dd></dl>'

    def _simplesect(self, node: Element) -> str:
        kind = required_attr(node, "kind", identifier=self.context.identifier)
        title = node.find("title")
        if title is not None:
            label = self.render_children(title)
        else:
            label = escape(admonition_label(kind), quote=False)
        return self._admonition(kind, label, self.render_children(node))

    def _xrefsect(self, node: Element) -> str:
        title = node.find("xreftitle")
        label = self.render_children(title) if title is not None else ""
        return self._admonition("xrefsect", label, self.render_children(node))

    def _parameterlist(self, node: Element) -> str:
        kind = node.get("kind", "param")
        rows: list[str] = []
        for item in node.iterchildren("parameteritem"):
            name_list = required_child(
                item, "parameternamelist", identifier=self.context.identifier
            )
            description = required_child(
                item, "parameterdescription", identifier=self.context.identifier
            )
            names = [
                self._parameter_name(name)
                for name in name_list.iterchildren("parametername")
            ]
            if not names:
                continue
            rows.append(
                f'<tr><td class="paramname">{", ".join(names)}:</td>'
                f"<td>{self.render(description)}</td></tr>"
            )
        table = f'<table class="parameterlist">{"".join(rows)}</table>'
        return self._admonition(kind, escape(admonition_label(kind), quote=False), table)

    def _parameter_name(self, node: Element) -> str:
        name = self.render_children(node)
        direction = node.get("direction")
        if direction:
            return f'<span class="paramdir">[{escape(direction)}]</span> {name}'
        return name

    def _programlisting(self, node: Element) -> str:
        lines = list(node.iterchildren("codeline"))
        indent = common_indent(listing_text(line) for line in lines)
        rendered: list[str] = []
        for line in lines:
            self._indent_budget = indent
            try:
                rendered.append(self.render_children(line))
            finally:
                self._indent_budget = 0
        filename = node.get("filename") or ""
        language = filename.lstrip(".") or None
        return self.code_renderer.code_block(rendered, language)

    def _highlight(self, node: Element) -> str:
        css_class = self.code_renderer.token_class(node.get("class", "normal"))
        content = self.render_children(node)
        if not css_class:
            return content
        return f'<span class="{escape(css_class, quote=True)}">{content}</span>'

    def _sp(self, _node: Element) -> str:
        if self._indent_budget:
            self._indent_budget -= 1
            return ""
        return " "

    def _formula(self, node: Element) -> str:
        self.context.has_math = True
        formula = convert_formula("".join(node.itertext()))
        return f'<span class="math">{escape(formula, quote=False)}</span>'

    @staticmethod
    def _htmlonly(node: Element) -> str:
        return "".join(node.itertext())

    def _section(self, level: int, node: Element) -> str:
        anchor_id = node.get("id")
        anchor = f'<a id="{escape(anchor_id, quote=True)}"></a>' if anchor_id else ""
        title = node.find("title")
        heading = self.render_children(title) if title is not None else ""
        return f"{anchor}<h{level}>{heading}</h{level}>{self.render_children(node)}"

    def _heading(self, node: Element) -> str:
        try:
            level = int(node.get("level", "2"))
        except ValueError:
            level = 2
        level = min(max(level, 1), 6)
        return f"<h{level}>{self.render_children(node)}</h{level}>"

    def _table(self, node: Element) -> str:
        parts = ["<table>"]
        for child in node.iterchildren("caption", "row"):
            parts.append(self.render(child))
        parts.append("</table>")
        return "".join(parts)

    def _row(self, node: Element) -> str:
        cells = "".join(self.render(entry) for entry in node.iterchildren("entry"))
        return f"<tr>{cells}</tr>"

    def _entry(self, node: Element) -> str:
        cell = "th" if node.get("thead") == "yes" else "td"
        attrs = "".join(
            f' {name}="{escape(node.get(name), quote=True)}"'
            for name in ("colspan", "rowspan")
            if node.get(name)
        )
        return f"<{cell}{attrs}>{self.render_children(node)}</{cell}>"

    def _variablelist(self, node: Element) -> str:
        parts = ["<dl>"]
        for child in node.iterchildren("varlistentry", "listitem"):
            if child.tag == "varlistentry":
                parts.append(f"<dt>{self.render_children(child)}</dt>")
            else:
                parts.append(f"<dd>{self.render_children(child)}</dd>")
        parts.append("</dl>")
        return "".join(parts)


__all__ = [
    "ADMONITION_LABELS",
    "ALERT_TREATMENTS",
    "MarkupTranscoder",
    "admonition_label",
    "common_indent",
    "convert_formula",
    "leading_whitespace",
    "listing_text",
    "split_inline_style",
]
