"""Format member declarations and scope names as HTML signatures.

Each member kind has its own layout, built from rendered sub-parts (types,
argument lists, initializers) joined with fixed punctuation and ``<span>``
classes the stylesheet targets:

- functions: ``name(args) qualifiers → returnType``
- typedefs: ``using name = type``
- variables and properties: ``type name initializer``
- enums: ``enum name {`` followed by one line per enumerator and ``}``
- macros: ``#define NAME(params) value``

Sub-parts are rendered with a :class:`~doxysync.doxygen.transcoder.MarkupTranscoder`
so ``<ref>`` elements inside types become placeholder links like any other
documentation text.
"""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from .xmlutil import child_text, required_attr, required_child, required_child_text

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .transcoder import MarkupTranscoder
    from .xmlutil import Element

logger = logging.getLogger(__name__)

INDENT = "&nbsp;&nbsp;&nbsp;&nbsp;"
ARG_SEPARATOR = "<br/>" + INDENT
SCOPE_SEPARATOR = "::"
BREAK_OPPORTUNITY = "&#8203;"


def _last_top_level_separator(name: str) -> int:
    """Return the index of the last ``::`` outside template brackets, or -1."""
    depth = 0
    last = -1
    index = 0
    while index < len(name):
        char = name[index]
        if char == "<":
            depth += 1
        elif char == ">":
            depth = max(depth - 1, 0)
        elif depth == 0 and name.startswith(SCOPE_SEPARATOR, index):
            last = index
            index += len(SCOPE_SEPARATOR)
            continue
        index += 1
    return last


def _breakable(text: str) -> str:
    """Escape ``text`` and allow line breaks after each ``::``."""
    return escape(text, quote=False).replace(
        SCOPE_SEPARATOR, SCOPE_SEPARATOR + BREAK_OPPORTUNITY
    )


def render_scope_name(name: str, template_params: str = "") -> str:
    """Render a qualified scope name as namespace and name spans.

    Parameters
    ----------
    name : str
        Qualified compound name such as ``ns::Foo`` or ``ns::Map< a::b >``.
    template_params : str, optional
        Pre-rendered ``template <...>`` prefix for class templates.

    Examples
    --------
    >>> render_scope_name("ns::Foo")
    '<span class="namespace_part">ns::&#8203;</span><span class="name_part">Foo</span>'
    """
    split = _last_top_level_separator(name)
    if split < 0:
        body = f'<span class="name_part">{_breakable(name)}</span>'
    else:
        head = name[: split + len(SCOPE_SEPARATOR)]
        tail = name[split + len(SCOPE_SEPARATOR) :]
        body = (
            f'<span class="namespace_part">{_breakable(head)}</span>'
            f'<span class="name_part">{_breakable(tail)}</span>'
        )
    if template_params:
        return f"{template_params}<br/>{body}"
    return body


def _normalize_type(type_html: str) -> str:
    """Attach reference and pointer markers to the type they modify."""
    return type_html.replace(" &amp;", "&amp;").replace(" *", "*").strip()


def _render_param(transcoder: MarkupTranscoder, param: Element) -> str:
    type_node = param.find("type")
    parts: list[str] = []
    if type_node is not None:
        parts.append(
            f'<span class="type">{_normalize_type(transcoder.render(type_node))}</span>'
        )
    declname = param.find("declname")
    if declname is None:
        declname = param.find("defname")
    if declname is not None:
        parts.append(f'<span class="declname">{transcoder.render(declname)}</span>')
    result = " ".join(parts)
    defval = param.find("defval")
    if defval is not None:
        result += f' = <span class="defval">{transcoder.render(defval)}</span>'
    return result


def render_template_params(transcoder: MarkupTranscoder, node: Element) -> str:
    """Render a ``<templateparamlist>`` child of ``node``, or ``""`` if absent."""
    paramlist = node.find("templateparamlist")
    if paramlist is None:
        return ""
    params = [_render_param(transcoder, p) for p in paramlist.iterchildren("param")]
    return f'<span class="template">template &lt;{", ".join(params)}&gt;</span>'


def render_member_args(transcoder: MarkupTranscoder, memberdef: Element) -> str:
    """Render a function's parameter list, one parameter per line."""
    args = [_render_param(transcoder, p) for p in memberdef.iterchildren("param")]
    if not args:
        return "()"
    return "(" + ARG_SEPARATOR + ("," + ARG_SEPARATOR).join(args) + ")"


def _trailing_qualifiers(argsstring: str | None) -> str:
    """Return what follows the closing parenthesis (``const``, ``= 0``, ...)."""
    if not argsstring or ")" not in argsstring:
        return ""
    return argsstring[argsstring.rfind(")") + 1 :].strip()


def _specifiers(memberdef: Element) -> str:
    words: list[str] = []
    if memberdef.get("explicit") == "yes":
        words.append("explicit")
    if memberdef.get("static") == "yes":
        words.append("static")
    if memberdef.get("virt") in {"virtual", "pure-virtual"}:
        words.append("virtual")
    return "".join(f'<span class="specifier">{word}</span> ' for word in words)


def _type_html(transcoder: MarkupTranscoder, memberdef: Element) -> str:
    return _normalize_type(transcoder.render(memberdef.find("type")))


def _function_definition(
    transcoder: MarkupTranscoder, memberdef: Element, name: str
) -> str:
    signature = (
        f'{_specifiers(memberdef)}<span class="member_name">{name}</span>'
        f"{render_member_args(transcoder, memberdef)}"
    )
    qualifiers = _trailing_qualifiers(child_text(memberdef, "argsstring"))
    if qualifiers:
        signature += f' <span class="qualifiers">{escape(qualifiers, quote=False)}</span>'
    return_type = _type_html(transcoder, memberdef)
    if return_type:
        signature += f' → <span class="type">{return_type}</span>'
    template = render_template_params(transcoder, memberdef)
    if template:
        return f"{template}<br/>{signature}"
    return signature


def _typedef_definition(
    transcoder: MarkupTranscoder, memberdef: Element, name: str
) -> str:
    type_html = _type_html(transcoder, memberdef)
    argsstring = child_text(memberdef, "argsstring") or ""
    if argsstring:
        type_html += escape(argsstring, quote=False)
    signature = (
        f'using <span class="member_name">{name}</span> = '
        f'<span class="type">{type_html}</span>'
    )
    template = render_template_params(transcoder, memberdef)
    if template:
        return f"{template}<br/>{signature}"
    return signature


def _variable_definition(
    transcoder: MarkupTranscoder, memberdef: Element, name: str
) -> str:
    argsstring = escape(child_text(memberdef, "argsstring") or "", quote=False)
    signature = (
        f'{_specifiers(memberdef)}<span class="type">{_type_html(transcoder, memberdef)}'
        f'</span> <span class="member_name">{name}{argsstring}</span>'
    )
    initializer = transcoder.render(memberdef.find("initializer")).strip()
    if initializer:
        signature += f' <span class="defval">{initializer}</span>'
    return signature


def _enum_definition(
    transcoder: MarkupTranscoder, memberdef: Element, name: str
) -> str:
    keyword = "enum class" if memberdef.get("strong") == "yes" else "enum"
    header = f'{keyword} <span class="member_name">{name}</span>'
    underlying = _type_html(transcoder, memberdef)
    if underlying:
        header += f' : <span class="type">{underlying}</span>'
    lines = [header + " {"]
    for value in memberdef.iterchildren("enumvalue"):
        value_name = escape(required_child_text(value, "name"), quote=False)
        initializer = transcoder.render(value.find("initializer")).strip()
        lines.append(f"{INDENT}{value_name} {initializer}".rstrip())
    return "<br/>".join(lines) + "<br/>}"


def _define_definition(
    transcoder: MarkupTranscoder, memberdef: Element, name: str
) -> str:
    signature = f'#define <span class="member_name">{name}</span>'
    params = list(memberdef.iterchildren("param"))
    if params:
        names = [escape(child_text(p, "defname") or "", quote=False) for p in params]
        signature += f"({', '.join(names)})"
    initializer = transcoder.render(memberdef.find("initializer")).strip()
    if initializer:
        signature += f' <span class="defval">{initializer}</span>'
    return signature


DefinitionRenderer = typ.Callable[["MarkupTranscoder", "Element", str], str]

DEFINITION_RENDERERS: dict[str, DefinitionRenderer] = {
    "function": _function_definition,
    "signal": _function_definition,
    "slot": _function_definition,
    "typedef": _typedef_definition,
    "variable": _variable_definition,
    "property": _variable_definition,
    "event": _variable_definition,
    "enum": _enum_definition,
    "define": _define_definition,
}


def render_member_definition(
    transcoder: MarkupTranscoder, memberdef: Element, identifier: str
) -> str:
    """Render the HTML signature of a ``<memberdef>``.

    Unknown member kinds fall back to Doxygen's own ``<definition>`` and
    ``<argsstring>`` text, with a warning.
    """
    kind = required_attr(memberdef, "kind", identifier=identifier)
    name = escape(required_child_text(memberdef, "name", identifier=identifier))
    renderer = DEFINITION_RENDERERS.get(kind)
    if renderer is not None:
        return renderer(transcoder, memberdef, name)
    logger.warning("No signature layout for member kind '%s' (%s)", kind, identifier)
    definition = child_text(memberdef, "definition") or name
    argsstring = child_text(memberdef, "argsstring") or ""
    return escape(definition + argsstring, quote=False)


def render_enum_values(
    transcoder: MarkupTranscoder, memberdef: Element
) -> cabc.Iterator[tuple[str, str, str | None, str]]:
    """Yield ``(identifier, name, initializer, description)`` per enumerator."""
    for value in memberdef.iterchildren("enumvalue"):
        identifier = required_attr(value, "id")
        name = escape(required_child_text(value, "name", identifier=identifier))
        initializer = transcoder.render(value.find("initializer")).strip() or None
        description = transcoder.render(
            required_child(value, "briefdescription", identifier=identifier)
        ) + transcoder.render(value.find("detaileddescription"))
        yield identifier, name, initializer, description


__all__ = [
    "DEFINITION_RENDERERS",
    "render_enum_values",
    "render_member_args",
    "render_member_definition",
    "render_scope_name",
    "render_template_params",
]
