from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .config import RenderOptions
from .latex_inline import parse_inlines
from .model import (
    FLAG,
    BlankLine,
    Block,
    Document,
    Fun,
    InlineElement,
    ListBlock,
    ListItem,
    ListKind,
    OrdinaryBlock,
    Paragraph,
    Section,
    Text,
    VerbatimBlock,
    VFun,
)

InlineRule = Callable[[str], str]


def _element(tag: str) -> InlineRule:
    return lambda body: f"[{tag} {body}]"


def _code(body: str) -> str:
    return f"`{body}`"


def _line_break(body: str) -> str:
    return "\n"


def _drop(body: str) -> str:
    return ""


# Commands from both dialects; anything missing renders its children only.
INLINE_RULES: Dict[str, InlineRule] = {
    "textbf": _element("b"),
    "strong": _element("b"),
    "bf": _element("b"),
    "textit": _element("i"),
    "emph": _element("i"),
    "em": _element("i"),
    "it": _element("i"),
    "underline": _element("u"),
    "sout": _element("strike"),
    "s": _element("strike"),
    "texttt": _code,
    "footnote": _element("footnote"),
    "cite": _element("cite"),
    "ref": _element("ref"),
    "eqref": _element("eqref"),
    "url": _element("link"),
    "href": _element("link"),
    "link": _element("link"),
    "includegraphics": _element("image"),
    "image": _element("image"),
    "\\\\": _line_break,
    "newline": _line_break,
    "linebreak": _line_break,
    "label": _drop,
}

VERBATIM_RULES: Dict[str, Callable[[str], str]] = {
    "math": lambda content: f"${content}$",
    "code": _code,
}


def render_document(doc: Document, options: Optional[RenderOptions] = None) -> str:
    options = options or RenderOptions()
    text = _render_blocks(doc.blocks, options).rstrip("\n")
    if options.trailing_newline:
        text += "\n"
    return text


def _render_blocks(blocks: Iterable[Block], options: RenderOptions) -> str:
    rendered = [_dispatch_block(block, options) for block in blocks if not isinstance(block, BlankLine)]
    return "\n\n".join(part for part in rendered if part)


def _dispatch_block(block: Block, options: RenderOptions) -> str:
    if isinstance(block, Section):
        return _render_heading(block, options)
    if isinstance(block, Paragraph):
        return render_inlines(block.inlines)
    if isinstance(block, ListBlock):
        return _render_list(block, options)
    if isinstance(block, VerbatimBlock):
        return _render_verbatim(block, options)
    if isinstance(block, OrdinaryBlock):
        return _render_ordinary(block, options)
    raise TypeError(f"Cannot render block {type(block).__name__}")


def _render_heading(section: Section, options: RenderOptions) -> str:
    heading = "#" * section.level + " " + render_inlines(parse_inlines(section.title))
    body = _render_blocks(section.content, options)
    return f"{heading}\n\n{body}" if body else heading


def _render_list(block: ListBlock, options: RenderOptions) -> str:
    lines = []
    for number, item in enumerate(block.items, start=1):
        lines.append(_list_prefix(block.kind, number, options) + _render_item(block.kind, item))
    return "\n".join(lines)


def _list_prefix(kind: ListKind, number: int, options: RenderOptions) -> str:
    if kind is ListKind.ENUMERATE:
        return f"{number}. " if options.ordered_marker == "number" else ". "
    return "- "


def _render_item(kind: ListKind, item: ListItem) -> str:
    content = render_inlines(item.content)
    if kind is ListKind.DESCRIPTION and item.label:
        label = f"[b {render_inlines(item.label)}]"
        return f"{label} {content}" if content else label
    return content


def _render_verbatim(block: VerbatimBlock, options: RenderOptions) -> str:
    header = _block_header(block.env_name, block.properties)
    if not block.content:
        return header
    return header + "\n" + _indent(block.content, options.indent)


def _render_ordinary(block: OrdinaryBlock, options: RenderOptions) -> str:
    header = _block_header(block.env_name, block.properties)
    body = _render_blocks(block.content, options)
    if not body:
        return header
    if options.indent_ordinary:
        body = _indent(body, options.indent)
    return header + "\n" + body


def _block_header(name: str, properties: Mapping[str, str]) -> str:
    parts = ["|", name]
    for key, value in properties.items():
        parts.append(key if value == FLAG else f"{key}:{value}")
    return " ".join(parts)


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line.strip() else "" for line in text.split("\n"))


def render_inlines(inlines: Iterable[InlineElement]) -> str:
    parts: List[str] = []
    for inline in inlines:
        if isinstance(inline, Text):
            parts.append(inline.text)
        elif isinstance(inline, VFun):
            rule = VERBATIM_RULES.get(inline.name)
            parts.append(rule(inline.content) if rule else inline.content)
        elif isinstance(inline, Fun):
            body = render_inlines(inline.args)
            rule = INLINE_RULES.get(inline.name)
            parts.append(rule(body) if rule else body)
    return "".join(parts)
