from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from markdown_it import MarkdownIt
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.texmath import texmath_plugin

from .latex_inline import merge_text
from .model import (
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
from .structure import nest_sections

MATH_INLINE_TYPES = {"math_inline", "math_single", "math_inline_double"}
WRAPPER_TOKENS = {"strong_open": "strong", "em_open": "em", "s_open": "s"}


def _markdown() -> MarkdownIt:
    return MarkdownIt("commonmark").use(texmath_plugin).use(deflist_plugin).enable(["table", "strikethrough"])


def parse_markdown(text: str) -> Document:
    tokens = _markdown().parse(text)
    blocks, _ = _parse_blocks(tokens, 0, stop_types=set())
    return Document(blocks=nest_sections(blocks))


def parse_markdown_inlines(text: str) -> List[InlineElement]:
    tokens = _markdown().parseInline(text)
    inlines = _parse_inline(tokens[0].children or []) if tokens else []
    return inlines or [Text(text)]


def _parse_blocks(tokens, index: int, stop_types: set[str]) -> tuple[list, int]:
    blocks: List[Block] = []
    i = index
    while i < len(tokens):
        tok = tokens[i]
        if tok.type in stop_types:
            break
        if tok.type == "heading_open":
            level = min(int(tok.tag[1]), 3)
            inline = tokens[i + 1]
            blocks.append(Section(level=level, title=inline.content.strip()))
            i += 3
        elif tok.type == "paragraph_open":
            inline = tokens[i + 1]
            display_latex = _extract_display_math_inline(inline.content or "")
            if display_latex is not None:
                blocks.append(VerbatimBlock(env_name="math", content=display_latex))
            else:
                blocks.append(Paragraph(inlines=tuple(_parse_inline(inline.children or []))))
            i += 3
        elif tok.type in ("bullet_list_open", "ordered_list_open"):
            list_block, i = _parse_list(tokens, i)
            blocks.append(list_block)
        elif tok.type == "dl_open":
            list_block, i = _parse_definition_list(tokens, i)
            blocks.append(list_block)
        elif tok.type == "blockquote_open":
            inner, i = _parse_blocks(tokens, i + 1, stop_types={"blockquote_close"})
            blocks.append(OrdinaryBlock(env_name="quotation", content=nest_sections(inner)))
            i += 1  # skip blockquote_close
        elif tok.type == "fence":
            language = tok.info.strip()
            properties = {"lang": language} if language else {}
            blocks.append(VerbatimBlock(env_name="code", content=tok.content.rstrip("\n"), properties=properties))
            i += 1
        elif tok.type == "code_block":
            blocks.append(VerbatimBlock(env_name="code", content=tok.content.rstrip("\n")))
            i += 1
        elif tok.type == "math_block":
            blocks.append(VerbatimBlock(env_name="math", content=tok.content.strip()))
            i += 1
        elif tok.type == "math_block_eqno":
            properties = {"label": tok.info} if tok.info else {}
            blocks.append(VerbatimBlock(env_name="math", content=tok.content.strip(), properties=properties))
            i += 1
        elif tok.type == "html_block":
            blocks.append(VerbatimBlock(env_name="html", content=tok.content.rstrip("\n")))
            i += 1
        elif tok.type == "table_open":
            table_block, i = _parse_table(tokens, i)
            blocks.append(table_block)
        else:
            logging.debug("Skipping markdown token %s", tok.type)
            i += 1
    return blocks, i


def _parse_list(tokens, index: int) -> tuple[ListBlock, int]:
    ordered = tokens[index].type == "ordered_list_open"
    close_type = "ordered_list_close" if ordered else "bullet_list_close"
    properties = {}
    start = tokens[index].attrGet("start")
    if ordered and start is not None and int(start) != 1:
        properties["start"] = str(start)
    items: list[ListItem] = []
    i = index + 1
    while i < len(tokens) and tokens[i].type != close_type:
        if tokens[i].type == "list_item_open":
            item_blocks, i = _parse_blocks(tokens, i + 1, stop_types={"list_item_close"})
            items.extend(_items_from_blocks(item_blocks))
            i += 1  # skip list_item_close
        else:
            i += 1
    kind = ListKind.ENUMERATE if ordered else ListKind.ITEMIZE
    return ListBlock(kind=kind, items=tuple(items), properties=properties), i + 1


def _items_from_blocks(blocks: Sequence[Block]) -> list[ListItem]:
    """One item from the paragraphs; items of nested lists follow it."""
    inline: list[InlineElement] = []
    nested: list[ListItem] = []
    for block in blocks:
        if isinstance(block, Paragraph):
            if inline:
                inline.append(Text(" "))
            inline.extend(block.inlines)
        elif isinstance(block, ListBlock):
            nested.extend(block.items)
    return [ListItem(content=tuple(merge_text(inline))), *nested]


def _parse_definition_list(tokens, index: int) -> tuple[ListBlock, int]:
    items: list[ListItem] = []
    label: tuple[InlineElement, ...] = ()
    i = index + 1
    while i < len(tokens) and tokens[i].type != "dl_close":
        tok = tokens[i]
        if tok.type == "dt_open":
            label = tuple(_parse_inline(tokens[i + 1].children or []))
            i += 3
        elif tok.type == "dd_open":
            dd_blocks, i = _parse_blocks(tokens, i + 1, stop_types={"dd_close"})
            content = _items_from_blocks(dd_blocks)[0].content
            items.append(ListItem(content=content, label=label))
            i += 1  # skip dd_close
        else:
            i += 1
    return ListBlock(kind=ListKind.DESCRIPTION, items=tuple(items)), i + 1


def _parse_table(tokens, index: int) -> tuple[VerbatimBlock, int]:
    rows: list[list[str]] = []
    i = index + 1
    while i < len(tokens) and tokens[i].type != "table_close":
        tok = tokens[i]
        if tok.type == "tr_open":
            row: list[str] = []
            i += 1
            while tokens[i].type != "tr_close":
                if tokens[i].type in {"td_open", "th_open"}:
                    inline = tokens[i + 1]
                    row.append(inline.content.strip())
                    i += 3  # skip cell open, inline, cell close
                else:
                    i += 1
            rows.append(row)
        i += 1
    columns = max((len(row) for row in rows), default=0)
    properties = {"format": "l" * columns} if columns else {}
    content = "\n".join(" & ".join(row) for row in rows)
    return VerbatimBlock(env_name="table", content=content, properties=properties), i + 1


def _parse_inline(children: Iterable) -> List[InlineElement]:
    """Turn markdown-it inline tokens into nested Fun/VFun/Text nodes."""
    stack: list[tuple[str, list[InlineElement]]] = [("", [])]
    for tok in children:
        current = stack[-1][1]
        if tok.type == "text":
            if tok.content:
                current.append(Text(tok.content))
        elif tok.type == "softbreak":
            current.append(Text(" "))
        elif tok.type == "hardbreak":
            current.append(Fun("newline"))
        elif tok.type in WRAPPER_TOKENS:
            stack.append((WRAPPER_TOKENS[tok.type], []))
        elif tok.type == "link_open":
            stack.append(("link:" + (tok.attrGet("href") or ""), []))
        elif tok.type in {"strong_close", "em_close", "s_close", "link_close"}:
            if len(stack) > 1:
                name, args = stack.pop()
                stack[-1][1].append(_close_wrapper(name, args))
        elif tok.type == "code_inline":
            current.append(VFun("code", tok.content))
        elif tok.type in MATH_INLINE_TYPES:
            current.append(VFun("math", tok.content))
        elif tok.type == "image":
            current.append(Fun("image", (Text(tok.attrGet("src") or ""),)))
        elif tok.type == "html_inline":
            current.append(Text(tok.content))
        else:
            logging.debug("Skipping inline token %s", tok.type)
    while len(stack) > 1:
        name, args = stack.pop()
        stack[-1][1].append(_close_wrapper(name, args))
    return merge_text(stack[0][1])


def _close_wrapper(name: str, args: list[InlineElement]) -> Fun:
    if name.startswith("link:"):
        href = name[len("link:") :]
        args = [*args, Text(" " + href)] if href else args
        return Fun("link", tuple(merge_text(args)))
    return Fun(name, tuple(merge_text(args)))


def _extract_display_math_inline(text: str) -> str | None:
    stripped = text.strip()
    if not (len(stripped) > 4 and stripped.startswith("$$") and stripped.endswith("$$")):
        return None
    inner = stripped[2:-2].strip()
    return inner or None
