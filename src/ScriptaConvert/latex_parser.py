from __future__ import annotations

import logging
import textwrap
from typing import List, Optional, Tuple

from .environments import (
    ARGUMENT_PROPERTIES,
    FIGURE_ENVIRONMENTS,
    LIST_KINDS,
    EnvKind,
    environment_kind,
)
from .errors import (
    EmptyParagraph,
    EnvironmentEndExpected,
    EnvironmentInItem,
    ParseError,
    ScanFailure,
    UnexpectedEnvironmentEnd,
)
from .latex_inline import parse_inlines
from .model import (
    BlankLine,
    Block,
    Document,
    ListBlock,
    ListItem,
    OrdinaryBlock,
    Paragraph,
    Properties,
    Section,
    VerbatimBlock,
)
from .properties import extract_caption, extract_labels, parse_properties, reduce_table_body
from .scanner import ESCAPE, Scanner
from .structure import nest_sections

SECTION_LEVELS = {"section": 1, "subsection": 2, "subsubsection": 3}
BLOCK_COMMANDS = {"begin", "end", *SECTION_LEVELS}
RENDER_HINT = {"render": "latex"}


def parse_latex(text: str) -> Document:
    """Parse a LaTeX-subset document into a Document.

    Raises ``ParseError`` unless the whole input is accounted for.
    """
    scanner = Scanner(text)
    try:
        with scanner.context("document"):
            blocks = _parse_blocks(scanner, env_name=None)
    except ScanFailure as exc:
        raise ParseError(scanner.dead_ends) from exc
    return Document(blocks=nest_sections(blocks))


def _parse_blocks(scanner: Scanner, env_name: Optional[str]) -> List[Block]:
    """Parse blocks until end of input, or until ``\\end{env_name}``."""
    end_tag = _end_tag(env_name) if env_name else None
    blocks: List[Block] = []
    while True:
        if end_tag and scanner.at(end_tag):
            break
        if scanner.at_end():
            if env_name:
                scanner.fail(EnvironmentEndExpected(env_name))
            break
        blank = scanner.attempt(_blank_line)
        if blank is not None:
            blocks.append(blank)
            continue
        scanner.skip_horizontal_space()
        if end_tag and scanner.at(end_tag):
            break
        with scanner.context("block"):
            blocks.append(_block(scanner, end_tag))
    return blocks


def _blank_line(scanner: Scanner) -> BlankLine:
    start = scanner.pos
    scanner.skip_horizontal_space()
    if scanner.at_end() and scanner.pos > start:
        return BlankLine()
    scanner.symbol("\n")
    return BlankLine()


def _block(scanner: Scanner, end_tag: Optional[str]) -> Block:
    command = scanner.command_ahead()
    if command in SECTION_LEVELS:
        return _section(scanner, command)
    if command == "begin":
        return _environment(scanner)
    if command == "end":
        _unexpected_end(scanner)
    if scanner.at(ESCAPE + "["):
        return _display_math(scanner, ESCAPE + "[", ESCAPE + "]")
    if scanner.at("$$"):
        return _display_math(scanner, "$$", "$$")
    return _paragraph(scanner, end_tag)


def _section(scanner: Scanner, command: str) -> Section:
    with scanner.context("section"):
        scanner.keyword(command)
        if scanner.peek() == "*":
            scanner.symbol("*")
        scanner.skip_horizontal_space()
        title = " ".join(scanner.chomp_braced().split())
        scanner.skip_horizontal_space()
        if scanner.at_keyword("label"):
            scanner.keyword("label")
            scanner.chomp_braced()
        _finish_line(scanner)
    return Section(level=SECTION_LEVELS[command], title=title)


def _unexpected_end(scanner: Scanner) -> None:
    start = scanner.pos
    scanner.keyword("end")
    name = scanner.chomp_braced().strip()
    scanner.pos = start
    scanner.fail(UnexpectedEnvironmentEnd(name))


def _environment(scanner: Scanner) -> Block:
    scanner.keyword("begin")
    name = scanner.chomp_braced().strip()
    with scanner.context(f"environment: {name}"):
        options = None
        if scanner.peek() == "[":
            options = scanner.chomp_bracketed()
        properties = parse_properties(options or "")
        if name in ARGUMENT_PROPERTIES and scanner.peek() == "{":
            properties[ARGUMENT_PROPERTIES[name]] = scanner.chomp_braced().strip()
        kind = environment_kind(name)
        logging.debug("Environment %s parsed as %s", name, kind.value)
        return _STRATEGIES[kind](scanner, name, options, properties)


def _list(scanner: Scanner, name: str, options: Optional[str], properties: Properties) -> ListBlock:
    end_tag = _end_tag(name)
    items: List[ListItem] = []
    while True:
        scanner.skip_space()
        if scanner.at(end_tag):
            break
        if scanner.at_end():
            scanner.fail(EnvironmentEndExpected(name))
        items.extend(_item(scanner, end_tag))
    _close_environment(scanner, name)
    return ListBlock(kind=LIST_KINDS[name], items=tuple(items), properties=properties)


def _item(scanner: Scanner, end_tag: str) -> List[ListItem]:
    """One item, followed by the items of any list nested inside it."""
    with scanner.context("item"):
        scanner.keyword("item")
        label = None
        if scanner.peek() == "[":
            label = tuple(parse_inlines(scanner.chomp_bracketed().strip()))
        body, nested = _item_body(scanner, end_tag)
    text = " ".join(line.strip() for line in body.splitlines() if line.strip())
    return [ListItem(content=tuple(parse_inlines(text)), label=label), *nested]


def _item_body(scanner: Scanner, end_tag: str) -> Tuple[str, List[ListItem]]:
    """Raw text up to the next \\item or the list's end tag.

    Nested lists are parsed on the way and their items returned separately;
    any other environment inside an item is an error.
    """
    parts: List[str] = []
    nested: List[ListItem] = []
    start = scanner.pos
    while not scanner.at_end():
        if scanner.at_keyword("item") or scanner.at(end_tag):
            break
        if scanner.at_keyword("begin"):
            parts.append(scanner.source[start : scanner.pos])
            nested.extend(_nested_list(scanner))
            start = scanner.pos
            continue
        if scanner.at_keyword("end"):
            _unexpected_end(scanner)
        scanner.pos += 2 if scanner.peek() == ESCAPE else 1
    parts.append(scanner.source[start : scanner.pos])
    return "".join(parts), nested


def _nested_list(scanner: Scanner) -> List[ListItem]:
    start = scanner.pos
    scanner.keyword("begin")
    name = scanner.chomp_braced().strip()
    scanner.pos = start
    if name not in LIST_KINDS:
        scanner.fail(EnvironmentInItem(name))
    return list(_environment(scanner).items)


def _verbatim(scanner: Scanner, name: str, options: Optional[str], properties: Properties) -> VerbatimBlock:
    body = _raw_body(scanner, name)
    content, labels = extract_labels(body)
    return VerbatimBlock(env_name=name, content=_trim_raw(content), properties={**properties, **labels})


def _tikz(scanner: Scanner, name: str, options: Optional[str], properties: Properties) -> VerbatimBlock:
    body = _raw_body(scanner, name)
    body, labels = extract_labels(body)
    caption = None
    if name in FIGURE_ENVIRONMENTS:
        body, caption = extract_caption(body)
    if caption is not None:
        properties = {**properties, "caption": caption}
    opening = f"\\begin{{{name}}}" + (f"[{options}]" if options is not None else "")
    parts = [opening, _trim_raw(body), _end_tag(name)]
    content = "\n".join(part for part in parts if part)
    return VerbatimBlock(env_name=name, content=content, properties={**properties, **labels, **RENDER_HINT})


def _table(scanner: Scanner, name: str, options: Optional[str], properties: Properties) -> VerbatimBlock:
    body = _raw_body(scanner, name)
    rows, extra = reduce_table_body(body)
    return VerbatimBlock(env_name=name, content=rows, properties={**properties, **extra})


def _ordinary(scanner: Scanner, name: str, options: Optional[str], properties: Properties) -> OrdinaryBlock:
    _finish_line(scanner)
    label = scanner.attempt(_leading_label)
    if label is not None:
        properties = {**properties, "label": label}
    content = _parse_blocks(scanner, name)
    _close_environment(scanner, name)
    return OrdinaryBlock(env_name=name, content=nest_sections(content), properties=properties)


def _leading_label(scanner: Scanner) -> str:
    scanner.skip_space()
    scanner.keyword("label")
    label = scanner.chomp_braced().strip()
    _finish_line(scanner)
    return label


_STRATEGIES = {
    EnvKind.LIST: _list,
    EnvKind.VERBATIM: _verbatim,
    EnvKind.TIKZ: _tikz,
    EnvKind.TABLE: _table,
    EnvKind.ORDINARY: _ordinary,
}


def _display_math(scanner: Scanner, opening: str, closing: str) -> VerbatimBlock:
    with scanner.context("display math"):
        scanner.symbol(opening)
        body = scanner.chomp_until(closing, EnvironmentEndExpected(closing))
        scanner.symbol(closing)
        _finish_line(scanner)
    content, labels = extract_labels(body)
    return VerbatimBlock(env_name="math", content=_trim_raw(content), properties=labels)


def _paragraph(scanner: Scanner, end_tag: Optional[str]) -> Paragraph:
    with scanner.context("paragraph"):
        lines = [scanner.chomp_line(stop=end_tag).strip()]
        while _continues_paragraph(scanner):
            lines.append(scanner.chomp_line(stop=end_tag).strip())
        text = " ".join(line for line in lines if line)
        if not text:
            scanner.fail(EmptyParagraph())
    return Paragraph(inlines=tuple(parse_inlines(text)))


def _continues_paragraph(scanner: Scanner) -> bool:
    """Peek at the next line: does it extend the current paragraph?

    Only looks ahead; the position is always restored so the block
    dispatcher still sees a command that starts the next block.
    """
    saved = scanner.pos
    try:
        scanner.skip_horizontal_space()
        if scanner.at_line_end():
            return False
        if scanner.peek() == ESCAPE:
            return scanner.command_ahead() not in BLOCK_COMMANDS and not scanner.at(ESCAPE + "[")
        return not scanner.at("$$")
    finally:
        scanner.pos = saved


def _raw_body(scanner: Scanner, name: str) -> str:
    body = scanner.chomp_until(_end_tag(name), EnvironmentEndExpected(name))
    _close_environment(scanner, name)
    return body


def _close_environment(scanner: Scanner, name: str) -> None:
    if not scanner.at(_end_tag(name)):
        scanner.fail(EnvironmentEndExpected(name))
    scanner.pos += len(_end_tag(name))
    _finish_line(scanner)


def _finish_line(scanner: Scanner) -> None:
    """Drop trailing spaces and the line break; anything else is left for the next block."""
    scanner.skip_horizontal_space()
    if scanner.peek() == "\n":
        scanner.symbol("\n")


def _trim_raw(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return textwrap.dedent("\n".join(lines)).rstrip()


def _end_tag(name: str) -> str:
    return f"\\end{{{name}}}"
