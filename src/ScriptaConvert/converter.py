from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from . import latex_inline, latex_parser, markdown_parser, renderer_scripta
from .config import RenderOptions
from .errors import ParseError
from .model import Document, InlineElement

DIALECTS: Dict[str, Callable[[str], Document]] = {
    "latex": latex_parser.parse_latex,
    "markdown": markdown_parser.parse_markdown,
}

INLINE_DIALECTS: Dict[str, Callable[[str], List[InlineElement]]] = {
    "latex": latex_inline.parse_inlines,
    "markdown": markdown_parser.parse_markdown_inlines,
}


def parse_document(text: str, dialect: str = "latex") -> Document:
    """Parse ``text`` in the given source dialect; raises ParseError on failure."""
    parser = _lookup(DIALECTS, dialect)
    logging.debug("Parsing %d chars as %s", len(text), dialect)
    return parser(text)


def parse_inlines(text: str, dialect: str = "latex") -> List[InlineElement]:
    return _lookup(INLINE_DIALECTS, dialect)(text)


def render(document: Document, options: Optional[RenderOptions] = None) -> str:
    return renderer_scripta.render_document(document, options)


def convert(text: str, dialect: str = "latex", options: Optional[RenderOptions] = None) -> str:
    """Convert source markup to Scripta.

    A document that does not parse is returned unchanged.
    """
    try:
        document = parse_document(text, dialect)
    except ParseError as exc:
        logging.warning("Could not parse %s input, returning it unchanged: %s", dialect, exc)
        return text
    return render(document, options)


def _lookup(table: Dict[str, Callable], dialect: str) -> Callable:
    try:
        return table[dialect]
    except KeyError:
        raise ValueError(f"Unknown dialect {dialect!r}; expected one of {sorted(table)}") from None
