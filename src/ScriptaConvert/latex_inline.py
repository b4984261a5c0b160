from __future__ import annotations

import logging
from typing import List, Tuple

from .errors import InlineContentExpected, ScanFailure, SymbolExpected
from .model import Fun, InlineElement, Text, VFun
from .scanner import ESCAPE, Scanner

SPECIAL_CHARS = {ESCAPE, "$", "{", "}"}
ESCAPED_LITERALS = set("$%&#_{}")
ESCAPED_SPACES = set(",;: ")


def parse_inlines(text: str) -> List[InlineElement]:
    """Parse a run of LaTeX text into inline nodes.

    Never fails: if the run cannot be parsed, or holds nothing, it comes
    back as a single ``Text`` holding the original string.
    """
    scanner = Scanner(text)
    try:
        return _inlines(scanner) or [Text(text)]
    except ScanFailure as exc:
        logging.debug("Inline fallback at %d:%d: %s", *scanner.location(exc.pos), exc)
        return [Text(text)]


def _inlines(scanner: Scanner) -> List[InlineElement]:
    result: List[InlineElement] = []
    while not scanner.at_end():
        result.append(_inline(scanner))
    return merge_text(result)


def _inline(scanner: Scanner) -> InlineElement:
    char = scanner.peek()
    if char == ESCAPE:
        return _command(scanner)
    if char == "$":
        return _math(scanner)
    if char == "{":
        return Fun("group", _argument(scanner))
    if char == "}":
        scanner.fail(InlineContentExpected())
    return Text(scanner.chomp_while(lambda c: c not in SPECIAL_CHARS))


def _command(scanner: Scanner) -> InlineElement:
    scanner.symbol(ESCAPE)
    name = scanner.chomp_while(str.isalpha)
    if not name:
        return _symbol_command(scanner)
    if name == "verb":
        delimiter = scanner.peek()
        if not delimiter:
            scanner.fail(SymbolExpected("delimiter"))
        scanner.symbol(delimiter)
        content = scanner.chomp_until(delimiter, SymbolExpected(delimiter))
        scanner.symbol(delimiter)
        return VFun("code", content)
    if scanner.peek() == "[":
        scanner.attempt(_optional_argument)
    if scanner.peek() != "{":
        return Fun(name)
    return Fun(name, _argument(scanner))


def _optional_argument(scanner: Scanner) -> str:
    option = scanner.chomp_bracketed()
    if scanner.peek() != "{":
        scanner.fail(SymbolExpected("{"))
    return option


def _symbol_command(scanner: Scanner) -> InlineElement:
    char = scanner.peek()
    if char == ESCAPE:
        scanner.symbol(ESCAPE)
        return Fun(ESCAPE * 2)
    if char == "(":
        scanner.symbol("(")
        content = scanner.chomp_until(ESCAPE + ")", SymbolExpected(ESCAPE + ")"))
        scanner.symbol(ESCAPE + ")")
        return VFun("math", content)
    if char in ESCAPED_LITERALS:
        return Text(scanner.symbol(char))
    if char in ESCAPED_SPACES:
        scanner.symbol(char)
        return Text(" ")
    scanner.fail(InlineContentExpected())


def _math(scanner: Scanner) -> InlineElement:
    delimiter = "$$" if scanner.at("$$") else "$"
    scanner.symbol(delimiter)
    content = scanner.chomp_until(delimiter, SymbolExpected(delimiter))
    scanner.symbol(delimiter)
    return VFun("math", content)


def _argument(scanner: Scanner) -> Tuple[InlineElement, ...]:
    # Failures inside an argument abort the whole run, not just the argument.
    offset = scanner.pos + 1
    text = scanner.chomp_braced()
    try:
        return tuple(_inlines(Scanner(text)))
    except ScanFailure as exc:
        raise ScanFailure(exc.problem, offset + exc.pos) from exc


def merge_text(inlines: List[InlineElement]) -> List[InlineElement]:
    merged: List[InlineElement] = []
    for inline in inlines:
        if isinstance(inline, Text) and not inline.text:
            continue
        if isinstance(inline, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(merged[-1].text + inline.text)
        else:
            merged.append(inline)
    return merged
