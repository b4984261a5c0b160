from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List, NoReturn, Optional, Tuple, TypeVar

from .errors import DeadEnd, Problem, ScanFailure, SymbolExpected

T = TypeVar("T")

ESCAPE = "\\"
HORIZONTAL_SPACE = " \t"


class Scanner:
    """Cursor over source text with the primitives the parsers are built from.

    Primitives either consume input and return, or raise ``ScanFailure``.
    Only ``attempt`` restores the position after a failure; everything else
    leaves the cursor where the failure happened, so callers that want to try
    an alternative must go through ``attempt`` or check with ``at``/``peek``.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self._contexts: List[str] = []
        self._furthest = -1
        self.dead_ends: List[DeadEnd] = []

    # lookahead

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return ""

    def at(self, literal: str) -> bool:
        return self.source.startswith(literal, self.pos)

    def at_keyword(self, name: str) -> bool:
        """True if ``\\name`` starts here and is not the prefix of a longer command."""
        literal = ESCAPE + name
        if not self.at(literal):
            return False
        return not self.peek(len(literal)).isalpha()

    def at_line_end(self) -> bool:
        return self.at_end() or self.peek() == "\n"

    def command_ahead(self) -> str:
        """Name of the ``\\command`` starting here, without consuming it."""
        if self.peek() != ESCAPE:
            return ""
        end = self.pos + 1
        while end < len(self.source) and self.source[end].isalpha():
            end += 1
        return self.source[self.pos + 1 : end]

    # consuming primitives

    def symbol(self, literal: str) -> str:
        if not self.at(literal):
            self.fail(SymbolExpected(literal))
        self.pos += len(literal)
        return literal

    def keyword(self, name: str) -> str:
        if not self.at_keyword(name):
            self.fail(SymbolExpected(ESCAPE + name))
        self.pos += len(name) + 1
        return name

    def chomp_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while self.pos < len(self.source) and predicate(self.source[self.pos]):
            self.pos += 1
        return self.source[start : self.pos]

    def chomp_until(self, literal: str, problem: Problem) -> str:
        """Consume raw text up to (not including) ``literal``."""
        index = self.source.find(literal, self.pos)
        if index == -1:
            self.fail(problem)
        text = self.source[self.pos : index]
        self.pos = index
        return text

    def chomp_line(self, stop: Optional[str] = None) -> str:
        """Consume the rest of the line and its terminator; return the line text.

        With ``stop`` the line is cut before the first occurrence of that
        literal, which is left unconsumed.
        """
        end = self.source.find("\n", self.pos)
        if end == -1:
            end = len(self.source)
        if stop is not None:
            cut = self.source.find(stop, self.pos, end)
            if cut != -1:
                text = self.source[self.pos : cut]
                self.pos = cut
                return text
        text = self.source[self.pos : end]
        self.pos = min(end + 1, len(self.source))
        return text

    def skip_horizontal_space(self) -> str:
        return self.chomp_while(lambda c: c in HORIZONTAL_SPACE)

    def skip_space(self) -> str:
        return self.chomp_while(str.isspace)

    def chomp_braced(self) -> str:
        """Consume ``{...}`` with nested braces and return the inner text.

        Depth goes up on ``{`` and down on ``}``; an escaped character is
        skipped so ``\\{`` and ``\\}`` do not count.
        """
        self.symbol("{")
        start = self.pos
        depth = 0
        while self.pos < len(self.source):
            char = self.source[self.pos]
            if char == ESCAPE:
                self.pos += 2
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    inner = self.source[start : self.pos]
                    self.pos += 1
                    return inner
                depth -= 1
            self.pos += 1
        self.pos = len(self.source)
        self.fail(SymbolExpected("}"))

    def chomp_bracketed(self) -> str:
        """Consume ``[...]`` up to the first ``]``; brackets do not nest."""
        self.symbol("[")
        inner = self.chomp_until("]", SymbolExpected("]"))
        self.pos += 1
        return inner

    # control

    def attempt(self, parser: Callable[..., T], *args) -> Optional[T]:
        saved = self.pos
        try:
            return parser(self, *args)
        except ScanFailure:
            self.pos = saved
            return None

    @contextmanager
    def context(self, label: str) -> Iterator[None]:
        self._contexts.append(label)
        try:
            yield
        finally:
            self._contexts.pop()

    def fail(self, problem: Problem) -> NoReturn:
        if self.pos > self._furthest:
            self._furthest = self.pos
            self.dead_ends = []
        if self.pos == self._furthest:
            line, column = self.location()
            self.dead_ends.append(DeadEnd(line, column, problem, tuple(self._contexts)))
        raise ScanFailure(problem, self.pos)

    def location(self, pos: Optional[int] = None) -> Tuple[int, int]:
        if pos is None:
            pos = self.pos
        pos = min(pos, len(self.source))
        line = self.source.count("\n", 0, pos) + 1
        column = pos - (self.source.rfind("\n", 0, pos) + 1) + 1
        return line, column
