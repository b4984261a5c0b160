from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Problem:
    """Base class for the reasons a parse can stop."""

    def describe(self) -> str:
        return self.__class__.__name__


@dataclass(frozen=True)
class SymbolExpected(Problem):
    token: str

    def describe(self) -> str:
        return f"expected {self.token!r}"


@dataclass(frozen=True)
class EnvironmentEndExpected(Problem):
    name: str

    def describe(self) -> str:
        return f"expected \\end{{{self.name}}}"


@dataclass(frozen=True)
class BlockContentExpected(Problem):
    def describe(self) -> str:
        return "expected a block"


@dataclass(frozen=True)
class InlineContentExpected(Problem):
    def describe(self) -> str:
        return "expected inline content"


@dataclass(frozen=True)
class EmptyParagraph(Problem):
    def describe(self) -> str:
        return "paragraph has no content"


@dataclass(frozen=True)
class UnexpectedEnvironmentEnd(Problem):
    name: str

    def describe(self) -> str:
        return f"\\end{{{self.name}}} does not close an open environment"


@dataclass(frozen=True)
class EnvironmentInItem(Problem):
    name: str

    def describe(self) -> str:
        return f"\\begin{{{self.name}}} cannot appear inside a list item"


@dataclass(frozen=True)
class Custom(Problem):
    message: str

    def describe(self) -> str:
        return self.message


@dataclass(frozen=True)
class DeadEnd:
    line: int
    column: int
    problem: Problem
    context_path: Tuple[str, ...] = ()

    @property
    def message(self) -> str:
        return self.problem.describe()

    def __str__(self) -> str:
        where = f"line {self.line}, column {self.column}"
        if self.context_path:
            where += " (" + " > ".join(self.context_path) + ")"
        return f"{where}: {self.message}"


class ScanFailure(Exception):
    """Raised by scanner primitives; caught at alternative boundaries."""

    def __init__(self, problem: Problem, pos: int):
        super().__init__(problem.describe())
        self.problem = problem
        self.pos = pos


class ParseError(Exception):
    """The whole document could not be parsed."""

    def __init__(self, dead_ends: List[DeadEnd]):
        self.dead_ends = list(dead_ends)
        summary = "; ".join(str(dead_end) for dead_end in self.dead_ends) or "parse failed"
        super().__init__(summary)
