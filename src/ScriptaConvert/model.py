from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Tuple

# Value stored for a property given without "=" (e.g. the "h" in "[h]").
FLAG = ""

Properties = Dict[str, str]


class PropertyMap(Mapping[str, str]):
    """Read-only block properties; keeps the order they were given in."""

    def __init__(self, items: Optional[Mapping[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __repr__(self) -> str:
        return f"PropertyMap({self._items!r})"


def _freeze_properties(node) -> None:
    if not isinstance(node.properties, PropertyMap):
        object.__setattr__(node, "properties", PropertyMap(node.properties))


@dataclass(frozen=True)
class Block:
    """Base class for block-level nodes."""


@dataclass(frozen=True)
class Document:
    blocks: Tuple[Block, ...]


@dataclass(frozen=True)
class Section(Block):
    level: int
    title: str
    content: Tuple[Block, ...] = ()


@dataclass(frozen=True)
class Paragraph(Block):
    inlines: Tuple["InlineElement", ...]


class ListKind(Enum):
    ITEMIZE = "itemize"
    ENUMERATE = "enumerate"
    DESCRIPTION = "description"


@dataclass(frozen=True)
class ListItem:
    content: Tuple["InlineElement", ...]
    label: Optional[Tuple["InlineElement", ...]] = None


@dataclass(frozen=True)
class ListBlock(Block):
    kind: ListKind
    items: Tuple[ListItem, ...]
    properties: Mapping[str, str] = field(default_factory=PropertyMap)

    def __post_init__(self) -> None:
        _freeze_properties(self)


@dataclass(frozen=True)
class VerbatimBlock(Block):
    """Named block whose body is kept as raw text."""

    env_name: str
    content: str
    properties: Mapping[str, str] = field(default_factory=PropertyMap)

    def __post_init__(self) -> None:
        _freeze_properties(self)


@dataclass(frozen=True)
class OrdinaryBlock(Block):
    """Named block whose body is parsed into blocks."""

    env_name: str
    content: Tuple[Block, ...]
    properties: Mapping[str, str] = field(default_factory=PropertyMap)

    def __post_init__(self) -> None:
        _freeze_properties(self)


@dataclass(frozen=True)
class BlankLine(Block):
    """Separator kept while parsing, dropped when rendering."""


@dataclass(frozen=True)
class InlineElement:
    """Base class for inline nodes."""


@dataclass(frozen=True)
class Text(InlineElement):
    text: str


@dataclass(frozen=True)
class Fun(InlineElement):
    name: str
    args: Tuple[InlineElement, ...] = ()


@dataclass(frozen=True)
class VFun(InlineElement):
    name: str
    content: str
