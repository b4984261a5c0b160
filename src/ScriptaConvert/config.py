from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

ORDERED_MARKERS = {"dot", "number"}


@dataclass(frozen=True)
class RenderOptions:
    """Knobs for the Scripta output that differ between target integrations."""

    ordered_marker: str = "dot"
    indent: str = "  "
    indent_ordinary: bool = False
    trailing_newline: bool = True


def load_options(text: str) -> RenderOptions:
    """Read renderer options from a YAML mapping; missing keys keep their defaults."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping of render options.")

    known = {f.name for f in fields(RenderOptions)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown render options: {', '.join(map(str, unknown))}")

    indent = data.get("indent")
    if isinstance(indent, int) and not isinstance(indent, bool):
        data["indent"] = " " * indent

    options = replace(RenderOptions(), **data)
    _validate(options)
    return options


def load_options_file(path: str | Path) -> RenderOptions:
    return load_options(Path(path).read_text(encoding="utf-8"))


def _validate(options: RenderOptions) -> None:
    if options.ordered_marker not in ORDERED_MARKERS:
        raise ValueError(f"ordered_marker must be one of {sorted(ORDERED_MARKERS)}, got {options.ordered_marker!r}")
    if not isinstance(options.indent, str) or options.indent.strip():
        raise ValueError("indent must be a string of spaces")
    for name in ("indent_ordinary", "trailing_newline"):
        if not isinstance(getattr(options, name), bool):
            raise ValueError(f"{name} must be true or false")
