from __future__ import annotations

import re
from typing import Optional, Tuple

from .model import FLAG, Properties

RULE_RE = re.compile(
    r"\\(?:hline|toprule|midrule|bottomrule)(?![A-Za-z])"
    r"|\\(?:cline|cmidrule)(?:\([^)]*\))?\{[^}]*\}"
)
ROW_END_RE = re.compile(r"\\\\\s*$")
TABULAR_BEGIN = "\\begin{tabular}"
TABULAR_END = "\\end{tabular}"


def parse_properties(text: str) -> Properties:
    """Parse ``key=value, flag, key2=a=b`` into a property mapping.

    Everything after the first ``=`` is the value, so command-valued options
    such as ``label=\\arabic*`` or ``style=a=b`` survive intact.
    """
    properties: Properties = {}
    for segment in text.split(","):
        segment = segment.strip()
        if not segment:
            continue
        if "=" not in segment:
            properties[segment] = FLAG
            continue
        key, _, value = segment.partition("=")
        properties[key.strip()] = value.strip()
    return properties


def extract_labels(content: str, start: int = 0) -> Tuple[str, Properties]:
    """Strip every ``\\label{...}`` from ``content``.

    Returns the remaining text and ``{"label": value}`` for the first label
    found; later labels are removed from the text but not kept.
    """
    found = _find_command(content, "label", start)
    if found is None:
        return content[start:], {}
    cut_start, cut_end, value = found
    rest, properties = extract_labels(content, cut_end)
    return content[start:cut_start] + rest, {**properties, "label": value}


def extract_caption(content: str) -> Tuple[str, Optional[str]]:
    found = _find_command(content, "caption", 0)
    if found is None:
        return content, None
    cut_start, cut_end, value = found
    return content[:cut_start] + content[cut_end:], value.strip()


def reduce_table_body(content: str) -> Tuple[str, Properties]:
    """Reduce a table environment body to its data rows.

    Caption and label become properties, the tabular column spec becomes
    ``format``, rule commands and blank lines go away and only rows with a
    cell separator are kept.
    """
    content, caption = extract_caption(content)
    content, labels = extract_labels(content)
    properties: Properties = {}
    if caption is not None:
        properties["caption"] = caption
    properties.update(labels)

    column_spec, body = _tabular_body(content)
    if column_spec is not None:
        properties["format"] = column_spec

    rows = []
    for line in body.splitlines():
        row = RULE_RE.sub("", line)
        row = ROW_END_RE.sub("", row).strip()
        if "&" in row:
            rows.append(row)
    return "\n".join(rows), properties


def _tabular_body(content: str) -> Tuple[Optional[str], str]:
    begin = content.find(TABULAR_BEGIN)
    if begin == -1:
        return None, content
    pos = begin + len(TABULAR_BEGIN)
    if content.startswith("[", pos):
        close = content.find("]", pos)
        if close != -1:
            pos = close + 1
    column_spec = None
    if content.startswith("{", pos):
        close = _matching_brace(content, pos + 1)
        if close is not None:
            column_spec = content[pos + 1 : close]
            pos = close + 1
    end = content.find(TABULAR_END, pos)
    if end == -1:
        end = len(content)
    return column_spec, content[pos:end]


def _find_command(content: str, name: str, start: int) -> Optional[Tuple[int, int, str]]:
    """Locate ``\\name{...}`` at or after ``start``.

    Returns ``(cut_start, cut_end, value)``. When the command sits alone on
    its line the cut covers the whole line so no blank line is left behind.
    """
    prefix = "\\" + name + "{"
    index = content.find(prefix, start)
    if index == -1:
        return None
    value_start = index + len(prefix)
    close = _matching_brace(content, value_start)
    if close is None:
        return None
    value = content[value_start:close]
    cut_start, cut_end = index, close + 1

    line_start = content.rfind("\n", 0, index) + 1
    line_end = content.find("\n", cut_end)
    if line_end == -1:
        line_end = len(content)
    if (
        line_start >= start
        and not content[line_start:index].strip()
        and not content[cut_end:line_end].strip()
    ):
        cut_start, cut_end = line_start, min(line_end + 1, len(content))
    return cut_start, cut_end, value


def _matching_brace(text: str, pos: int) -> Optional[int]:
    """Index of the ``}`` closing a group whose body starts at ``pos``."""
    depth = 0
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                return pos
            depth -= 1
        pos += 1
    return None
