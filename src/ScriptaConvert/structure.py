from __future__ import annotations

from typing import List, Sequence, Tuple

from .model import Block, Section


def nest_sections(blocks: Sequence[Block]) -> Tuple[Block, ...]:
    """Attach the blocks following each heading to that heading's section.

    A section owns everything up to the next section of the same or a
    higher level. Deeper sections are nested recursively.
    """
    result: List[Block] = []
    i = 0
    while i < len(blocks):
        block = blocks[i]
        if not isinstance(block, Section):
            result.append(block)
            i += 1
            continue
        j = i + 1
        while j < len(blocks) and not (isinstance(blocks[j], Section) and blocks[j].level <= block.level):
            j += 1
        children = nest_sections(blocks[i + 1 : j])
        result.append(Section(level=block.level, title=block.title, content=block.content + children))
        i = j
    return tuple(result)
