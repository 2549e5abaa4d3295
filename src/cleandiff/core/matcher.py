# src/cleandiff/core/matcher.py
from typing import Iterator, List, Sequence, Tuple

from cleandiff.models import AddedLine, ChangePair, ContextLine, DiffLine, RemovedLine

# (position in hunk, line) for every line of one block
Block = List[Tuple[int, DiffLine]]


def iter_change_blocks(lines: Sequence[DiffLine]) -> Iterator[Block]:
    """Yields each maximal run of consecutive non-context lines."""
    block: Block = []
    for index, line in enumerate(lines):
        if isinstance(line, ContextLine):
            if block:
                yield block
                block = []
        else:
            block.append((index, line))
    if block:
        yield block


def split_block(block: Block) -> Tuple[Block, Block]:
    """Splits a block into its (removed, added) entries, each in original order."""
    removed = [(i, line) for i, line in block if isinstance(line, RemovedLine)]
    added = [(i, line) for i, line in block if isinstance(line, AddedLine)]
    return removed, added


def find_change_pairs(lines: Sequence[DiffLine]) -> List[ChangePair]:
    """
    Pairs the i-th removed line of every block with its i-th added line.
    Surplus lines on the longer side stay unpaired.
    """
    pairs = []
    for block in iter_change_blocks(lines):
        removed, added = split_block(block)
        for (r_index, r_line), (a_index, a_line) in zip(removed, added):
            pairs.append(ChangePair(r_line, a_line, r_index, a_index))
    return pairs
