# src/cleandiff/core/filter.py
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

from cleandiff.core.detectors import detect_hunk
from cleandiff.core.matcher import find_change_pairs, iter_change_blocks, split_block
from cleandiff.models import (
    AddedLine,
    ChangePair,
    CleanDiffConfig,
    ContextLine,
    Detection,
    DiffFile,
    DiffHunk,
    DiffLine,
    FormattingChange,
    RemovedLine,
    clone_hunk,
)

LINE_WRAP = "line-wrap"


@dataclass
class HunkFlags:
    """Scratch state for rewriting a single hunk. Built fresh per hunk."""
    old: Set[int] = field(default_factory=set)
    new: Set[int] = field(default_factory=set)
    wrap_old: Set[int] = field(default_factory=set)
    wrap_new: Set[int] = field(default_factory=set)
    # added new_line -> paired removed old_line
    reverse_pairs: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def build(cls, pairs: List[ChangePair], detections: Mapping[str, Detection]) -> "HunkFlags":
        flags = cls()
        extra_pairs: List[ChangePair] = []
        for category, detection in detections.items():
            if category == LINE_WRAP:
                flags.wrap_old |= detection.old_lines
                flags.wrap_new |= detection.new_lines
            else:
                flags.old |= detection.old_lines
                flags.new |= detection.new_lines
            extra_pairs.extend(detection.pairs)
        # Content-matched pairs (import reordering) win over positional ones
        for pair in list(pairs) + extra_pairs:
            flags.reverse_pairs[pair.added.new_line] = pair.removed.old_line
        return flags

    def __bool__(self) -> bool:
        return bool(self.old or self.new or self.wrap_old or self.wrap_new)

    def is_wrapped(self, line: DiffLine) -> bool:
        if isinstance(line, RemovedLine):
            return line.old_line in self.wrap_old
        if isinstance(line, AddedLine):
            return line.new_line in self.wrap_new
        return False


def _collapse_wrapped_blocks(lines: List[DiffLine], flags: HunkFlags):
    """
    Finds blocks flagged as pure line-wrapping.

    Returns (replacements, consumed): context lines to emit keyed by the
    block's first index, and every index the collapsed blocks cover.
    """
    replacements: Dict[int, List[ContextLine]] = {}
    consumed: Set[int] = set()
    for block in iter_change_blocks(lines):
        if not all(flags.is_wrapped(line) for _, line in block):
            continue
        removed, added = split_block(block)
        if not removed or not added:
            continue
        context = []
        for k, (_, added_line) in enumerate(added):
            # Reuse the last removed line's number when the new side is longer
            old_line = removed[min(k, len(removed) - 1)][1].old_line
            context.append(ContextLine(added_line.content, old_line, added_line.new_line))
        replacements[block[0][0]] = context
        consumed.update(index for index, _ in block)
    return replacements, consumed


def filter_hunk(
    hunk: DiffHunk, pairs: List[ChangePair], detections: Mapping[str, Detection]
) -> Tuple[Optional[DiffHunk], bool]:
    """
    Rewrites one hunk without its formatting-only lines.

    Returns (cleaned_hunk, changed). cleaned_hunk is None when no real change
    is left. `hunk` itself is never modified.
    """
    flags = HunkFlags.build(pairs, detections)
    if not flags:
        cleaned = clone_hunk(hunk, list(hunk.lines))
        return (cleaned if cleaned.has_changes() else None), False

    replacements, consumed = _collapse_wrapped_blocks(hunk.lines, flags)
    kept: List[DiffLine] = []
    changed = False

    for index, line in enumerate(hunk.lines):
        if index in replacements:
            kept.extend(replacements[index])
        if index in consumed:
            changed = True
            continue

        if isinstance(line, RemovedLine) and line.old_line in flags.old:
            # Dropped; a flagged partner comes back as context below
            changed = True
            continue

        if isinstance(line, AddedLine) and line.new_line in flags.new:
            changed = True
            partner = flags.reverse_pairs.get(line.new_line)
            if partner is not None and partner in flags.old:
                kept.append(ContextLine(line.content, partner, line.new_line))
            continue

        kept.append(line)

    cleaned = clone_hunk(hunk, kept)
    return (cleaned if cleaned.has_changes() else None), changed


def filter_files(
    files: List[DiffFile],
    config: CleanDiffConfig,
    passthrough: Optional[Callable[[str], bool]] = None,
) -> Tuple[List[DiffFile], List[FormattingChange], List[str]]:
    """
    Runs detection and rewriting over every hunk of every file.

    Returns (cleaned_files, changes, paths_with_changes). Files matched by
    `passthrough` skip detection and are copied as they are. Files left
    without any hunk are omitted from cleaned_files.
    """
    cleaned_files: List[DiffFile] = []
    all_changes: List[FormattingChange] = []
    paths_with_changes: List[str] = []

    for diff_file in files:
        cleaned_hunks: List[DiffHunk] = []
        file_changed = False

        if passthrough is not None and passthrough(diff_file.path):
            cleaned_hunks = [clone_hunk(h, list(h.lines)) for h in diff_file.hunks if h.has_changes()]
        else:
            for hunk in diff_file.hunks:
                pairs = find_change_pairs(hunk.lines)
                changes, detections = detect_hunk(hunk, pairs, config, diff_file.path)
                all_changes.extend(changes)

                cleaned_hunk, changed = filter_hunk(hunk, pairs, detections)
                file_changed = file_changed or changed
                if cleaned_hunk is not None:
                    cleaned_hunks.append(cleaned_hunk)

        if cleaned_hunks:
            cleaned_files.append(
                replace(diff_file, hunks=cleaned_hunks, metadata=replace(diff_file.metadata))
            )
        if file_changed:
            paths_with_changes.append(diff_file.path)

    return cleaned_files, all_changes, paths_with_changes
