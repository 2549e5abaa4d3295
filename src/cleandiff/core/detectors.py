# src/cleandiff/core/detectors.py
"""
Formatting detectors.

Each detector takes (hunk, pairs, path) and returns a Detection with the
old-side and new-side line numbers it considers formatting-only. Detectors
never flag a change they cannot confidently classify.
"""
import re
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional

from cleandiff.config import (
    ASI_HAZARD_PREFIXES,
    CANONICAL_QUOTE,
    DESCRIPTIONS,
    QUOTE_CHARS,
)
from cleandiff.core.filetypes import (
    is_comment_line,
    is_import_line,
    supports_import_reordering,
    supports_line_wrapping,
)
from cleandiff.core.matcher import iter_change_blocks, split_block
from cleandiff.models import (
    AddedLine,
    ChangePair,
    CleanDiffConfig,
    ContextLine,
    Detection,
    DiffHunk,
    DiffLine,
    FormattingChange,
    RemovedLine,
)
from cleandiff.utils.tokenizer import (
    UnterminatedTokenError,
    is_significant,
    normalize_wrap_commas,
    tokenize,
)

Detector = Callable[[DiffHunk, List[ChangePair], Optional[str]], Detection]

_INTERPOLATION_PATTERN = re.compile(r"\$\{.*\}")
_QUOTE_TABLE = str.maketrans({q: CANONICAL_QUOTE for q in QUOTE_CHARS})
_WHITESPACE_RUN = re.compile(r"\s+")
JSON_KEY_QUOTES = ("'", '"')


class _Flags:
    """Collects old/new line numbers while a detector runs."""

    def __init__(self):
        self.old = set()
        self.new = set()

    def add(self, line: DiffLine):
        if isinstance(line, RemovedLine):
            self.old.add(line.old_line)
        elif isinstance(line, AddedLine):
            self.new.add(line.new_line)

    def add_pair(self, pair: ChangePair):
        self.old.add(pair.removed.old_line)
        self.new.add(pair.added.new_line)

    def result(self, pairs: Iterable[ChangePair] = ()) -> Detection:
        return Detection(frozenset(self.old), frozenset(self.new), tuple(pairs))


def _code_tokens(text: str) -> List[str]:
    return [t for t in tokenize(text, keep_whitespace=True) if is_significant(t)]


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def _non_context(hunk: DiffHunk) -> Iterable[DiffLine]:
    return (line for line in hunk.lines if not isinstance(line, ContextLine))


# --- Line-level predicates ---

def is_whitespace_only_change(old: str, new: str) -> bool:
    try:
        old_tokens = _code_tokens(old)
        new_tokens = _code_tokens(new)
    except UnterminatedTokenError:
        old_norm = _collapse_whitespace(old)
        return bool(old_norm) and old_norm == _collapse_whitespace(new)
    return old_tokens == new_tokens and old != new


def is_comment_only_change(old: str, new: str) -> bool:
    try:
        old_tokens = _code_tokens(old)
        new_tokens = _code_tokens(new)
    except UnterminatedTokenError:
        old_trim, new_trim = old.strip(), new.strip()
        return is_comment_line(old_trim) and is_comment_line(new_trim) and old_trim != new_trim
    return old_tokens == new_tokens and old != new


def is_quote_only_change(old: str, new: str) -> bool:
    if _INTERPOLATION_PATTERN.search(old) or _INTERPOLATION_PATTERN.search(new):
        return False
    return old.translate(_QUOTE_TABLE) == new.translate(_QUOTE_TABLE) and old != new


def _strip_one(text: str, suffix: str) -> str:
    return text[:-1] if text.endswith(suffix) else text


def is_trailing_comma_only_change(old: str, new: str) -> bool:
    old_trim, new_trim = old.strip(), new.strip()
    # In JSON a trailing comma is a syntax error, not style
    looks_like_json = (
        old_trim.startswith(JSON_KEY_QUOTES)
        or new_trim.startswith(JSON_KEY_QUOTES)
        or '":' in old_trim
        or '":' in new_trim
    )
    if looks_like_json:
        return False
    return _strip_one(old_trim, ",") == _strip_one(new_trim, ",") and old_trim != new_trim


def is_semicolon_only_change(old: str, new: str, next_line: Optional[DiffLine] = None) -> bool:
    old_trim, new_trim = old.strip(), new.strip()
    if _strip_one(old_trim, ";") != _strip_one(new_trim, ";") or old_trim == new_trim:
        return False
    if next_line is not None and next_line.content.strip().startswith(ASI_HAZARD_PREFIXES):
        return False
    return True


# --- Detectors ---

def detect_whitespace(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    flags = _Flags()
    for pair in pairs:
        if is_whitespace_only_change(pair.removed.content, pair.added.content):
            flags.add_pair(pair)
    for line in _non_context(hunk):
        if not line.content.strip():
            flags.add(line)
    return flags.result()


def detect_comments(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    flags = _Flags()
    for pair in pairs:
        if is_comment_only_change(pair.removed.content, pair.added.content):
            flags.add_pair(pair)
    for line in _non_context(hunk):
        if is_comment_line(line.content):
            flags.add(line)
    return flags.result()


def detect_quotes(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    flags = _Flags()
    for pair in pairs:
        if is_quote_only_change(pair.removed.content, pair.added.content):
            flags.add_pair(pair)
    return flags.result()


def detect_trailing_commas(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    flags = _Flags()
    for pair in pairs:
        if is_trailing_comma_only_change(pair.removed.content, pair.added.content):
            flags.add_pair(pair)
    return flags.result()


def detect_semicolons(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    flags = _Flags()
    for pair in pairs:
        following = pair.added_index + 1
        next_line = hunk.lines[following] if following < len(hunk.lines) else None
        if is_semicolon_only_change(pair.removed.content, pair.added.content, next_line):
            flags.add_pair(pair)
    return flags.result()


def detect_import_reordering(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    """
    Flags blocks made only of import lines whose removed and added sides hold
    the same statements in a different order. Returns content-matched pairs so
    the filter can turn every added import back into context.
    """
    if not supports_import_reordering(path):
        return Detection()

    flags = _Flags()
    matched: List[ChangePair] = []
    for block in iter_change_blocks(hunk.lines):
        if not all(is_import_line(line.content, path) for _, line in block):
            continue
        removed, added = split_block(block)
        if not removed or not added:
            continue
        if Counter(line.content.strip() for _, line in removed) != Counter(line.content.strip() for _, line in added):
            continue

        unused = list(added)
        for r_index, r_line in removed:
            for k, (a_index, a_line) in enumerate(unused):
                if a_line.content.strip() == r_line.content.strip():
                    matched.append(ChangePair(r_line, a_line, r_index, a_index))
                    del unused[k]
                    break
        for _, line in block:
            flags.add(line)
    return flags.result(matched)


def detect_line_wrapping(hunk: DiffHunk, pairs: List[ChangePair], path: Optional[str] = None) -> Detection:
    """Flags whole blocks whose tokens are unchanged once line breaks are ignored."""
    if not supports_line_wrapping(path):
        return Detection()

    flags = _Flags()
    for block in iter_change_blocks(hunk.lines):
        removed, added = split_block(block)
        if not removed or not added:
            continue
        removed_text = "\n".join(line.content for _, line in removed)
        added_text = "\n".join(line.content for _, line in added)
        if removed_text == added_text:
            continue
        try:
            removed_tokens = normalize_wrap_commas(tokenize(removed_text))
            added_tokens = normalize_wrap_commas(tokenize(added_text))
        except UnterminatedTokenError:
            continue
        if removed_tokens == added_tokens:
            for _, line in block:
                flags.add(line)
    return flags.result()


DETECTORS: Dict[str, Detector] = {
    "whitespace": detect_whitespace,
    "comment": detect_comments,
    "quote": detect_quotes,
    "trailing-comma": detect_trailing_commas,
    "semicolon": detect_semicolons,
    "import": detect_import_reordering,
    "line-wrap": detect_line_wrapping,
}


def active_detectors(config: CleanDiffConfig) -> List[str]:
    return [category for category in config.enabled_categories() if category in DETECTORS]


def detect_hunk(hunk: DiffHunk, pairs: List[ChangePair], config: CleanDiffConfig, path: Optional[str] = None):
    """
    Runs every enabled detector over one hunk.

    Returns (changes, detections) where detections maps each category that
    flagged something to its raw Detection.
    """
    changes: List[FormattingChange] = []
    detections: Dict[str, Detection] = {}
    for category in active_detectors(config):
        detection = DETECTORS[category](hunk, pairs, path)
        if not detection:
            continue
        detections[category] = detection
        changes.append(
            FormattingChange(
                category=category,
                description=DESCRIPTIONS[category],
                old_lines=tuple(sorted(detection.old_lines)),
                new_lines=tuple(sorted(detection.new_lines)),
                file_path=path,
            )
        )
    return changes, detections
