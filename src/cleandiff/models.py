# src/cleandiff/models.py
from dataclasses import dataclass, field, fields, replace
from typing import FrozenSet, List, Optional, Tuple, Union

from cleandiff.config import DETECTOR_OPTIONS

# --- Diff lines (one class per line kind) ---

@dataclass(frozen=True)
class ContextLine:
    """Unchanged line, present on both sides."""
    content: str
    old_line: int
    new_line: int

    kind = "context"
    prefix = " "


@dataclass(frozen=True)
class AddedLine:
    """Line present only in the new file."""
    content: str
    new_line: int

    kind = "add"
    prefix = "+"


@dataclass(frozen=True)
class RemovedLine:
    """Line present only in the old file."""
    content: str
    old_line: int

    kind = "remove"
    prefix = "-"


DiffLine = Union[ContextLine, AddedLine, RemovedLine]


def tally_lines(lines: List[DiffLine]) -> Tuple[int, int]:
    """Counts the (old, new) lines covered: context counts for both sides."""
    old_count = new_count = 0
    for line in lines:
        if isinstance(line, ContextLine):
            old_count += 1
            new_count += 1
        elif isinstance(line, RemovedLine):
            old_count += 1
        else:
            new_count += 1
    return old_count, new_count


@dataclass
class DiffHunk:
    """
    One '@@' block. old_count/new_count are tallied from the lines actually
    parsed; the counts written in the header are kept as declared_* only.
    """
    old_start: int
    new_start: int
    header: str
    section: str = ""
    old_count: int = 0
    new_count: int = 0
    declared_old_count: int = 1
    declared_new_count: int = 1
    lines: List[DiffLine] = field(default_factory=list)

    def has_changes(self) -> bool:
        return any(not isinstance(line, ContextLine) for line in self.lines)

    def tally(self) -> Tuple[int, int]:
        return tally_lines(self.lines)

    def is_consistent(self) -> bool:
        return self.tally() == (self.declared_old_count, self.declared_new_count)


@dataclass
class FileMetadata:
    new_file_mode: Optional[str] = None
    deleted_file_mode: Optional[str] = None
    old_mode: Optional[str] = None
    new_mode: Optional[str] = None
    similarity: Optional[int] = None
    index: Optional[Tuple[str, str]] = None
    index_mode: Optional[str] = None


@dataclass
class DiffFile:
    path: str
    from_path: Optional[str] = None
    to_path: Optional[str] = None
    change_type: str = "modify"  # add | delete | modify | rename
    hunks: List[DiffHunk] = field(default_factory=list)
    metadata: FileMetadata = field(default_factory=FileMetadata)


# --- Detection ---

@dataclass(frozen=True)
class ChangePair:
    """A removed line associated with an added line, plus their hunk positions."""
    removed: RemovedLine
    added: AddedLine
    removed_index: int
    added_index: int


@dataclass(frozen=True)
class Detection:
    old_lines: FrozenSet[int] = frozenset()
    new_lines: FrozenSet[int] = frozenset()
    pairs: Tuple[ChangePair, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.old_lines or self.new_lines)


@dataclass(frozen=True)
class FormattingChange:
    category: str
    description: str
    old_lines: Tuple[int, ...]
    new_lines: Tuple[int, ...]
    file_path: Optional[str] = None
    severity: str = "low"

    @property
    def lines(self) -> Tuple[int, ...]:
        return tuple(sorted(set(self.old_lines) | set(self.new_lines)))


# --- Configuration & results ---

@dataclass(frozen=True)
class CleanDiffConfig:
    """Which formatting categories to filter. Everything is off by default."""
    ignore_whitespace: bool = False
    ignore_comments: bool = False
    ignore_quotes: bool = False
    ignore_trailing_commas: bool = False
    ignore_optional_semicolons: bool = False
    ignore_import_reordering: bool = False
    ignore_line_wrapping: bool = False
    # Advisory only, never changes behavior.
    language: Optional[str] = None

    @classmethod
    def all_enabled(cls, language: Optional[str] = None) -> "CleanDiffConfig":
        options = {f.name: True for f in fields(cls) if f.name.startswith("ignore_")}
        return cls(language=language, **options)

    def is_enabled(self, option: str) -> bool:
        return bool(getattr(self, option, False))

    def enabled_categories(self) -> List[str]:
        """Formatting categories switched on, in detector order."""
        return [category for category, option in DETECTOR_OPTIONS if self.is_enabled(option)]


@dataclass(frozen=True)
class DiffStatistics:
    total_files: int
    files_with_format_changes: int
    lines_removed: int
    percentage_reduced: float


@dataclass(frozen=True)
class CleanedDiff:
    original: List[DiffFile]
    cleaned: List[DiffFile]
    format_changes: List[FormattingChange]
    statistics: DiffStatistics

    @property
    def text(self) -> str:
        """The cleaned diff as unified diff text."""
        from cleandiff.core.reconstructor import reconstruct
        return reconstruct(self.cleaned)


def clone_hunk(hunk: DiffHunk, lines: List[DiffLine]) -> DiffHunk:
    """Returns a copy of hunk carrying `lines`, with counts re-tallied."""
    old_count, new_count = tally_lines(lines)
    return replace(hunk, lines=lines, old_count=old_count, new_count=new_count)
