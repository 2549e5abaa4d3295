# src/cleandiff/cleaner.py
from typing import Callable, List, Optional

from cleandiff.core.filter import filter_files
from cleandiff.core.parser import parse_diff
from cleandiff.core.reconstructor import reconstruct as render_diff
from cleandiff.models import CleanDiffConfig, CleanedDiff, DiffFile, DiffStatistics


def count_changed_lines(files: List[DiffFile]) -> int:
    return sum(
        1 for f in files for h in f.hunks for line in h.lines if line.kind != "context"
    )


def count_all_lines(files: List[DiffFile]) -> int:
    return sum(len(h.lines) for f in files for h in f.hunks)


def build_statistics(original: List[DiffFile], cleaned: List[DiffFile], paths_with_changes: List[str]) -> DiffStatistics:
    lines_removed = count_changed_lines(original) - count_changed_lines(cleaned)
    total = count_all_lines(original)
    return DiffStatistics(
        total_files=len(original),
        files_with_format_changes=len(paths_with_changes),
        lines_removed=lines_removed,
        percentage_reduced=(lines_removed / total * 100) if total else 0.0,
    )


def parse(diff_text: str) -> List[DiffFile]:
    """Parse-only entry point: diff text to the structured model."""
    return parse_diff(diff_text)


def reconstruct(files: List[DiffFile]) -> str:
    """Reconstruct-only entry point: model back to diff text, headers recomputed."""
    return render_diff(files)


def clean_diff(
    diff_text: str,
    config: CleanDiffConfig,
    passthrough: Optional[Callable[[str], bool]] = None,
) -> CleanedDiff:
    """Parses, filters and summarizes a unified diff."""
    original = parse(diff_text)
    cleaned, changes, paths_with_changes = filter_files(original, config, passthrough)
    return CleanedDiff(
        original=original,
        cleaned=cleaned,
        format_changes=changes,
        statistics=build_statistics(original, cleaned, paths_with_changes),
    )


class DiffCleaner:
    """Convenience wrapper bundling a configuration with the three entry points."""

    def __init__(self, config: Optional[CleanDiffConfig] = None, passthrough: Optional[Callable[[str], bool]] = None):
        self.config = config or CleanDiffConfig()
        self.passthrough = passthrough

    def clean(self, diff_text: str) -> CleanedDiff:
        return clean_diff(diff_text, self.config, self.passthrough)

    def clean_text(self, diff_text: str) -> str:
        return self.clean(diff_text).text

    @staticmethod
    def parse(diff_text: str) -> List[DiffFile]:
        return parse(diff_text)

    @staticmethod
    def reconstruct(files: List[DiffFile]) -> str:
        return reconstruct(files)
