# src/cleandiff/core/ignore.py
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pathspec


def load_ignore_spec(ignore_file: Optional[Path] = None, extra_patterns: Optional[List[str]] = None) -> pathspec.PathSpec:
    """
    Loads pass-through rules from an ignore file and creates a PathSpec object.
    Files matching these patterns are left exactly as they appear in the diff.
    """
    lines: List[str] = []

    if ignore_file is not None and ignore_file.exists():
        try:
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines = f.readlines()
        except OSError as e:
            print(f"Warning: Could not read {ignore_file}: {e}", file=sys.stderr)

    if extra_patterns:
        lines.extend(extra_patterns)

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        print(f"Error parsing ignore rules: {e}", file=sys.stderr)
        return pathspec.PathSpec.from_lines("gitwildmatch", [])


def make_passthrough(spec: pathspec.PathSpec) -> Optional[Callable[[str], bool]]:
    """Returns a path predicate for the filter, or None when no patterns are set."""
    if not spec.patterns:
        return None
    return spec.match_file
