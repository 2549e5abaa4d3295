# src/cleandiff/core/reconstructor.py
from typing import List

from cleandiff.config import NULL_DEVICE
from cleandiff.models import DiffFile, DiffHunk


def render_hunk_header(hunk: DiffHunk) -> str:
    """Builds the '@@' line from the lines the hunk actually holds."""
    old_count, new_count = hunk.tally()
    header = f"@@ -{hunk.old_start},{old_count} +{hunk.new_start},{new_count} @@"
    if hunk.section:
        header += f" {hunk.section}"
    return header


def render_file_header(diff_file: DiffFile) -> List[str]:
    from_path = diff_file.from_path or diff_file.to_path or diff_file.path
    to_path = diff_file.to_path or diff_file.from_path or diff_file.path
    meta = diff_file.metadata

    lines = [f"diff --git a/{from_path} b/{to_path}"]
    if meta.old_mode:
        lines.append(f"old mode {meta.old_mode}")
    if meta.new_mode:
        lines.append(f"new mode {meta.new_mode}")
    if diff_file.change_type == "add" and meta.new_file_mode:
        lines.append(f"new file mode {meta.new_file_mode}")
    elif diff_file.change_type == "delete" and meta.deleted_file_mode:
        lines.append(f"deleted file mode {meta.deleted_file_mode}")
    elif diff_file.change_type == "rename":
        if meta.similarity is not None:
            lines.append(f"similarity index {meta.similarity}%")
        lines.append(f"rename from {from_path}")
        lines.append(f"rename to {to_path}")
    if meta.index:
        index_line = f"index {meta.index[0]}..{meta.index[1]}"
        if meta.index_mode:
            index_line += f" {meta.index_mode}"
        lines.append(index_line)

    lines.append(f"--- {NULL_DEVICE if diff_file.change_type == 'add' else 'a/' + from_path}")
    lines.append(f"+++ {NULL_DEVICE if diff_file.change_type == 'delete' else 'b/' + to_path}")
    return lines


def render_hunk(hunk: DiffHunk) -> List[str]:
    lines = [render_hunk_header(hunk)]
    lines.extend(f"{line.prefix}{line.content}" for line in hunk.lines)
    return lines


def reconstruct(files: List[DiffFile]) -> str:
    """
    Serializes files back into unified diff text.

    Hunk headers are always recomputed; hunks without a single added or
    removed line are skipped, and so are files left with no hunks.
    """
    output: List[str] = []
    for diff_file in files:
        hunks = [hunk for hunk in diff_file.hunks if hunk.has_changes()]
        if not hunks:
            continue
        output.extend(render_file_header(diff_file))
        for hunk in hunks:
            output.extend(render_hunk(hunk))
    return "\n".join(output) + "\n" if output else ""
