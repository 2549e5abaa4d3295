# src/cleandiff/core/parser.py
import re
from typing import List, Optional

from cleandiff.config import FILE_HEADER_PREFIX, NO_NEWLINE_MARKER, NULL_DEVICE
from cleandiff.models import AddedLine, ContextLine, DiffFile, DiffHunk, RemovedLine

HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")
GIT_PATHS_PATTERN = re.compile(r"^diff --git (\S+) (\S+)$")
# Only \n and \r\n end a diff line; other separators are content
LINE_BREAK_PATTERN = re.compile(r"\r?\n")

# Parser states
OUTSIDE_FILE = "outside-file"
IN_METADATA = "in-metadata"
IN_HUNK = "in-hunk"


def strip_path_prefix(path: str) -> str:
    """Removes git's `a/`, `b/` (or any one-letter) prefix from a path token."""
    if len(path) > 2 and path[1] == "/" and path[0].isalpha():
        return path[2:]
    return path


def split_diff_lines(diff_text: str) -> List[str]:
    lines = LINE_BREAK_PATTERN.split(diff_text)
    if lines and lines[-1] == "":
        # Text ending in a newline has no empty final line
        lines.pop()
    return lines


def _last_word(line: str) -> str:
    return line.rsplit(" ", 1)[-1]


def _new_file(line: str) -> DiffFile:
    rest = line[len(FILE_HEADER_PREFIX):]
    match = GIT_PATHS_PATTERN.match(line)
    if match:
        from_path, to_path = match.group(1), match.group(2)
    elif " b/" in rest:
        # Paths containing spaces
        from_path, _, to_path = rest.partition(" b/")
        to_path = "b/" + to_path
    else:
        parts = rest.split(" ")
        from_path = parts[0] if parts else ""
        to_path = parts[1] if len(parts) > 1 else ""
    from_path = strip_path_prefix(from_path) or None
    to_path = strip_path_prefix(to_path) or None
    return DiffFile(path=to_path or from_path or "", from_path=from_path, to_path=to_path)


def _parse_metadata(line: str, diff_file: DiffFile) -> bool:
    """Records a file metadata line. Returns False when `line` isn't one."""
    meta = diff_file.metadata
    if line.startswith("new file mode "):
        diff_file.change_type = "add"
        meta.new_file_mode = _last_word(line)
    elif line.startswith("deleted file mode "):
        diff_file.change_type = "delete"
        meta.deleted_file_mode = _last_word(line)
    elif line.startswith("old mode "):
        meta.old_mode = _last_word(line)
    elif line.startswith("new mode "):
        meta.new_mode = _last_word(line)
    elif line.startswith("rename from "):
        diff_file.change_type = "rename"
        diff_file.from_path = line[len("rename from "):]
    elif line.startswith("rename to "):
        diff_file.change_type = "rename"
        diff_file.to_path = line[len("rename to "):]
        diff_file.path = diff_file.to_path
    elif line.startswith("similarity index "):
        value = _last_word(line).rstrip("%")
        if value.isdigit():
            meta.similarity = int(value)
    elif line.startswith("index "):
        parts = line.split(" ")
        blobs = parts[1].split("..")
        if len(blobs) == 2:
            meta.index = (blobs[0], blobs[1])
        if len(parts) > 2:
            meta.index_mode = parts[2]
    else:
        return False
    return True


def _parse_path_line(line: str, diff_file: DiffFile) -> bool:
    if not (line.startswith("--- ") or line.startswith("+++ ")):
        return False
    path = line[4:].split("\t", 1)[0]
    if path == NULL_DEVICE:
        if diff_file.change_type == "modify":
            diff_file.change_type = "add" if line.startswith("---") else "delete"
    else:
        if line.startswith("---"):
            diff_file.from_path = strip_path_prefix(path)
        else:
            diff_file.to_path = strip_path_prefix(path)
            diff_file.path = diff_file.to_path
    return True


def _new_hunk(line: str) -> Optional[DiffHunk]:
    match = HUNK_HEADER_PATTERN.match(line)
    if not match:
        return None
    old_start, old_count, new_start, new_count, section = match.groups()
    return DiffHunk(
        old_start=int(old_start),
        new_start=int(new_start),
        header=line,
        section=section.strip(),
        declared_old_count=int(old_count) if old_count is not None else 1,
        declared_new_count=int(new_count) if new_count is not None else 1,
    )


def _append_line(hunk: DiffHunk, line: str) -> None:
    """Classifies a hunk body line and numbers it from the running counters."""
    old_line = hunk.old_start + hunk.old_count
    new_line = hunk.new_start + hunk.new_count
    marker = line[:1]
    if marker == "+":
        hunk.lines.append(AddedLine(line[1:], new_line))
        hunk.new_count += 1
    elif marker == "-":
        hunk.lines.append(RemovedLine(line[1:], old_line))
        hunk.old_count += 1
    else:
        # Context lines that lost their leading space are kept whole
        content = line[1:] if marker == " " else line
        hunk.lines.append(ContextLine(content, old_line, new_line))
        hunk.old_count += 1
        hunk.new_count += 1


def parse_diff(diff_text: str) -> List[DiffFile]:
    """
    Parses unified diff text into DiffFile records.

    Never raises on malformed input: lines outside any file and '@@' lines
    that aren't valid hunk headers are skipped. Declared hunk counts are
    recorded but line numbers always come from the lines actually present.
    """
    files: List[DiffFile] = []
    current_file: Optional[DiffFile] = None
    current_hunk: Optional[DiffHunk] = None
    state = OUTSIDE_FILE

    for line in split_diff_lines(diff_text):
        if line.startswith(FILE_HEADER_PREFIX):
            current_file = _new_file(line)
            files.append(current_file)
            current_hunk = None
            state = IN_METADATA
            continue

        if state == OUTSIDE_FILE:
            continue

        if line.startswith("@@"):
            hunk = _new_hunk(line)
            if hunk is not None:
                current_file.hunks.append(hunk)
                current_hunk = hunk
                state = IN_HUNK
            continue

        if state == IN_METADATA:
            # Anything that is not metadata before the first hunk is noise
            if not _parse_metadata(line, current_file):
                _parse_path_line(line, current_file)
            continue

        # IN_HUNK
        if line == NO_NEWLINE_MARKER:
            continue
        if _parse_metadata(line, current_file):
            current_hunk = None
            state = IN_METADATA
            continue
        _append_line(current_hunk, line)

    return files
