# src/cleandiff/core/filetypes.py
import re
from pathlib import PurePosixPath
from typing import Optional

from cleandiff.config import COMMENT_PREFIXES

JS_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".vue", ".svelte"}
GO_EXTENSIONS = {".go"}

IMPORT_EXTENSIONS = JS_EXTENSIONS | GO_EXTENSIONS
LINE_WRAP_EXTENSIONS = JS_EXTENSIONS

_JS_IMPORT_PATTERN = re.compile(r"^import\s|^export\s|require\(|from\s")
_GO_IMPORT_PREFIXES = ("import ", '"', "`", ".")


def _suffix(path: Optional[str]) -> str:
    if not path:
        return ""
    return PurePosixPath(path).suffix.lower()


def supports_import_reordering(path: Optional[str]) -> bool:
    return _suffix(path) in IMPORT_EXTENSIONS


def supports_line_wrapping(path: Optional[str]) -> bool:
    return _suffix(path) in LINE_WRAP_EXTENSIONS


def is_import_line(content: str, path: Optional[str]) -> bool:
    """True when the line is an import/require statement in the file's language."""
    trimmed = content.strip()
    suffix = _suffix(path)
    if suffix in JS_EXTENSIONS:
        return bool(_JS_IMPORT_PATTERN.search(trimmed))
    if suffix in GO_EXTENSIONS:
        # Lines inside an `import ( ... )` block are bare quoted paths
        return trimmed.startswith(_GO_IMPORT_PREFIXES)
    return False


def is_comment_line(content: str) -> bool:
    return content.strip().startswith(COMMENT_PREFIXES)
