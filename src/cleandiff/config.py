# src/cleandiff/config.py

# Detector order matters only for the order FormattingChange records are reported in.
DETECTOR_OPTIONS = [
    ("whitespace", "ignore_whitespace"),
    ("comment", "ignore_comments"),
    ("quote", "ignore_quotes"),
    ("trailing-comma", "ignore_trailing_commas"),
    ("semicolon", "ignore_optional_semicolons"),
    ("import", "ignore_import_reordering"),
    ("line-wrap", "ignore_line_wrapping"),
]

DESCRIPTIONS = {
    "whitespace": "Detected whitespace-only changes",
    "comment": "Detected comment-only changes",
    "quote": "Detected quote-style-only changes",
    "trailing-comma": "Detected trailing-comma-only changes",
    "semicolon": "Detected semicolon-only changes",
    "import": "Detected import reordering only",
    "line-wrap": "Detected line-wrapping-only changes",
}

# --- Diff syntax ---
FILE_HEADER_PREFIX = "diff --git "
NULL_DEVICE = "/dev/null"
NO_NEWLINE_MARKER = "\\ No newline at end of file"

# --- Heuristics ---
COMMENT_PREFIXES = ("//", "/*", "*", "#", "--")
QUOTE_CHARS = "'\"`"
CANONICAL_QUOTE = '"'
# A line starting with one of these may continue the previous statement
# when its semicolon is dropped.
ASI_HAZARD_PREFIXES = ("[", "(", "+", "-", "/", "`")
CLOSING_BRACKETS = (")", "]", "}")

# --- CLI ---
DEFAULT_IGNORE_FILE = ".cleandiffignore"
