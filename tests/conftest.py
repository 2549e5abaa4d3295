# tests/conftest.py
import pytest

from cleandiff.core.parser import parse_diff


def build_diff(body, path="src/app.ts", old_start=1, new_start=1):
    """Wraps hunk body lines in git file headers with a correct '@@' line."""
    old_count = sum(1 for line in body if not line.startswith("+"))
    new_count = sum(1 for line in body if not line.startswith("-"))
    header = [
        f"diff --git a/{path} b/{path}",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -{old_start},{old_count} +{new_start},{new_count} @@",
    ]
    return "\n".join(header + list(body)) + "\n"


@pytest.fixture
def make_diff():
    return build_diff


@pytest.fixture
def make_hunk():
    """Parses body lines and returns the single resulting hunk."""
    def _make(body, path="src/app.ts"):
        return parse_diff(build_diff(body, path))[0].hunks[0]
    return _make
