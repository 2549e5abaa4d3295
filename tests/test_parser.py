# tests/test_parser.py
from cleandiff.core.parser import parse_diff, split_diff_lines, strip_path_prefix
from cleandiff.core.reconstructor import reconstruct
from cleandiff.models import AddedLine, ContextLine, RemovedLine

BASIC_DIFF = """\
diff --git a/test.ts b/test.ts
index 1234567..89abcde 100644
--- a/test.ts
+++ b/test.ts
@@ -1,4 +1,5 @@ function main() {
 const a = 1;
+const b = 2;
 const c = 3;
-const d = 4;
+const d = 5;
 const e = 5;
"""


def test_parse_basic_file():
    files = parse_diff(BASIC_DIFF)
    assert len(files) == 1
    f = files[0]
    assert f.path == "test.ts"
    assert f.from_path == "test.ts"
    assert f.to_path == "test.ts"
    assert f.change_type == "modify"
    assert f.metadata.index == ("1234567", "89abcde")
    assert f.metadata.index_mode == "100644"

    hunk = f.hunks[0]
    assert hunk.header == "@@ -1,4 +1,5 @@ function main() {"
    assert hunk.section == "function main() {"
    assert (hunk.old_start, hunk.new_start) == (1, 1)
    assert (hunk.old_count, hunk.new_count) == (4, 5)
    assert hunk.is_consistent()


def test_line_numbers_follow_running_counters():
    lines = parse_diff(BASIC_DIFF)[0].hunks[0].lines
    assert lines == [
        ContextLine("const a = 1;", 1, 1),
        AddedLine("const b = 2;", 2),
        ContextLine("const c = 3;", 2, 3),
        RemovedLine("const d = 4;", 3),
        AddedLine("const d = 5;", 4),
        ContextLine("const e = 5;", 4, 5),
    ]


def test_line_kinds_carry_only_their_side():
    lines = parse_diff(BASIC_DIFF)[0].hunks[0].lines
    assert not hasattr(lines[1], "old_line")
    assert not hasattr(lines[3], "new_line")


def test_hunk_starts_offset_numbering():
    text = BASIC_DIFF.replace("@@ -1,4 +1,5 @@", "@@ -10,4 +20,5 @@")
    lines = parse_diff(text)[0].hunks[0].lines
    assert lines[0] == ContextLine("const a = 1;", 10, 20)
    assert lines[3] == RemovedLine("const d = 4;", 12)


def test_multiple_files_and_hunks():
    text = BASIC_DIFF + """\
diff --git a/b.js b/b.js
--- a/b.js
+++ b/b.js
@@ -1 +1 @@
-x
+y
@@ -50,2 +50,2 @@
 keep
-old
+new
"""
    files = parse_diff(text)
    assert [f.path for f in files] == ["test.ts", "b.js"]
    second = files[1]
    assert len(second.hunks) == 2
    assert (second.hunks[0].declared_old_count, second.hunks[0].declared_new_count) == (1, 1)
    assert second.hunks[1].lines[1] == RemovedLine("old", 51)


def test_new_file():
    text = """\
diff --git a/new.ts b/new.ts
new file mode 100644
index 0000000..1234567
--- /dev/null
+++ b/new.ts
@@ -0,0 +1,2 @@
+a
+b
"""
    f = parse_diff(text)[0]
    assert f.change_type == "add"
    assert f.metadata.new_file_mode == "100644"
    assert f.metadata.index == ("0000000", "1234567")
    assert f.metadata.index_mode is None
    assert f.hunks[0].lines == [AddedLine("a", 1), AddedLine("b", 2)]


def test_deleted_file():
    text = """\
diff --git a/old.ts b/old.ts
deleted file mode 100644
index 1234567..0000000
--- a/old.ts
+++ /dev/null
@@ -1,1 +0,0 @@
-content
"""
    f = parse_diff(text)[0]
    assert f.change_type == "delete"
    assert f.metadata.deleted_file_mode == "100644"
    assert f.path == "old.ts"


def test_dev_null_implies_add_without_mode_line():
    text = "diff --git a/n.ts b/n.ts\n--- /dev/null\n+++ b/n.ts\n@@ -0,0 +1 @@\n+a\n"
    assert parse_diff(text)[0].change_type == "add"


def test_rename():
    text = """\
diff --git a/old.ts b/new.ts
similarity index 95%
rename from old.ts
rename to new.ts
index abc1234..def5678 100644
--- a/old.ts
+++ b/new.ts
@@ -1,2 +1,2 @@
-x
+y
 z
"""
    f = parse_diff(text)[0]
    assert f.change_type == "rename"
    assert (f.from_path, f.to_path, f.path) == ("old.ts", "new.ts", "new.ts")
    assert f.metadata.similarity == 95


def test_mode_change():
    text = "diff --git a/run.sh b/run.sh\nold mode 100644\nnew mode 100755\n"
    f = parse_diff(text)[0]
    assert (f.metadata.old_mode, f.metadata.new_mode) == ("100644", "100755")
    assert f.hunks == []


def test_lines_outside_files_are_ignored():
    text = "From: someone\nSubject: patch\n\n" + BASIC_DIFF
    files = parse_diff(text)
    assert len(files) == 1
    assert len(files[0].hunks[0].lines) == 6


def test_invalid_hunk_header_opens_nothing():
    text = "diff --git a/x.ts b/x.ts\n--- a/x.ts\n+++ b/x.ts\n@@ bogus @@\n-a\n+b\n"
    files = parse_diff(text)
    assert len(files) == 1
    assert files[0].hunks == []


def test_no_newline_marker_is_dropped():
    text = BASIC_DIFF + "\\ No newline at end of file\n"
    lines = parse_diff(text)[0].hunks[0].lines
    assert len(lines) == 6


def test_permissive_context_lines():
    text = "diff --git a/x.ts b/x.ts\n@@ -1,3 +1,3 @@\nbare\n\n-a\n+b\n"
    lines = parse_diff(text)[0].hunks[0].lines
    assert lines[0] == ContextLine("bare", 1, 1)
    assert lines[1] == ContextLine("", 2, 2)
    assert lines[2] == RemovedLine("a", 3)


def test_removed_line_that_looks_like_a_path_header():
    text = "diff --git a/q.sql b/q.sql\n--- a/q.sql\n+++ b/q.sql\n@@ -1 +1 @@\n--- note\n+++ note\n"
    f = parse_diff(text)[0]
    assert f.from_path == "q.sql"
    assert f.hunks[0].lines == [RemovedLine("-- note", 1), AddedLine("++ note", 1)]


def test_declared_count_mismatch_is_tolerated():
    text = "diff --git a/x.ts b/x.ts\n@@ -1,10 +1,10 @@\n-a\n+b\n"
    hunk = parse_diff(text)[0].hunks[0]
    assert (hunk.declared_old_count, hunk.declared_new_count) == (10, 10)
    assert (hunk.old_count, hunk.new_count) == (1, 1)
    assert not hunk.is_consistent()


def test_crlf_input():
    lines = parse_diff(BASIC_DIFF.replace("\n", "\r\n"))[0].hunks[0].lines
    assert lines[0] == ContextLine("const a = 1;", 1, 1)


def test_empty_input():
    assert parse_diff("") == []


def test_strip_path_prefix():
    assert strip_path_prefix("a/src/x.ts") == "src/x.ts"
    assert strip_path_prefix("w/x.ts") == "x.ts"
    assert strip_path_prefix("src/x.ts") == "src/x.ts"
    assert strip_path_prefix("/dev/null") == "/dev/null"


def test_form_feed_stays_inside_its_line(make_diff):
    text = make_diff([" a", "-x = 1", "+x = 2\fy", " b"])
    lines = parse_diff(text)[0].hunks[0].lines
    assert lines == [
        ContextLine("a", 1, 1),
        RemovedLine("x = 1", 2),
        AddedLine("x = 2\fy", 2),
        ContextLine("b", 3, 3),
    ]
    assert reconstruct(parse_diff(text)) == text


def test_unicode_line_separator_is_content(make_diff):
    text = make_diff(["-s = 'a'", "+s = 'a\u2028b'", " end\u2028"])
    hunk = parse_diff(text)[0].hunks[0]
    assert hunk.lines[1] == AddedLine("s = 'a\u2028b'", 1)
    assert hunk.lines[2] == ContextLine("end\u2028", 2, 2)
    assert reconstruct(parse_diff(text)) == text


def test_split_diff_lines():
    assert split_diff_lines("a\r\nb\nc\x0bd\n") == ["a", "b", "c\x0bd"]
    assert split_diff_lines("a\n\n") == ["a", ""]
    assert split_diff_lines("") == []
