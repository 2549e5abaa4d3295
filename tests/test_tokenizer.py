# tests/test_tokenizer.py
import pytest

from cleandiff.utils.tokenizer import (
    UnterminatedTokenError,
    is_significant,
    normalize_wrap_commas,
    tokenize,
)


def test_basic_statement():
    assert tokenize("const a = 1;") == ["const", "a", "=", "1", ";"]


def test_whitespace_kept_on_request():
    assert tokenize("a  = b", keep_whitespace=True) == ["a", "  ", "=", " ", "b"]
    assert tokenize("a  = b") == ["a", "=", "b"]


def test_string_literal_is_one_token():
    assert tokenize('x = "a b";') == ["x", "=", '"a b"', ";"]
    assert tokenize("y = 'it'") == ["y", "=", "'it'"]


def test_escaped_quote_inside_string():
    assert tokenize(r'"a\"b" + c') == [r'"a\"b"', "+", "c"]


def test_template_literal_may_span_lines():
    assert tokenize("`a\nb` + x") == ["`a\nb`", "+", "x"]
    assert tokenize(r"`a\`b`") == [r"`a\`b`"]


@pytest.mark.parametrize("text", [
    "`never closed",
    '"abc',
    '"abc\ndef"',   # raw newline inside a string
    "'abc\rdef'",
    "a /* open",
])
def test_unterminated_constructs_raise(text):
    with pytest.raises(UnterminatedTokenError):
        tokenize(text)


def test_unterminated_error_is_value_error():
    with pytest.raises(ValueError) as excinfo:
        tokenize("x = 'oops")
    assert excinfo.value.kind == "string"
    assert excinfo.value.position == 4


def test_comments():
    assert tokenize("a // hi there") == ["a", "// hi there"]
    assert tokenize("a // one\nb") == ["a", "// one", "b"]
    assert tokenize("a /* x */ b") == ["a", "/* x */", "b"]
    assert tokenize("a /* x\n y */ b") == ["a", "/* x\n y */", "b"]


def test_comment_markers_inside_strings_are_not_comments():
    assert tokenize('url = "http://x"') == ["url", "=", '"http://x"']


def test_identifiers_and_numbers():
    assert tokenize("$el.foo_1") == ["$el", ".", "foo_1"]
    assert tokenize("1_000.5+2") == ["1_000.5", "+", "2"]


def test_division_is_punctuation():
    assert tokenize("a / b") == ["a", "/", "b"]


def test_is_significant():
    assert is_significant("foo")
    assert is_significant("/")
    assert not is_significant("   ")
    assert not is_significant("// c")
    assert not is_significant("/* c */")


def test_normalize_wrap_commas():
    assert normalize_wrap_commas(["f", "(", "a", ",", ")"]) == ["f", "(", "a", ")"]
    assert normalize_wrap_commas(["[", "1", ",", "]", ",", "}"]) == ["[", "1", "]", "}"]
    assert normalize_wrap_commas(["a", ",", "b"]) == ["a", ",", "b"]


def test_non_ascii_characters_are_single_tokens():
    assert tokenize("x²") == ["x", "²"]
    assert tokenize("é1") == ["é", "1"]
    assert tokenize("٣ + 1") == ["٣", "+", "1"]
