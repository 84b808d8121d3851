import pytest

from fsh.tokenizer import MAX_TOKENS, tokenize


def test_splits_on_spaces():
    assert tokenize("ls -l /tmp") == ["ls", "-l", "/tmp"]


def test_collapses_repeated_and_surrounding_delimiters():
    assert tokenize("   ls   -l    /tmp  ") == ["ls", "-l", "/tmp"]


def test_empty_and_blank_lines_give_no_tokens():
    assert tokenize("") == []
    assert tokenize("     ") == []


def test_any_delimiter_character_splits():
    assert tokenize("a;b,,c", ";,") == ["a", "b", "c"]


def test_join_round_trip():
    words = ["for", "F", "in", "dir", "{", "echo", "$F", "}"]
    assert tokenize(" ".join(words)) == words


def test_exactly_max_tokens_is_accepted():
    words = ["x"] * MAX_TOKENS
    assert tokenize(" ".join(words)) == words


def test_too_many_tokens_raises():
    with pytest.raises(ValueError):
        tokenize(" ".join(["x"] * (MAX_TOKENS + 1)))


def test_empty_delimiter_raises():
    with pytest.raises(ValueError):
        tokenize("abc", "")