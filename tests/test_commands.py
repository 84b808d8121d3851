import os

import pytest

from fsh import externs
from fsh.commands import (
    MAX_LENGTH,
    Executor,
    ForOptions,
    args_to_cmd,
    parse_for,
    replace_variable,
    split_sequence,
)
from fsh.externs import SignalStatus


@pytest.fixture
def executor():
    return Executor()


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "c.log").write_text("c")
    (tmp_path / ".hidden").write_text("h")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_text("i")
    return tmp_path


def _lines(capfd):
    return capfd.readouterr().out.splitlines()


def test_args_to_cmd_appends_space_after_each_word():
    assert args_to_cmd(["ls", "-l"]) == "ls -l "
    assert args_to_cmd([]) == ""


def test_replace_variable_replaces_only_named_variable():
    assert replace_variable("echo $F $G $F", "F", "x") == "echo x $G x"
    assert replace_variable("cost $", "F", "x") == "cost $"


def test_replace_variable_truncates():
    result = replace_variable("echo $F", "F", "y" * 1000)
    assert len(result) == MAX_LENGTH - 1
    assert result.startswith("echo y")


def test_split_sequence_respects_braces():
    assert split_sequence("a ; b") == ["a", "b"]
    assert split_sequence("for F in d { a ; b } ; c") == ["for F in d { a ; b }", "c"]
    assert split_sequence("  ") == []
    assert split_sequence("x ;") == ["x"]


def test_parse_for_with_all_options():
    loop = parse_for("for F in dir -A -r -e txt -t f -p 3 { echo $F }")
    assert loop.variable == "F"
    assert loop.directory == "dir"
    assert loop.body == "echo $F"
    assert loop.options == ForOptions(True, True, "txt", "f", 3)


def test_parse_for_keeps_nested_braces():
    loop = parse_for("for F in d { if true { echo $F } }")
    assert loop.body == "if true { echo $F }"
    assert loop.options == ForOptions()


@pytest.mark.parametrize(
    "command",
    [
        "for FF in d { echo }",
        "for F on d { echo }",
        "for F in d echo",
        "for F in d { echo",
        "for F in d -p 0 { echo }",
        "for F in d -e",
        "for F",
    ],
)
def test_parse_for_rejects_bad_syntax(command):
    with pytest.raises(ValueError):
        parse_for(command)


def test_execute_external_status(executor):
    assert executor.execute("true") == 0
    assert executor.execute("false") == 1


def test_execute_empty_command_fails(executor):
    assert executor.execute("") == 1
    assert executor.execute_tokens([]) == 1


def test_execute_sequence_returns_last_status(executor):
    assert executor.execute("false ; true") == 0
    assert executor.execute("true ; false") == 1


def test_execute_builtin_pwd(executor, tmp_path, monkeypatch, capfd):
    monkeypatch.chdir(tmp_path)
    assert executor.execute("pwd") == 0
    assert _lines(capfd) == [os.getcwd()]


def test_execute_builtin_cd_changes_directory(executor, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    assert executor.execute(f"cd {target}") == 0
    assert os.getcwd() == str(target)
    assert executor.builtins.previous_dir == str(tmp_path)


def test_execute_exit_raises(executor):
    with pytest.raises(SystemExit) as info:
        executor.execute("exit 3")
    assert info.value.code == 3


def test_execute_substitutes_variable(executor, capfd):
    assert executor.execute("echo $F", "value", "F") == 0
    assert _lines(capfd) == ["value"]


def test_if_then_branch(executor, capfd):
    assert executor.execute("if true { echo yes } else { echo no }") == 0
    assert _lines(capfd) == ["yes"]


def test_if_else_branch(executor, capfd):
    assert executor.execute("if false { echo yes } else { echo no }") == 0
    assert _lines(capfd) == ["no"]


def test_if_without_else_gives_zero(executor, capfd):
    assert executor.handle_if_else(["if", "false", "{", "echo", "yes", "}"], 5) == 0
    assert _lines(capfd) == []


def test_if_block_runs_commands_in_order(executor, capfd):
    tokens = "if true { echo one ; false }".split()
    assert executor.handle_if_else(tokens, 0) == 1
    assert _lines(capfd) == ["one"]


@pytest.mark.parametrize(
    "tokens",
    [
        ["if", "true", "echo", "x"],
        ["if", "true", "{", "echo", "x"],
        ["if", "false", "{", "echo", "}", "else", "echo", "x"],
        ["echo", "x"],
    ],
)
def test_if_syntax_errors(executor, tokens):
    with pytest.raises(ValueError):
        executor.handle_if_else(tokens, 0)


def test_if_syntax_error_through_execute(executor):
    assert executor.execute("if true echo x") == 1


def test_for_filters_extension(executor, tree, capfd):
    assert executor.execute(f"for F in {tree} -e txt {{ echo $F }}") == 0
    assert _lines(capfd) == [f"{tree}/a", f"{tree}/b"]


def test_for_skips_hidden_unless_asked(executor, tree, capfd):
    executor.execute(f"for F in {tree} {{ echo $F }}")
    plain = _lines(capfd)
    executor.execute(f"for F in {tree} -A {{ echo $F }}")
    with_hidden = _lines(capfd)
    assert f"{tree}/.hidden" not in plain
    assert set(with_hidden) == set(plain) | {f"{tree}/.hidden"}


def test_for_recursive(executor, tree, capfd):
    assert executor.execute(f"for F in {tree} -r {{ echo $F }}") == 0
    assert f"{tree}/sub/inner.txt" in _lines(capfd)


def test_for_type_filter(executor, tree, capfd):
    executor.execute(f"for F in {tree} -t d {{ echo $F }}")
    assert _lines(capfd) == [f"{tree}/sub"]


def test_for_returns_highest_status(executor, tree):
    assert executor.execute(f"for F in {tree} {{ false }}") == 1
    assert executor.execute(f"for F in {tree} {{ true }}") == 0


def test_for_parallel(executor, tree, capfd):
    assert executor.execute(f"for F in {tree} -p 2 -e txt {{ echo $F }}") == 0
    assert sorted(_lines(capfd)) == [f"{tree}/a", f"{tree}/b"]
    assert executor.execute(f"for F in {tree} -p 2 {{ false }}") == 1


def test_for_syntax_error_status(executor):
    assert executor.handle_for("for FF in . { true }") == 1


def test_run_for_missing_directory(executor, tmp_path):
    assert executor.run_for(str(tmp_path / "missing"), "true", ForOptions(), "F") == 1


def test_run_for_stops_after_interrupt(executor, tree, capfd, monkeypatch):
    monkeypatch.setattr(externs, "last_was_signal", SignalStatus.INTERRUPTED)
    assert executor.run_for(str(tree), "echo $F", ForOptions(), "F") == 0
    assert _lines(capfd) == []