import pytest

from xvkit.layout import OpenFlag
from xvkit.sh import (
    MAXARGS,
    BackCmd,
    ExecCmd,
    ListCmd,
    PipeCmd,
    RedirCmd,
    ShellSyntaxError,
    parse_cmd,
)


def test_simple_command():
    assert parse_cmd("ls -l /\n") == ExecCmd(["ls", "-l", "/"])


def test_empty_line():
    assert parse_cmd("\n") == ExecCmd([])


def test_pipe_is_right_associative():
    assert parse_cmd("a | b | c") == PipeCmd(
        ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"]))
    )


def test_list_and_background():
    assert parse_cmd("a & ; b") == ListCmd(BackCmd(ExecCmd(["a"])), ExecCmd(["b"]))


def test_double_background():
    assert parse_cmd("a&&") == BackCmd(BackCmd(ExecCmd(["a"])))


def test_input_redirection():
    assert parse_cmd("cat < in") == RedirCmd(ExecCmd(["cat"]), "in", OpenFlag.RDONLY, 0)


def test_output_redirection_truncates():
    cmd = parse_cmd("echo hi > out")
    assert cmd == RedirCmd(
        ExecCmd(["echo", "hi"]),
        "out",
        OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC,
        1,
    )


def test_append_redirection():
    cmd = parse_cmd("echo hi >> out")
    assert cmd == RedirCmd(ExecCmd(["echo", "hi"]), "out", OpenFlag.WRONLY | OpenFlag.CREATE, 1)


def test_arguments_after_redirection_join_command():
    cmd = parse_cmd("< in cat x")
    assert isinstance(cmd, RedirCmd)
    assert cmd.cmd == ExecCmd(["cat", "x"])


def test_later_redirection_is_outermost():
    cmd = parse_cmd("sort < a > b")
    assert cmd.file == "b"
    assert cmd.cmd.file == "a"
    assert cmd.cmd.cmd == ExecCmd(["sort"])


def test_symbols_split_words():
    assert parse_cmd("a|b") == PipeCmd(ExecCmd(["a"]), ExecCmd(["b"]))


def test_block_with_redirection():
    cmd = parse_cmd("(a ; b) > out")
    assert cmd.cmd == ListCmd(ExecCmd(["a"]), ExecCmd(["b"]))
    assert cmd.fd == 1


def test_missing_redirection_file():
    with pytest.raises(ShellSyntaxError, match="missing file for redirection"):
        parse_cmd("echo >")


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing \\)"):
        parse_cmd("(ls")


def test_leftovers():
    with pytest.raises(ShellSyntaxError) as info:
        parse_cmd("ls ) x")
    assert info.value.leftovers == ") x"


def test_too_many_args():
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_cmd(" ".join(["w"] * MAXARGS))


def test_most_args_allowed():
    words = [f"w{i}" for i in range(MAXARGS - 1)]
    assert parse_cmd(" ".join(words)) == ExecCmd(words)


def test_paren_inside_words_is_syntax_error():
    with pytest.raises(ShellSyntaxError, match="syntax"):
        parse_cmd("a (b)")