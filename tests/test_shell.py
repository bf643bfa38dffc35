import pytest

from xvkit.shell import (
    BackCmd,
    ExecCmd,
    ListCmd,
    PipeCmd,
    RedirCmd,
    RedirMode,
    ShellSyntaxError,
    Token,
    Tokenizer,
    parse_command,
)


def test_simple_exec():
    assert parse_command("echo hi\n") == ExecCmd(["echo", "hi"])


def test_empty_line_is_empty_exec():
    assert parse_command("") == ExecCmd([])


def test_redirections_nest_last_outermost():
    expected = RedirCmd(
        RedirCmd(ExecCmd(["cat"]), "in", RedirMode.READ, 0),
        "out",
        RedirMode.WRITE,
        1,
    )
    assert parse_command("cat < in > out") == expected


def test_append_opens_like_write():
    assert parse_command("echo x >> log") == parse_command("echo x > log")


def test_redirect_before_args():
    cmd = parse_command("< in grep a")
    assert cmd == RedirCmd(ExecCmd(["grep", "a"]), "in", RedirMode.READ, 0)


def test_pipe_is_right_nested():
    expected = PipeCmd(ExecCmd(["a"]), PipeCmd(ExecCmd(["b"]), ExecCmd(["c"])))
    assert parse_command("a | b | c") == expected


def test_list_and_trailing_semicolon():
    assert parse_command("a ; b") == ListCmd(ExecCmd(["a"]), ExecCmd(["b"]))
    assert parse_command("a ;") == ListCmd(ExecCmd(["a"]), ExecCmd([]))


def test_background():
    assert parse_command("sleep &") == BackCmd(ExecCmd(["sleep"]))


def test_background_then_word_is_leftover():
    with pytest.raises(ShellSyntaxError):
        parse_command("a & b")


def test_block_with_redirection():
    expected = RedirCmd(
        ListCmd(ExecCmd(["a"]), ExecCmd(["b"])), "f", RedirMode.WRITE, 1
    )
    assert parse_command("(a ; b) > f") == expected


def test_missing_close_paren():
    with pytest.raises(ShellSyntaxError, match="missing"):
        parse_command("(a")


def test_stray_close_paren():
    with pytest.raises(ShellSyntaxError):
        parse_command("a )")


def test_missing_redirect_file():
    with pytest.raises(ShellSyntaxError, match="missing file"):
        parse_command("cat <")


def test_argument_limit():
    words = [f"w{i}" for i in range(9)]
    assert parse_command(" ".join(words)) == ExecCmd(words)
    with pytest.raises(ShellSyntaxError, match="too many args"):
        parse_command(" ".join(words + ["extra"]))


def test_tokenizer_sequence():
    tokens = Tokenizer("ls>>out|wc")
    seen = [tokens.next_token() for _ in range(5)]
    assert seen == [
        Token("a", "ls"),
        Token("+", ">>"),
        Token("a", "out"),
        Token("|", "|"),
        Token("a", "wc"),
    ]
    assert tokens.next_token() == Token("", "")


def test_tokenizer_peek_skips_whitespace():
    tokens = Tokenizer("   \t; x")
    assert tokens.peek(";")
    assert not tokens.peek("|")
    assert tokens.next_token() == Token(";", ";")