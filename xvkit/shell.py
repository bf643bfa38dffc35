"""Parser for the shell's command language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Union

MAXARGS = 10

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"

END = ""
WORD = "a"
APPEND = "+"


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


class RedirMode(Enum):
    """How a redirected file is opened."""

    READ = "read"
    WRITE = "write-create"


@dataclass
class ExecCmd:
    """A program with its arguments."""

    argv: List[str] = field(default_factory=list)


@dataclass
class RedirCmd:
    """A command with one file descriptor redirected."""

    cmd: "Command"
    file: str
    mode: RedirMode
    fd: int


@dataclass
class PipeCmd:
    """Output of left feeds input of right."""

    left: "Command"
    right: "Command"


@dataclass
class ListCmd:
    """Run left, then right."""

    left: "Command"
    right: "Command"


@dataclass
class BackCmd:
    """Run a command in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


class Token(NamedTuple):
    """A token kind and the text it spans."""

    kind: str
    text: str


class Tokenizer:
    """Splits a command line into words and symbols."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.pos :]

    def peek(self, toks: str) -> bool:
        """Skip whitespace; true if the next character is one of toks."""
        self._skip_space()
        return not self.at_end and self.text[self.pos] in toks

    def next_token(self) -> Token:
        """Consume and return the next token; kind END at the end of input."""
        self._skip_space()
        start = self.pos
        text = self.text
        if self.at_end:
            return Token(END, "")
        c = text[self.pos]
        if c in "|();&<":
            kind = c
            self.pos += 1
        elif c == ">":
            kind = c
            self.pos += 1
            if self.pos < len(text) and text[self.pos] == ">":
                kind = APPEND
                self.pos += 1
        else:
            kind = WORD
            while (
                self.pos < len(text)
                and text[self.pos] not in WHITESPACE
                and text[self.pos] not in SYMBOLS
            ):
                self.pos += 1
        token = Token(kind, text[start : self.pos])
        self._skip_space()
        return token


def parse_command(s: str) -> Command:
    """Parse a whole command line into a command tree."""
    tokens = Tokenizer(s)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if not tokens.at_end:
        raise ShellSyntaxError(f"syntax: leftovers: {tokens.rest}")
    return cmd


def _parse_line(tokens: Tokenizer) -> Command:
    cmd = _parse_pipe(tokens)
    while tokens.peek("&"):
        tokens.next_token()
        cmd = BackCmd(cmd)
    if tokens.peek(";"):
        tokens.next_token()
        cmd = ListCmd(cmd, _parse_line(tokens))
    return cmd


def _parse_pipe(tokens: Tokenizer) -> Command:
    cmd = _parse_exec(tokens)
    if tokens.peek("|"):
        tokens.next_token()
        cmd = PipeCmd(cmd, _parse_pipe(tokens))
    return cmd


def _parse_redirs(cmd: Command, tokens: Tokenizer) -> Command:
    while tokens.peek("<>"):
        tok = tokens.next_token()
        target = tokens.next_token()
        if target.kind != WORD:
            raise ShellSyntaxError("missing file for redirection")
        if tok.kind == "<":
            cmd = RedirCmd(cmd, target.text, RedirMode.READ, 0)
        else:
            cmd = RedirCmd(cmd, target.text, RedirMode.WRITE, 1)
    return cmd


def _parse_block(tokens: Tokenizer) -> Command:
    if not tokens.peek("("):
        raise ShellSyntaxError("parseblock")
    tokens.next_token()
    cmd = _parse_line(tokens)
    if not tokens.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    tokens.next_token()
    return _parse_redirs(cmd, tokens)


def _parse_exec(tokens: Tokenizer) -> Command:
    if tokens.peek("("):
        return _parse_block(tokens)
    exec_cmd = ExecCmd()
    ret = _parse_redirs(exec_cmd, tokens)
    while not tokens.peek("|)&;"):
        tok = tokens.next_token()
        if tok.kind == END:
            break
        if tok.kind != WORD:
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(tok.text)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parse_redirs(ret, tokens)
    return ret