import io
import sys

from xvkit.wc import WordCount, count, count_stream, main


def test_empty():
    assert count(b"") == WordCount(0, 0, 0)


def test_simple_text_invariants():
    data = b"hello world\nsecond line here\n"
    result = count(data)
    assert result.chars == len(data)
    assert result.lines == data.count(b"\n")
    assert result.words == len(data.split())


def test_nul_separates_words():
    assert count(b"a\0b").words == count(b"a b").words
    assert count(b"a\0b").words == 2


def test_stream_matches_block_across_chunk_boundary():
    data = b"x" * 1000 + b" " + b"y" * 600 + b"\n"
    assert count_stream(io.BytesIO(data)) == count(data)
    assert count(data).words == 2


def test_leading_and_repeated_whitespace():
    data = b"  \t a   b\r\n\v c "
    assert count(data) == count_stream(io.BytesIO(data))
    assert count(data).words == 3


def test_main_on_file(tmp_path, capsys):
    path = tmp_path / "f.txt"
    data = b"one two\nthree\n"
    path.write_bytes(data)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == count(data).report(str(path)) + "\n"


def test_main_cannot_open_stops(tmp_path, capsys):
    good = tmp_path / "g"
    good.write_bytes(b"z\n")
    missing = tmp_path / "missing"
    assert main([str(missing), str(good)]) == 1
    out = capsys.readouterr().out
    assert out == f"wc: cannot open {missing}\n"


def test_main_reads_stdin(monkeypatch, capsys):
    data = b"a b c\n"
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
    assert main([]) == 0
    assert capsys.readouterr().out == count(data).report("") + "\n"