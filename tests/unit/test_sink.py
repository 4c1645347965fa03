# tests/unit/test_sink.py: Unit tests for the stream sink.

import io
import threading

import pytest

from lambdalog.sink import StreamSink

def test_writes_to_explicit_stream():
    stream = io.StringIO()
    sink = StreamSink(stream)
    sink('{"text":"a"}\n')
    assert stream.getvalue() == '{"text":"a"}\n'

def test_default_streams_are_looked_up_per_write(capsys):
    """Tests that stdout and stderr are resolved when writing, not when created."""
    StreamSink()("to stdout\n")
    StreamSink(default="stderr")("to stderr\n")

    captured = capsys.readouterr()
    assert captured.out == "to stdout\n"
    assert captured.err == "to stderr\n"

def test_unknown_default_stream():
    with pytest.raises(ValueError):
        StreamSink(default="file")

def test_concurrent_writes_do_not_interleave():
    """Tests that each record is written whole under concurrent use."""
    stream = io.StringIO()
    sink = StreamSink(stream)
    line = "x" * 200 + "\n"

    threads = [threading.Thread(target=lambda: [sink(line) for _ in range(50)]) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert stream.getvalue().splitlines() == [line.strip()] * 400
