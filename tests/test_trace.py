import io

import pytest

from light_evm.utils.trace import (
    MARKER,
    KeypressConfirmation,
    RecordingTracer,
    Tracer,
    format_progress,
    format_stack,
    no_confirmation,
)


def test_progress_marks_program_counter():
    assert format_progress(bytes([0x60, 0x05, 0x01]), 0) == "Bytecode:\n60 05 01\n↑"
    assert format_progress(bytes([0x60, 0x05, 0x01]), 2) == "Bytecode:\n60 05 01\n      ↑"


def test_progress_wraps_rows_of_sixteen():
    code = bytes(range(17))
    lines = format_progress(code, 16).split("\n")
    assert lines[1].split() == [f"{i:02x}" for i in range(16)]
    assert lines[2:] == ["10", MARKER]

    lines = format_progress(code, 3).split("\n")
    assert lines[2] == " " * 9 + MARKER
    assert lines[3] == "10"


def test_progress_for_empty_code():
    assert format_progress(b"", 0) == "Bytecode:\n↑"


def test_stack_is_rendered_top_first():
    assert format_stack([5, 6]).split("\n") == [
        "Stack:",
        "╭────╮",
        "│ 06 │",
        "├────┤",
        "│ 05 │",
        "├────┤",
    ]


def test_empty_stack_shows_a_free_slot():
    assert format_stack([]).split("\n") == ["Stack:", "╭────╮", "│    │", "├────┤"]


def test_stack_box_grows_with_wide_values():
    lines = format_stack([0xFFFFFFFF, 1]).split("\n")
    assert lines[2] == "│ 00000001 │"
    assert lines[4] == "│ ffffffff │"
    assert lines[1] == "╭" + "─" * 10 + "╮"


def test_tracer_writes_to_stream():
    stream = io.StringIO()
    tracer = Tracer(stream=stream)
    tracer.before_step(b"\x00", 0)
    tracer.after_step([1])
    tracer.note("PUSH1(1)")
    assert stream.getvalue().splitlines()[1:4] == ["Bytecode:", "00", "↑"]
    assert stream.getvalue().endswith("PUSH1(1)\n")


def test_tracer_defaults_to_stdout(capsys):
    Tracer().message("hello")
    assert capsys.readouterr().out == "hello\n"


def test_recording_tracer_splits_lines():
    tracer = RecordingTracer()
    tracer.message("a\nb")
    tracer.note("c")
    assert tracer.lines == ["a", "b", "c"]
    assert tracer.text == "a\nb\nc"


def test_keypress_waits_for_key():
    stream = io.StringIO("abc\npq")
    confirm = KeypressConfirmation("p", stream=stream)
    confirm()
    assert stream.read() == "q"


def test_keypress_stops_pausing_at_end_of_input():
    stream = io.StringIO("x")
    confirm = KeypressConfirmation("p", stream=stream)
    confirm()
    assert confirm.exhausted
    confirm()


def test_keypress_requires_single_character():
    with pytest.raises(ValueError):
        KeypressConfirmation("pp")


def test_no_confirmation_returns_immediately():
    assert no_confirmation() is None
