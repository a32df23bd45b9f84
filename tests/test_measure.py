from __future__ import annotations

from rubric_report.pipeline.measure import FontSpec, box_height, wrap


BODY = FontSpec("Helvetica", 10)


def test_lines_fit_width() -> None:
    text = "Lessons are sequenced so that prior knowledge is revisited before new content is introduced. " * 4
    lines = wrap(text, 200, BODY)
    assert len(lines) > 1
    assert all(BODY.width(line) <= 200 for line in lines)
    assert " ".join(lines).split() == text.split()


def test_empty_text_is_one_empty_line() -> None:
    assert wrap("", 440, BODY) == [""]
    assert wrap("   ", 440, BODY) == [""]


def test_long_token_is_hard_broken() -> None:
    token = "x" * 400
    lines = wrap(token, 100, BODY)
    assert len(lines) > 1
    assert "".join(lines) == token
    assert all(BODY.width(line) <= 100 for line in lines)


def test_long_token_continues_with_following_words() -> None:
    lines = wrap("https://example.org/" + "a" * 120 + " end", 100, BODY)
    assert lines[-1].endswith("end")


def test_newlines_start_new_lines() -> None:
    assert wrap("first\n\nsecond", 440, BODY) == ["first", "", "second"]


def test_wrap_is_deterministic() -> None:
    text = "Assessment information is used to adapt teaching. " * 10
    assert wrap(text, 300, BODY) == wrap(text, 300, BODY)


def test_box_height_grows_per_line() -> None:
    assert box_height(0) == 28
    assert box_height(3) - box_height(2) == 14
    assert box_height(2, labelled=False) == box_height(2) - 16
