import pytest

from carousel.services.layout.color import ColorDecision
from carousel.services.layout.plan import build_render_plan, run_color, underline_thickness
from carousel.services.layout.tokenizer import tokenize
from carousel.services.layout.wrap import WrapEngine

COLORS = ColorDecision(background="#ffffff", text="#000000", accent="#6366F1", is_accent_slide=False)
ACCENT_COLORS = ColorDecision(background="#6366F1", text="#ffffff", accent="#ffffff", is_accent_slide=True)


def fake_measure(text: str, bold: bool) -> float:
    return len(text) * (12 if bold else 10)


def _plan(text: str, width: float = 10000, colors: ColorDecision = COLORS, **kwargs):
    lines = WrapEngine(fake_measure, 64).wrap(tokenize(text), width)
    return build_render_plan(lines, 100, 200, width, 90, 64, colors, **kwargs)


def test_fully_underlined_line_gives_one_span() -> None:
    plan = _plan("__hello underlined world__")
    line = plan.lines[0]
    assert len(plan.underlines) == 1
    span = plan.underlines[0]
    assert span.x1 == line.x
    assert span.x2 == pytest.approx(line.x + line.width)
    assert span.y == 200 + round(64 * 0.12)
    assert span.thickness == underline_thickness(64) == 3


def test_mixed_styles_end_to_end() -> None:
    plan = _plan("A **bold** and __underlined__ and **__both__** text.")
    assert len(plan.lines) == 1
    assert len(plan.underlines) == 2

    runs = {run.text: run for run in plan.lines[0].runs}
    first, second = plan.underlines
    assert first.x1 == runs["underlined"].x
    assert first.x2 == pytest.approx(runs["underlined"].x + fake_measure("underlined", False))
    assert first.color == COLORS.text
    assert second.x1 == runs["both"].x
    assert second.x2 == pytest.approx(runs["both"].x + fake_measure("both", True))
    assert second.color == COLORS.accent


def test_runs_are_laid_out_left_to_right() -> None:
    plan = _plan("one two", width=1000)
    xs = [run.x for run in plan.lines[0].runs]
    assert xs == sorted(xs)
    assert xs[0] == 100


def test_lines_advance_by_line_height() -> None:
    plan = _plan("one two three", width=0)
    assert [line.y for line in plan.lines] == [200, 290, 380]
    assert plan.height == 270


def test_center_alignment_offsets_line() -> None:
    plan = _plan("abc", width=1000, align="center")
    assert plan.lines[0].x == 100 + (1000 - 30) / 2


def test_color_change_closes_span() -> None:
    plan = _plan("__plain__**__bold__**")
    assert [span.color for span in plan.underlines] == [COLORS.text, COLORS.accent]


def test_accent_slide_uses_text_color_for_callouts() -> None:
    assert run_color(True, True, ACCENT_COLORS) == ACCENT_COLORS.text
    assert run_color(True, True, COLORS) == COLORS.accent
    assert run_color(True, False, COLORS) == COLORS.text


def test_empty_text_gives_empty_plan() -> None:
    plan = _plan("")
    assert plan.lines == []
    assert plan.underlines == []
    assert plan.height == 0
