"""Render plan builder - absolute run positions, colors and underline spans."""

from dataclasses import dataclass, field

from .color import ColorDecision
from .wrap import Line

UNDERLINE_THICKNESS_RATIO = 0.045
UNDERLINE_OFFSET_RATIO = 0.12


@dataclass(frozen=True)
class UnderlineSpan:
    """One continuous underline stroke."""
    x1: float
    x2: float
    y: float
    color: str
    thickness: int


@dataclass
class PositionedRun:
    text: str
    x: float
    y: float  # baseline
    width: float
    bold: bool
    underline: bool
    color: str
    is_space: bool = False


@dataclass
class PositionedLine:
    runs: list[PositionedRun]
    x: float
    y: float  # baseline
    width: float


@dataclass
class RenderPlan:
    """Everything the rasterizer needs to draw one text block."""
    lines: list[PositionedLine] = field(default_factory=list)
    underlines: list[UnderlineSpan] = field(default_factory=list)
    line_height: int = 0
    font_size: int = 0
    weight: str = "normal"

    @property
    def height(self) -> int:
        return len(self.lines) * self.line_height


def underline_thickness(font_size: int) -> int:
    return max(1, round(font_size * UNDERLINE_THICKNESS_RATIO))


def run_color(bold: bool, underline: bool, colors: ColorDecision) -> str:
    """Bold+underline callouts take the accent color, except on accent slides."""
    if bold and underline and not colors.is_accent_slide:
        return colors.accent
    return colors.text


def build_render_plan(
    lines: list[Line],
    x: float,
    y: float,
    max_width: float,
    line_height: int,
    font_size: int,
    colors: ColorDecision,
    align: str = "left",
    weight: str = "normal",
) -> RenderPlan:
    """Position wrapped lines starting at baseline ``y`` and merge underlines.

    Spans cover the glyph advances of consecutive underlined runs that share a
    color; a plain run, a color change or the end of the line closes a span.
    """
    plan = RenderPlan(line_height=line_height, font_size=font_size, weight=weight)
    thickness = underline_thickness(font_size)
    underline_offset = round(font_size * UNDERLINE_OFFSET_RATIO)

    for index, line in enumerate(lines):
        baseline = y + index * line_height
        line_x = x
        if align == "center":
            line_x = x + max(0.0, (max_width - line.width) / 2)

        cursor = line_x
        positioned = []
        open_span = None  # [x1, x2, color]

        for run in line.runs:
            color = run_color(run.bold, run.underline, colors)
            positioned.append(PositionedRun(
                text=run.display_text,
                x=cursor,
                y=baseline,
                width=run.width,
                bold=run.bold,
                underline=run.underline,
                color=color,
                is_space=run.is_space,
            ))

            if run.underline:
                if open_span and open_span[2] == color:
                    open_span[1] = cursor + run.width
                else:
                    if open_span:
                        plan.underlines.append(UnderlineSpan(open_span[0], open_span[1], baseline + underline_offset, open_span[2], thickness))
                    open_span = [cursor, cursor + run.width, color]
            elif open_span:
                plan.underlines.append(UnderlineSpan(open_span[0], open_span[1], baseline + underline_offset, open_span[2], thickness))
                open_span = None

            cursor += run.width

        if open_span:
            plan.underlines.append(UnderlineSpan(open_span[0], open_span[1], baseline + underline_offset, open_span[2], thickness))

        plan.lines.append(PositionedLine(positioned, line_x, baseline, line.width))

    return plan
