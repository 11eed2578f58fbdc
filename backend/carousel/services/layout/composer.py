"""Slide composer - turns one SlideContent into positioned, colored text blocks."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from ...design_templates import (
    BULLET_MARKER, CANVAS, COLORS, HEADER_FOOTER_OPACITY, NEXT_ARROW, SPACING,
    SUBTITLE_OPACITY, FontRole, content_box, get_font_role, get_quote_role,
)
from ...models import ListBlock, SlideContent, SlideKind
from .color import ColorDecision, resolve_slide_colors
from .fit import FitResult, estimate_line_count, fit_font_size
from .fonts import FontCache
from .plan import RenderPlan, build_render_plan
from .tokenizer import StyleRun, strip_markup, tokenize
from .typography import preprocess
from .wrap import WrapEngine

logger = logging.getLogger(__name__)

BASELINE_RATIO = 0.8  # first baseline sits this far down the first line box


class TextMeasurer(Protocol):
    def measure_text(self, text: str, descriptor: str) -> float: ...


@dataclass
class ComposeOptions:
    brand_color: str = COLORS["accent_fallback"]
    default_background: str = COLORS["default_background"]
    author_username: str = "@username"
    author_full_name: str = "Your Name"
    fit_step: int = 4
    has_avatar: bool = False
    style: str = "default"


@dataclass
class TextItem:
    """A single unwrapped string (header, footer, bullet marker)."""
    text: str
    x: float
    y: float  # baseline
    descriptor: str
    color: str
    opacity: float = 1.0
    anchor: str = "ls"  # Pillow anchor: left/right + baseline


@dataclass
class TextBlock:
    plan: RenderPlan
    opacity: float = 1.0


@dataclass
class SlideLayout:
    number: int
    total: int
    colors: ColorDecision
    blocks: list[TextBlock] = field(default_factory=list)
    items: list[TextItem] = field(default_factory=list)
    avatar_box: Optional[tuple[int, int, int]] = None  # x, y, size
    show_shape: bool = False
    adapted: bool = False


class SlideComposer:
    """Lays out slides for a measuring backend.

    One composer is shared by all slides of a carousel. It holds no per-slide
    state, so slides may be composed from several threads.
    """

    def __init__(self, measurer: TextMeasurer, options: Optional[ComposeOptions] = None, font_cache: Optional[FontCache] = None):
        self.measurer = measurer
        self.options = options or ComposeOptions()
        self.fonts = font_cache or FontCache()
        self.width = CANVAS["width"]
        self.height = CANVAS["height"]
        self.padding = CANVAS["padding"]

    # ---- measurement -------------------------------------------------

    def weight_for(self, role: FontRole, bold: bool) -> str:
        return "bold" if bold else role.weight

    def engine(self, role: FontRole, size: int) -> WrapEngine:
        def measure(text: str, bold: bool) -> float:
            return self.measurer.measure_text(text, self.fonts.descriptor(self.weight_for(role, bold), size))
        return WrapEngine(measure, size)

    @staticmethod
    def runs_for(text: Optional[str]) -> list[StyleRun]:
        return tokenize(preprocess(text or ""))

    def fit(self, runs_list: list[list[StyleRun]], role: FontRole, max_width_for, max_height: float) -> FitResult:
        """Fit one role's text (possibly several paragraphs) into max_height."""
        def count_lines(size: int) -> int:
            engine = self.engine(role, size)
            return sum(engine.count_lines(runs, max_width_for(size)) for runs in runs_list)

        if role.min_size is None:
            lines = count_lines(role.size)
            return FitResult(role.size, lines, role.line_height(), lines * role.line_height() <= max_height)
        return fit_font_size(
            count_lines,
            base_size=role.size,
            min_size=role.min_size,
            step=self.options.fit_step,
            max_height=max_height,
            line_height_ratio=role.line_height_ratio,
        )

    def plan(
        self,
        runs: list[StyleRun],
        role: FontRole,
        size: int,
        x: float,
        top: float,
        max_width: float,
        colors: ColorDecision,
        align: str = "left",
    ) -> RenderPlan:
        line_height = role.line_height(size)
        lines = self.engine(role, size).wrap(runs, max_width)
        baseline = top + round(line_height * BASELINE_RATIO)
        return build_render_plan(
            lines, x, baseline, max_width, line_height, size, colors, align=align, weight=role.weight,
        )

    # ---- slide kinds -------------------------------------------------

    def _compose_intro(self, slide: SlideContent, layout: SlideLayout):
        top, width, height = content_box()
        title_role = get_font_role("title_intro")
        sub_role = get_font_role("subtitle_intro")
        title_runs = self.runs_for(slide.title)
        sub_runs = self.runs_for(slide.subtitle)

        # rough room for the subtitle; it is fitted for real once the title is placed
        sub_reserved = 0
        if sub_runs:
            sub_lines = estimate_line_count(strip_markup(slide.subtitle), sub_role.size, width)
            sub_reserved = sub_lines * sub_role.line_height() + SPACING["title_to_body"]

        title_fit = self.fit([title_runs], title_role, lambda size: width, height - sub_reserved)
        title_plan = self.plan(title_runs, title_role, title_fit.size, self.padding, top, width, layout.colors)
        layout.blocks.append(TextBlock(title_plan))
        fits = [title_fit]

        if sub_runs:
            sub_top = top + title_plan.height + SPACING["title_to_body"]
            sub_fit = self.fit([sub_runs], sub_role, lambda size: width, top + height - sub_top)
            sub_plan = self.plan(sub_runs, sub_role, sub_fit.size, self.padding, sub_top, width, layout.colors)
            layout.blocks.append(TextBlock(sub_plan, opacity=SUBTITLE_OPACITY))
            fits.append(sub_fit)

        layout.adapted = not all(f.fits for f in fits)

    def _body_items(self, slide: SlideContent) -> list[tuple[str, bool]]:
        items = []
        for block in slide.blocks:
            if isinstance(block, ListBlock):
                items.extend((item, True) for item in block.items)
            else:
                items.append((block.text, False))
        return items

    def _compose_text(self, slide: SlideContent, layout: SlideLayout):
        top, width, height = content_box()
        body_role = get_font_role("text")
        items = [(self.runs_for(text), bullet) for text, bullet in self._body_items(slide)]
        items = [(runs, bullet) for runs, bullet in items if runs]
        fits = []
        cursor = top

        if slide.title:
            title_role = get_font_role("title_text_with_content" if items else "title_text_only")
            title_runs = self.runs_for(slide.title)
            title_height = height // 3 if items else height
            title_fit = self.fit([title_runs], title_role, lambda size: width, title_height)
            title_plan = self.plan(title_runs, title_role, title_fit.size, self.padding, cursor, width, layout.colors)
            layout.blocks.append(TextBlock(title_plan))
            fits.append(title_fit)
            cursor += title_plan.height + (SPACING["title_to_body"] if items else 0)

        if items:
            def marker_descriptor(size: int) -> str:
                return self.fonts.descriptor("bold", size)

            def indent(size: int) -> float:
                return self.measurer.measure_text(BULLET_MARKER + " ", marker_descriptor(size)) + SPACING["bullet_indent"]

            def item_width(size: int, bullet: bool) -> float:
                return width - indent(size) if bullet else width

            available = top + height - cursor - SPACING["paragraph"] * (len(items) - 1)
            bullets = [runs for runs, bullet in items if bullet]
            plain = [runs for runs, bullet in items if not bullet]

            def count_lines(size: int) -> int:
                engine = self.engine(body_role, size)
                total = sum(engine.count_lines(runs, width) for runs in plain)
                if bullets:
                    bullet_width = item_width(size, True)
                    total += sum(engine.count_lines(runs, bullet_width) for runs in bullets)
                return total

            body_fit = fit_font_size(
                count_lines,
                base_size=body_role.size,
                min_size=body_role.min_size,
                step=self.options.fit_step,
                max_height=available,
                line_height_ratio=body_role.line_height_ratio,
            )
            fits.append(body_fit)
            size = body_fit.size

            for index, (runs, bullet) in enumerate(items):
                x = self.padding
                if bullet:
                    line_height = body_role.line_height(size)
                    layout.items.append(TextItem(
                        BULLET_MARKER, x, cursor + round(line_height * BASELINE_RATIO),
                        marker_descriptor(size), layout.colors.text,
                    ))
                    x += indent(size)
                plan = self.plan(runs, body_role, size, x, cursor, item_width(size, bullet), layout.colors)
                layout.blocks.append(TextBlock(plan))
                cursor += plan.height
                if index != len(items) - 1:
                    cursor += SPACING["paragraph"]

        layout.adapted = not all(f.fits for f in fits)

    def _compose_quote(self, slide: SlideContent, layout: SlideLayout):
        top, width, height = content_box()
        role = get_quote_role(slide.size_hint)
        runs = self.runs_for(slide.text)
        quote_fit = self.fit([runs], role, lambda size: width, height)
        block_top = top + max(0, (height - quote_fit.height) // 2)
        plan = self.plan(runs, role, quote_fit.size, self.padding, block_top, width, layout.colors)
        layout.blocks.append(TextBlock(plan))
        layout.adapted = not quote_fit.fits

    def _compose_chrome(self, layout: SlideLayout):
        role = get_font_role("header_footer")
        descriptor = self.fonts.descriptor(role.weight, role.size)
        header_y = CANVAS["header_footer_padding"]
        footer_y = self.height - CANVAS["header_footer_padding"]
        color = layout.colors.text
        right = self.width - self.padding

        username_x = self.padding
        if self.options.has_avatar:
            size = CANVAS["avatar_size"]
            layout.avatar_box = (self.padding, header_y - size // 2 - CANVAS["avatar_lift"], size)
            username_x += size + CANVAS["avatar_gap"]

        layout.items.extend([
            TextItem(self.options.author_username, username_x, header_y, descriptor, color, HEADER_FOOTER_OPACITY),
            TextItem(f"{layout.number}/{layout.total}", right, header_y, descriptor, color, HEADER_FOOTER_OPACITY, anchor="rs"),
            TextItem(self.options.author_full_name, self.padding, footer_y, descriptor, color, HEADER_FOOTER_OPACITY),
        ])
        if layout.number < layout.total:
            layout.items.append(TextItem(NEXT_ARROW, right, footer_y, descriptor, color, HEADER_FOOTER_OPACITY, anchor="rs"))

    def compose(self, slide: SlideContent, number: int, total: int) -> SlideLayout:
        colors = resolve_slide_colors(
            self.options.brand_color, slide.accent, self.options.default_background, self.options.style,
        )
        layout = SlideLayout(number=number, total=total, colors=colors, show_shape=slide.kind != SlideKind.TEXT)

        if slide.kind == SlideKind.INTRO:
            self._compose_intro(slide, layout)
        elif slide.kind == SlideKind.TEXT:
            self._compose_text(slide, layout)
        else:
            self._compose_quote(slide, layout)

        self._compose_chrome(layout)
        if layout.adapted:
            logger.info(f"Slide {number}/{total}: content adapted (overflow at minimum size)")
        return layout
