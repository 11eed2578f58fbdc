"""
Pillow rasterization for carousel slides.

- PillowBackend: font loading, text measurement and drawing primitives
- CarouselRenderer: composes every slide and paints it onto a canvas
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from ..config import get_settings
from ..design_templates import CANVAS, COLORS, FONT_ROLES, HEADER_FOOTER_OPACITY, SHAPE, get_style
from ..models import SlideContent
from .avatar import circular_avatar
from .layout.color import ColorDecision, parse_hex, resolve_slide_colors
from .layout.composer import ComposeOptions, SlideComposer, SlideLayout
from .layout.fonts import FontCache, parse_descriptor

logger = logging.getLogger(__name__)

WIDTH = CANVAS["width"]
HEIGHT = CANVAS["height"]

FONT_FILES = {
    "regular": "Montserrat-Regular.ttf",
    "medium": "Montserrat-Medium.ttf",
    "semibold": "Montserrat-SemiBold.ttf",
    "bold": "Montserrat-Bold.ttf",
    "extrabold": "Montserrat-ExtraBold.ttf",
}

WEIGHT_ALIASES = {"normal": "regular"}

_PATH_RE = re.compile(r"([MQ])([-\d.,\s]+)")


def blend(color: str, background: str, opacity: float) -> tuple:
    """Mix a color over a solid background."""
    if opacity >= 1:
        return parse_hex(color)
    fg = parse_hex(color)
    bg = parse_hex(background)
    return tuple(round(f * opacity + b * (1 - opacity)) for f, b in zip(fg, bg))


@lru_cache(maxsize=16)
def shape_outline(path: str, steps: int = SHAPE["steps"]) -> tuple:
    """Sample an "M x,y Q cx,cy x,y ..." outline into canvas points."""
    points = []
    current = (0.0, 0.0)
    for command, args in _PATH_RE.findall(path):
        nums = [float(n) for n in re.split(r"[\s,]+", args.strip())]
        if command == "M":
            current = (nums[0], nums[1])
            points.append(current)
            continue
        for i in range(0, len(nums) - 3, 4):
            cx, cy, x, y = nums[i:i + 4]
            x0, y0 = current
            for step in range(1, steps + 1):
                t = step / steps
                points.append((
                    (1 - t) ** 2 * x0 + 2 * (1 - t) * t * cx + t * t * x,
                    (1 - t) ** 2 * y0 + 2 * (1 - t) * t * cy + t * t * y,
                ))
            current = (x, y)

    scale = WIDTH / SHAPE["box"][0] * SHAPE["scale"]
    dx, dy = SHAPE["offset"]
    return tuple((x * scale + dx, y * scale + dy) for x, y in points)


class PillowBackend:
    """Measures and draws text with Montserrat TrueType fonts."""

    def __init__(self, font_path: Optional[str] = None, cache_size: int = 256):
        self.font_path = Path(font_path or get_settings().font_path)
        self.fonts = self._load_fonts()
        self.font = lru_cache(maxsize=cache_size)(self._load_font)

    def _load_fonts(self) -> dict:
        """Map weight -> font file. Missing weights fall back to bold."""
        fonts = {}
        bold = self.font_path / FONT_FILES["bold"]

        for weight, filename in FONT_FILES.items():
            path = self.font_path / filename
            if path.exists():
                fonts[weight] = str(path)
            elif bold.exists():
                fonts[weight] = str(bold)

        if not fonts:
            logger.warning(f"No Montserrat fonts in {self.font_path}; using Pillow's default font")
        return fonts

    def _load_font(self, descriptor: str) -> ImageFont.FreeTypeFont:
        weight, size, _ = parse_descriptor(descriptor)
        weight = WEIGHT_ALIASES.get(weight, weight)
        path = self.fonts.get(weight, self.fonts.get("bold"))
        if path:
            return ImageFont.truetype(path, size)
        return ImageFont.load_default(size=size)

    def measure_text(self, text: str, descriptor: str) -> float:
        return self.font(descriptor).getlength(text)

    def draw_text(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        x: float,
        y: float,
        descriptor: str,
        color,
        anchor: str = "ls",
    ):
        draw.text((x, y), text, font=self.font(descriptor), fill=color, anchor=anchor)

    def stroke_line(self, draw: ImageDraw.ImageDraw, x1: float, y1: float, x2: float, y2: float, color, thickness: int):
        draw.line([(x1, y1), (x2, y2)], fill=color, width=thickness)

    def finalize(self, img: Image.Image) -> bytes:
        buffer = BytesIO()
        img.save(buffer, "PNG")
        return buffer.getvalue()


@dataclass
class RenderedSlide:
    index: int
    png: bytes
    adapted: bool = False
    failed: bool = False


class CarouselRenderer:
    """Renders a list of slides to PNG images."""

    def __init__(
        self,
        options: Optional[ComposeOptions] = None,
        backend: Optional[PillowBackend] = None,
        avatar: Optional[Image.Image] = None,
        workers: Optional[int] = None,
    ):
        settings = get_settings()
        self.backend = backend or PillowBackend(settings.font_path)
        self.workers = max(1, workers or settings.render_workers)
        self.avatar = circular_avatar(avatar, CANVAS["avatar_size"]) if avatar is not None else None

        options = options or ComposeOptions()
        options.has_avatar = self.avatar is not None
        self.options = options
        self.composer = SlideComposer(self.backend, options, FontCache())

    def _canvas(
        self,
        background: str,
        shape: Optional[str] = None,
        shape_color: Optional[str] = None,
    ) -> tuple[Image.Image, ImageDraw.ImageDraw]:
        """Rounded slide background, with the style's outline drawn faintly when given."""
        img = Image.new("RGBA", (WIDTH, HEIGHT), background)
        draw = ImageDraw.Draw(img)
        if shape and shape_color:
            draw.line(
                shape_outline(shape),
                fill=blend(shape_color, background, SHAPE["opacity"]),
                width=SHAPE["stroke"],
                joint="curve",
            )

        mask = Image.new("L", (WIDTH, HEIGHT), 0)
        ImageDraw.Draw(mask).rounded_rectangle([0, 0, WIDTH - 1, HEIGHT - 1], radius=CANVAS["border_radius"], fill=255)
        img.putalpha(mask)
        return img, draw

    def paint(self, layout: SlideLayout) -> Image.Image:
        background = layout.colors.background
        shape = get_style(self.options.style)["shape"] if layout.show_shape else None
        img, draw = self._canvas(background, shape, layout.colors.text)
        fonts = self.composer.fonts

        for block in layout.blocks:
            plan = block.plan
            for line in plan.lines:
                for run in line.runs:
                    if run.is_space or not run.text:
                        continue
                    weight = "bold" if run.bold else plan.weight
                    self.backend.draw_text(
                        draw, run.text, run.x, run.y,
                        fonts.descriptor(weight, plan.font_size),
                        blend(run.color, background, block.opacity),
                    )
            for span in plan.underlines:
                self.backend.stroke_line(
                    draw, span.x1, span.y, span.x2, span.y,
                    blend(span.color, background, block.opacity), span.thickness,
                )

        for item in layout.items:
            self.backend.draw_text(
                draw, item.text, item.x, item.y, item.descriptor,
                blend(item.color, background, item.opacity), anchor=item.anchor,
            )

        if self.avatar is not None and layout.avatar_box:
            x, y, _ = layout.avatar_box
            img.paste(self.avatar, (int(x), int(y)), self.avatar)

        return img

    def render_slide(self, slide: SlideContent, number: int, total: int) -> tuple[Image.Image, SlideLayout]:
        layout = self.composer.compose(slide, number, total)
        return self.paint(layout), layout

    def placeholder(self, number: int, total: int, colors: Optional[ColorDecision] = None) -> Image.Image:
        """Plain slide with only the page counter, used when a slide fails."""
        colors = colors or resolve_slide_colors(
            self.options.brand_color, False, self.options.default_background, self.options.style,
        )
        img, draw = self._canvas(colors.background)
        role = FONT_ROLES["header_footer"]
        self.backend.draw_text(
            draw, f"{number}/{total}", WIDTH - CANVAS["padding"], CANVAS["header_footer_padding"],
            self.composer.fonts.descriptor(role.weight, role.size),
            blend(colors.text, colors.background, HEADER_FOOTER_OPACITY), anchor="rs",
        )
        return img

    def _render_safe(self, index: int, slide: SlideContent, total: int) -> RenderedSlide:
        number = index + 1
        try:
            img, layout = self.render_slide(slide, number, total)
            return RenderedSlide(index, self.backend.finalize(img), adapted=layout.adapted)
        except Exception:
            logger.exception(f"Slide {number}/{total} failed to render; using placeholder")
            try:
                return RenderedSlide(index, self.backend.finalize(self.placeholder(number, total)), failed=True)
            except Exception:
                logger.exception(f"Placeholder for slide {number} failed too")
                blank = Image.new("RGB", (WIDTH, HEIGHT), COLORS["default_background"])
                return RenderedSlide(index, self.backend.finalize(blank), failed=True)

    def render_all(self, slides: list[SlideContent]) -> list[RenderedSlide]:
        """Render all slides in a thread pool. Output order matches input order."""
        total = len(slides)
        if not total:
            return []

        with ThreadPoolExecutor(max_workers=min(self.workers, total)) as pool:
            results = list(pool.map(lambda pair: self._render_safe(pair[0], pair[1], total), enumerate(slides)))

        failed = [r.index for r in results if r.failed]
        if failed:
            logger.warning(f"Rendered {total} slides with {len(failed)} placeholders: {failed}")
        else:
            logger.info(f"Rendered {total} slides")
        return results


def get_renderer(options: Optional[ComposeOptions] = None, avatar: Optional[Image.Image] = None) -> CarouselRenderer:
    """Get renderer instance with the given layout options and avatar."""
    return CarouselRenderer(options, avatar=avatar)
