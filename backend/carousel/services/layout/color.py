"""Color contrast policy - text and accent colors from a background color.

Uses relative luminance with the sRGB transfer curve. Luminance above 0.5
gets dark text, everything else light text. Bad color strings never escape
this module: they resolve to a documented default and are logged.
"""

import colorsys
import logging
from dataclasses import dataclass
from typing import Optional

from ...design_templates import COLORS, get_style

logger = logging.getLogger(__name__)

LUMINANCE_THRESHOLD = 0.5


class ColorParseError(ValueError):
    """Raised when a color string is not a hex color."""


@dataclass(frozen=True)
class ColorResult:
    """A resolved color, flagged when a default had to be substituted."""
    value: str
    substituted: bool = False
    reason: Optional[str] = None


@dataclass(frozen=True)
class ColorDecision:
    """Resolved colors for one slide."""
    background: str
    text: str
    accent: str
    is_accent_slide: bool = False


def parse_hex(value: str) -> tuple[int, int, int]:
    """Parse #rgb / #rrggbb (leading # optional) into an RGB tuple."""
    if not isinstance(value, str):
        raise ColorParseError(f"Color must be a string, got {type(value).__name__}")
    cleaned = value.strip().lstrip("#")
    if len(cleaned) == 3:
        cleaned = "".join(ch * 2 for ch in cleaned)
    if len(cleaned) != 6:
        raise ColorParseError(f"Invalid hex color: {value!r}")
    try:
        return int(cleaned[0:2], 16), int(cleaned[2:4], 16), int(cleaned[4:6], 16)
    except ValueError:
        raise ColorParseError(f"Invalid hex color: {value!r}") from None


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: tuple[int, int, int]) -> float:
    r, g, b = (_linearize(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(color_a: str, color_b: str) -> float:
    """WCAG contrast ratio between two hex colors (1.0 - 21.0)."""
    lum_a = relative_luminance(parse_hex(color_a))
    lum_b = relative_luminance(parse_hex(color_b))
    brightest, darkest = max(lum_a, lum_b), min(lum_a, lum_b)
    return (brightest + 0.05) / (darkest + 0.05)


def is_light(background: str) -> bool:
    return relative_luminance(parse_hex(background)) > LUMINANCE_THRESHOLD


def resolve_text_color(background: str) -> ColorResult:
    """Dark text on light backgrounds, light text on dark ones."""
    try:
        light = is_light(background)
    except ColorParseError as e:
        logger.warning(f"Contrast check failed for {background!r}: {e}; using dark text")
        return ColorResult(COLORS["dark_text"], substituted=True, reason=str(e))
    return ColorResult(COLORS["dark_text"] if light else COLORS["light_text"])


def to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def lighten(color: str, amount: float) -> str:
    """Raise HSL lightness by ``amount`` percent points, capped at white."""
    r, g, b = (c / 255 for c in parse_hex(color))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    r, g, b = colorsys.hls_to_rgb(h, min(1.0, l + amount / 100), s)
    return to_hex((round(r * 255), round(g * 255), round(b * 255)))


def accent_color_for(background: str, brand_color: str) -> ColorResult:
    """Accent for callouts: the brand color on light backgrounds, light text on dark.

    On a background that is the brand color itself the accent would vanish, so
    the regular text color is used instead.
    """
    try:
        light = is_light(background)
        same = parse_hex(background) == parse_hex(brand_color)
    except ColorParseError as e:
        logger.warning(f"Accent check failed for {background!r}: {e}; using brand color")
        return ColorResult(brand_color, substituted=True, reason=str(e))
    if same:
        return ColorResult(COLORS["dark_text"] if light else COLORS["light_text"])
    return ColorResult(brand_color if light else COLORS["light_text"])


def style_background(style: dict, brand_color: str, accent: bool, default_background: str) -> str:
    """Background for one slide under a style."""
    if accent:
        return lighten(brand_color, style["accent_lighten"]) if style["accent_lighten"] else brand_color
    base = style["background"]
    if base == "default":
        return default_background
    if base == "brand":
        return brand_color
    return base


def resolve_slide_colors(
    brand_color: str,
    accent: bool,
    default_background: str = COLORS["default_background"],
    style: Optional[str] = None,
) -> ColorDecision:
    """Pick background, text and accent colors for one slide."""
    try:
        parse_hex(brand_color)
    except ColorParseError as e:
        logger.warning(f"Brand color rejected: {e}; falling back to {COLORS['accent_fallback']}")
        brand_color = COLORS["accent_fallback"]

    background = style_background(get_style(style), brand_color, accent, default_background)
    text = resolve_text_color(background)
    accent_color = accent_color_for(background, brand_color)

    if not text.substituted:
        logger.debug(
            f"Slide colors: bg={background} text={text.value} accent={accent_color.value} "
            f"contrast={contrast_ratio(background, text.value):.2f}"
        )

    return ColorDecision(
        background=background if not text.substituted else COLORS["default_background"],
        text=text.value,
        accent=accent_color.value,
        is_accent_slide=accent,
    )
