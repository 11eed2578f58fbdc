"""
Static typography and geometry tables for carousel slides.

Three groups of read-only configuration:
1. FONT ROLES - size, weight, line height and minimum size per text role
2. CANVAS GEOMETRY - slide size, paddings, content offsets, spacing
3. COLORS - default background, text constants and accent fallback
4. STYLES - per-style backgrounds and decorative shape outlines
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FontRole:
    """Typography for one kind of text on a slide."""
    name: str
    size: int
    weight: str = "normal"
    line_height_ratio: float = 1.4
    min_size: Optional[int] = None  # None = fixed size, never fitted

    def line_height(self, size: Optional[int] = None) -> int:
        return round((size or self.size) * self.line_height_ratio)


# ============================================
# FONT ROLES
# ============================================
FONT_ROLES = {
    "title_intro": FontRole("title_intro", 128, "bold", 1.1, min_size=80),
    "subtitle_intro": FontRole("subtitle_intro", 64, "normal", 1.25, min_size=44),
    "title_text_with_content": FontRole("title_text_with_content", 96, "bold", 1.2, min_size=64),
    "title_text_only": FontRole("title_text_only", 136, "bold", 1.2, min_size=88),
    "text": FontRole("text", 64, "normal", 1.4, min_size=40),
    "quote_large": FontRole("quote_large", 96, "bold", 1.2, min_size=56),
    "quote_medium": FontRole("quote_medium", 80, "bold", 1.25, min_size=52),
    "quote_small": FontRole("quote_small", 64, "bold", 1.3, min_size=44),
    "header_footer": FontRole("header_footer", 48, "normal", 1.4),
}

QUOTE_ROLES = {
    "large": "quote_large",
    "medium": "quote_medium",
    "small": "quote_small",
}


# ============================================
# CANVAS GEOMETRY
# ============================================
CANVAS = {
    "width": 1600,
    "height": 2000,
    "padding": 144,
    "header_footer_padding": 192,  # baseline offset of header/footer text from the edge
    "content_start_y": 420,
    "avatar_size": 100,
    "avatar_gap": 16,
    "avatar_lift": 9,  # centers the avatar on the username glyphs rather than the baseline
    "border_radius": 64,
}

SPACING = {
    "title_to_body": 80,
    "paragraph": 64,
    "bullet_indent": 32,
}

BULLET_MARKER = "→"
NEXT_ARROW = "→"
HEADER_FOOTER_OPACITY = 0.7
SUBTITLE_OPACITY = 0.9


# ============================================
# COLORS
# ============================================
COLORS = {
    "default_background": "#ffffff",
    "default_text": "#000000",
    "accent_fallback": "#6366F1",
    "light_text": "#ffffff",
    "dark_text": "#000000",
}


def get_font_role(role_id: str) -> FontRole:
    """Get a font role by ID."""
    if role_id not in FONT_ROLES:
        raise ValueError(f"Unknown font role: {role_id}")
    return FONT_ROLES[role_id]


def get_quote_role(size_hint: Optional[str]) -> FontRole:
    """Get the font role for a quote size hint (defaults to large)."""
    return FONT_ROLES[QUOTE_ROLES.get(size_hint or "large", "quote_large")]


def content_box() -> tuple[int, int, int]:
    """Return (top, width, height) of the slide content area."""
    top = CANVAS["content_start_y"]
    width = CANVAS["width"] - CANVAS["padding"] * 2
    height = CANVAS["height"] - top - CANVAS["header_footer_padding"]
    return top, width, height


# ============================================
# STYLES
# ============================================
# Backgrounds: "default" = configured default background, "brand" = brand color,
# or a hex color. accent_lighten raises the brand color's HSL lightness (in
# percent points) for accent slides.
# Shapes are quadratic outlines in a 400x500 box, drawn on intro and quote slides.
STYLES = {
    "default": {
        "id": "default",
        "name": "Minimal",
        "description": "Light slides with brand-colored accent slides",
        "background": "default",
        "accent_lighten": 0,
        "shape": "M 100,25 Q 200,50 300,75 Q 350,100 380,150 Q 350,200 300,275 "
                 "Q 200,350 100,325 Q 50,250 25,175 Q 50,100 100,25",
    },
    "bright": {
        "id": "bright",
        "name": "Bright",
        "description": "Brand-colored slides with lighter accent slides",
        "background": "brand",
        "accent_lighten": 30,
        "shape": "M 80,80 Q 180,40 280,80 Q 330,120 360,160 Q 320,220 260,280 "
                 "Q 180,340 100,320 Q 40,260 60,200 Q 80,140 80,80",
    },
    "elegant": {
        "id": "elegant",
        "name": "Elegant",
        "description": "Dark slides with muted brand accent slides",
        "background": "#1a1a1a",
        "accent_lighten": 15,
        "shape": "M 90,60 Q 190,80 290,70 Q 340,110 370,150 Q 330,210 270,270 "
                 "Q 190,330 110,310 Q 60,260 80,200 Q 100,140 90,60",
    },
}

SHAPE = {
    "box": (400, 500),
    "scale": 1.1,
    "offset": (80, -80),  # canvas px
    "stroke": 8,
    "opacity": 0.12,
    "steps": 16,  # samples per curve segment
}


def get_style(style_id: Optional[str]) -> dict:
    """Get a style by ID (defaults to "default")."""
    style_id = style_id or "default"
    if style_id not in STYLES:
        raise ValueError(f"Unknown style: {style_id}")
    return STYLES[style_id]


def list_styles():
    """List all styles."""
    return [{"id": s["id"], "name": s["name"], "description": s["description"]} for s in STYLES.values()]
