import pytest

from carousel.design_templates import COLORS
from carousel.services.layout.color import (
    ColorParseError,
    accent_color_for,
    contrast_ratio,
    lighten,
    parse_hex,
    resolve_slide_colors,
    resolve_text_color,
)


def test_black_background_gets_light_text() -> None:
    assert resolve_text_color("#000000").value == COLORS["light_text"]


def test_white_background_gets_dark_text() -> None:
    assert resolve_text_color("#ffffff").value == COLORS["dark_text"]


def test_malformed_color_is_substituted() -> None:
    result = resolve_text_color("not-a-color")
    assert result.substituted
    assert result.value == COLORS["dark_text"]
    assert result.reason


def test_parse_hex() -> None:
    assert parse_hex("#abc") == (170, 187, 204)
    assert parse_hex("6366F1") == (99, 102, 241)
    with pytest.raises(ColorParseError):
        parse_hex("#12345")
    with pytest.raises(ColorParseError):
        parse_hex("#gggggg")


def test_contrast_ratio_extremes() -> None:
    assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)
    assert contrast_ratio("#777777", "#777777") == pytest.approx(1.0)


def test_accent_is_brand_on_light_and_light_on_dark() -> None:
    assert accent_color_for("#ffffff", "#6366F1").value == "#6366F1"
    assert accent_color_for("#000000", "#6366F1").value == COLORS["light_text"]


def test_accent_slide_uses_brand_background() -> None:
    colors = resolve_slide_colors("#000000", accent=True)
    assert colors.background == "#000000"
    assert colors.text == COLORS["light_text"]
    assert colors.accent == COLORS["light_text"]
    assert colors.is_accent_slide


def test_default_slide_uses_default_background() -> None:
    colors = resolve_slide_colors("#6366F1", accent=False)
    assert colors.background == COLORS["default_background"]
    assert colors.text == COLORS["dark_text"]
    assert colors.accent == "#6366F1"


def test_bad_brand_color_falls_back() -> None:
    colors = resolve_slide_colors("purple", accent=True)
    assert colors.background == COLORS["accent_fallback"]
    assert colors.text == COLORS["light_text"]


def test_lighten() -> None:
    assert lighten("#000000", 50) == "#808080"
    assert lighten("#ffffff", 30) == "#ffffff"
    assert lighten("#6366F1", 0) == "#6366f1"


def test_bright_style_uses_brand_background() -> None:
    colors = resolve_slide_colors("#6366F1", accent=False, style="bright")
    assert colors.background == "#6366F1"
    assert colors.text == COLORS["light_text"]

    accent = resolve_slide_colors("#6366F1", accent=True, style="bright")
    assert accent.background == lighten("#6366F1", 30)


def test_elegant_style_is_dark() -> None:
    colors = resolve_slide_colors("#6366F1", accent=False, style="elegant")
    assert colors.background == "#1a1a1a"
    assert colors.text == COLORS["light_text"]
    assert colors.accent == COLORS["light_text"]


def test_unknown_style_is_rejected() -> None:
    with pytest.raises(ValueError):
        resolve_slide_colors("#6366F1", accent=False, style="neon")


def test_accent_on_brand_background_falls_back_to_text_color() -> None:
    assert accent_color_for("#ffff00", "#FFFF00").value == COLORS["dark_text"]
    assert accent_color_for("#6366F1", "#6366F1").value == COLORS["light_text"]
