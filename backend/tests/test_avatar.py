import asyncio

from PIL import Image

from carousel.services.avatar import circular_avatar, fetch_avatar


def test_missing_url_gives_no_avatar() -> None:
    assert asyncio.run(fetch_avatar(None)) is None
    assert asyncio.run(fetch_avatar("")) is None


def test_unreachable_url_gives_no_avatar() -> None:
    assert asyncio.run(fetch_avatar("not-a-url://avatar.png", timeout=1.0)) is None


def test_circular_avatar_masks_corners() -> None:
    avatar = circular_avatar(Image.new("RGB", (300, 200), (0, 128, 255)), 100)
    assert avatar.size == (100, 100)
    assert avatar.getpixel((0, 0))[3] == 0
    assert avatar.getpixel((50, 50)) == (0, 128, 255, 255)
