"""Avatar download and circular cropping for slide headers."""

import logging
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)


async def fetch_avatar(url: Optional[str], timeout: float = 10.0) -> Optional[Image.Image]:
    """Download an avatar image. Any failure returns None; slides render without it."""
    if not url:
        return None

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
            img = Image.open(BytesIO(response.content))
            img.load()
            return img.convert("RGBA")
        except Exception as e:
            logger.warning(f"Could not load avatar from {url}: {e}")
            return None


def circular_avatar(img: Image.Image, size: int) -> Image.Image:
    """Center-crop to a square, resize and mask to a circle."""
    side = min(img.width, img.height)
    left = (img.width - side) // 2
    top = (img.height - side) // 2
    square = img.crop((left, top, left + side, top + side)).resize((size, size), Image.Resampling.LANCZOS)

    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)

    avatar = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    avatar.paste(square.convert("RGBA"), (0, 0), mask)
    return avatar
