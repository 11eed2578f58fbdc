#!/usr/bin/env python3
"""
Download the Montserrat fonts used for slide rendering.
Run this once before starting the server; without the fonts, slides fall
back to Pillow's bundled font.
"""

import io
import zipfile
from pathlib import Path

import httpx

from carousel.config import get_settings
from carousel.services.image_renderer import FONT_FILES

FONT_URL = "https://fonts.google.com/download?family=Montserrat"


def find_missing_fonts(fonts_dir: Path) -> list[str]:
    """Return the expected font files that are not present in fonts_dir."""
    return [name for name in FONT_FILES.values() if not (fonts_dir / name).exists()]


def download_fonts(fonts_dir: Path) -> list[str]:
    """Download the family archive and extract the static upright weights."""
    response = httpx.get(FONT_URL, follow_redirects=True, timeout=60.0)
    response.raise_for_status()

    wanted = set(FONT_FILES.values())
    extracted = []
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        for member in archive.namelist():
            name = Path(member).name
            if name in wanted:
                (fonts_dir / name).write_bytes(archive.read(member))
                extracted.append(name)
    return extracted


def main():
    fonts_dir = Path(get_settings().font_path)

    print("=" * 50)
    print("Carousel Layout Service - Asset Setup")
    print("=" * 50)

    fonts_dir.mkdir(parents=True, exist_ok=True)

    if find_missing_fonts(fonts_dir):
        print("Downloading Montserrat fonts...")
        try:
            for name in download_fonts(fonts_dir):
                print(f"  Extracted: {name}")
        except (httpx.HTTPError, zipfile.BadZipFile) as e:
            print(f"✗ Failed to download fonts: {e}")
            print("  Download Montserrat from https://fonts.google.com/specimen/Montserrat")
            print(f"  and place the TTF files in: {fonts_dir}")
    else:
        print("✓ Fonts already exist, skipping download")

    missing = find_missing_fonts(fonts_dir)
    print()
    for name in FONT_FILES.values():
        print(f"{'✗' if name in missing else '✓'} {name}")

    print("=" * 50)
    if missing:
        print("⚠ Some fonts are missing. Slides will use the fallback font.")
    else:
        print("✓ All assets ready! You can start the server.")
    print("=" * 50)


if __name__ == "__main__":
    main()
