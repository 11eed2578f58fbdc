"""Adaptive fit controller - finds the largest font size whose lines fit a box."""

import logging
import math
from dataclasses import dataclass
from typing import Callable

from .wrap import FALLBACK_CHAR_WIDTH_RATIO

logger = logging.getLogger(__name__)


@dataclass
class FitResult:
    size: int
    line_count: int
    line_height: int
    fits: bool

    @property
    def height(self) -> int:
        return self.line_count * self.line_height


def candidate_sizes(base_size: int, min_size: int, step: int) -> list[int]:
    """Sizes to try, largest first; the minimum is always the last candidate."""
    if step <= 0:
        raise ValueError(f"Fit step must be positive, got {step}")
    min_size = min(min_size, base_size)
    sizes = list(range(base_size, min_size - 1, -step))
    if sizes[-1] != min_size:
        sizes.append(min_size)
    return sizes


def fit_font_size(
    count_lines: Callable[[int], int],
    base_size: int,
    min_size: int,
    step: int,
    max_height: float,
    line_height_ratio: float,
) -> FitResult:
    """Descending linear search over font sizes.

    Accepts the first size where ``count_lines(size) * line_height <= max_height``.
    Line counts are not reliably monotonic in size, so the search never bisects.
    When nothing fits, the minimum size is returned with ``fits=False``.
    """
    result = None
    for size in candidate_sizes(base_size, min_size, step):
        line_height = round(size * line_height_ratio)
        lines = count_lines(size)
        result = FitResult(size=size, line_count=lines, line_height=line_height, fits=lines * line_height <= max_height)
        if result.fits:
            return result

    logger.info(f"Content overflows at minimum size {result.size}px ({result.height}px > {max_height}px)")
    return result


def estimate_line_count(text: str, size: int, max_width: float) -> int:
    """O(1) line estimate from character count and average glyph width."""
    if not text:
        return 0
    if max_width <= 0:
        return len(text.split())
    return max(1, math.ceil(len(text) * size * FALLBACK_CHAR_WIDTH_RATIO / max_width))
