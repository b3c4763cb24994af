"""Grayscale colouring of escape-time results."""

from __future__ import annotations

import enum
import math
from typing import Optional

import numpy as np


class Palette(enum.Enum):
    """Colour used for points that never escape."""

    LIGHT = "light"
    DARK = "dark"

    @property
    def inside(self) -> int:
        return 255 if self is Palette.LIGHT else 0


def pixel_intensity(result: Optional[int], palette: Palette) -> int:
    """Map an escape result to an 8-bit intensity.

    Escaped points use ``sin(k / 255) * 255``, truncated toward zero and
    saturated to ``[0, 255]``: once ``k / 255`` passes pi the sine turns
    negative and those points come out black rather than wrapping around.
    """

    if result is None:
        return palette.inside
    value = math.sin(result / 255.0) * 255.0
    if math.isnan(value):
        return 0
    return max(0, min(int(value), 255))


def intensity_table(max_iter: int, palette: Palette) -> np.ndarray:
    """Lookup table indexed by escape count; entry ``max_iter`` holds the inside colour."""

    table = np.empty(max_iter + 1, dtype=np.uint8)
    table[:max_iter] = np.fromiter(
        (pixel_intensity(k, palette) for k in range(max_iter)),
        dtype=np.uint8,
        count=max_iter,
    )
    table[max_iter] = palette.inside
    return table
