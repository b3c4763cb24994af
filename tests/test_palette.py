import math

import numpy as np
import pytest

from mandelplot import Palette, intensity_table, pixel_intensity


def test_inside_points_follow_palette():
    assert pixel_intensity(None, Palette.LIGHT) == 255
    assert pixel_intensity(None, Palette.DARK) == 0


@pytest.mark.parametrize("palette", list(Palette))
def test_escaped_points_ignore_palette(palette):
    for k in (0, 1, 2, 100, 400):
        assert pixel_intensity(k, palette) == int(math.sin(k / 255.0) * 255.0)


def test_small_counts_truncate_toward_zero():
    # sin(1/255) * 255 is just below 1.
    assert pixel_intensity(0, Palette.LIGHT) == 0
    assert pixel_intensity(1, Palette.LIGHT) == 0
    assert pixel_intensity(2, Palette.LIGHT) == 1


def test_negative_sine_saturates_to_black():
    k = 900  # 900 / 255 > pi
    assert math.sin(k / 255.0) < 0
    assert pixel_intensity(k, Palette.LIGHT) == 0


def test_intensity_stays_in_byte_range():
    values = [pixel_intensity(k, Palette.DARK) for k in range(0, 5000, 7)]
    assert min(values) >= 0
    assert max(values) <= 255


def test_table_matches_scalar_rule():
    table = intensity_table(1000, Palette.LIGHT)
    assert table.dtype == np.uint8
    assert table.shape == (1001,)
    assert table[1000] == 255
    assert [int(v) for v in table[:1000]] == [pixel_intensity(k, Palette.LIGHT) for k in range(1000)]


def test_empty_budget_table_holds_only_inside_colour():
    assert intensity_table(0, Palette.DARK).tolist() == [0]


def test_palette_parses_from_name():
    assert Palette("light") is Palette.LIGHT
    assert Palette("dark") is Palette.DARK
