import numpy as np
import pytest

from mandelplot import escape_counts, escape_time, scalar_escape_counts


def test_origin_never_escapes():
    for max_iter in (1, 2, 10, 1000):
        assert escape_time(0j, max_iter) is None


def test_zero_budget_is_no_escape():
    assert escape_time(complex(10.0, 10.0), 0) is None


@pytest.mark.parametrize("c", [3.0, -2.5 - 2.0j, 2.5j, complex(-3.0, 1.0), complex(100.0, -100.0)])
def test_points_outside_radius_two_escape(c):
    assert abs(c) > 2
    result = escape_time(c, 10**6)
    assert result is not None
    assert result <= 10


def test_escape_count_is_iterations_completed():
    # 0 -> 2j -> -4 + 2j
    assert escape_time(2j, 10) == 2
    assert escape_time(complex(-2.5, -2.0), 10) == 1


def test_boundary_radius_does_not_escape():
    # The orbit of -2 is 0, -2, 2, 2, ... with |z|**2 == 4 exactly.
    assert escape_time(-2.0, 1000) is None


def test_budget_caps_result():
    # 0.26 lies just outside the cardioid cusp and escapes slowly.
    slow = escape_time(0.26, 10_000)
    assert slow is not None and slow > 10
    assert escape_time(0.26, slow) is None
    assert escape_time(0.26, slow + 1) == slow


def test_tensor_kernel_matches_known_points():
    c = np.array([[0.0, 3.0, -2.5 - 2.0j, -1.0, -2.0, 2j, 0.25]])
    counts = escape_counts(c.real, c.imag, 100)
    assert counts.tolist() == [[100, 1, 1, 100, 100, 2, 100]]


def test_tensor_kernel_zero_budget():
    c_real = np.array([[5.0, 0.0]])
    c_imag = np.zeros_like(c_real)
    assert escape_counts(c_real, c_imag, 0).tolist() == [[0, 0]]


def test_kernels_agree_on_grid():
    re = np.linspace(-2.5, 1.5, 17)
    im = np.linspace(-2.0, 2.0, 11)
    c_real, c_imag = np.meshgrid(re, im)
    expected = scalar_escape_counts(c_real, c_imag, 60)
    np.testing.assert_array_equal(escape_counts(c_real, c_imag, 60), expected)


def test_scalar_kernel_marks_inside_with_budget():
    counts = scalar_escape_counts(np.array([[0.0, 3.0]]), np.array([[0.0, 0.0]]), 7)
    assert counts.tolist() == [[7, 1]]
