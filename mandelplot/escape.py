"""Escape-time evaluation of the Mandelbrot recurrence ``z <- z**2 + c``."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import tensorflow as tf

# Squared escape radius: |z| > 2 is compared as |z|**2 > 4.
THRESHOLD = 4.0

Kernel = Callable[[np.ndarray, np.ndarray, int], np.ndarray]


def escape_time(c: complex, max_iter: int) -> Optional[int]:
    """Return the iteration at which ``c`` escapes, or ``None`` if it stays bounded.

    The magnitude test runs before each step, so ``max_iter = 0`` is always
    ``None`` and a point sitting exactly on ``|z|**2 == 4`` never escapes.
    """

    cr = c.real
    ci = c.imag
    zr = 0.0
    zi = 0.0
    for i in range(max_iter):
        if zr * zr + zi * zi > THRESHOLD:
            return i
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
    return None


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    i: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Record the points escaping at iteration ``i`` and advance the rest."""

    escaped = tf.logical_and(active, zr * zr + zi * zi > THRESHOLD)
    counts = tf.where(escaped, tf.cast(i, counts.dtype), counts)
    active = tf.logical_and(active, tf.logical_not(escaped))
    zr_new = zr * zr - zi * zi + cr
    zi_new = 2.0 * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    return zr, zi, counts, active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iter: tf.Tensor) -> tf.Tensor:
    """Iterate every point of the grid with a TensorFlow while loop."""

    max_iter = tf.cast(max_iter, tf.int64)
    i = tf.constant(0, dtype=tf.int64)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    counts = tf.fill(tf.shape(cr), max_iter)
    active = tf.ones_like(cr, tf.bool)

    def cond(i, zr, zi, counts, active):
        return tf.logical_and(tf.less(i, max_iter), tf.reduce_any(active))

    def body(i, zr, zi, counts, active):
        zr, zi, counts, active = _escape_step(zr, zi, cr, ci, counts, active, i)
        return i + 1, zr, zi, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, zr, zi, counts, active))
    return counts


def escape_counts(c_real: np.ndarray, c_imag: np.ndarray, max_iter: int) -> np.ndarray:
    """Escape counts for a grid of points, ``max_iter`` marking points that never escaped."""

    with tf.device("/CPU:0"):
        cr = tf.convert_to_tensor(c_real, dtype=tf.float64)
        ci = tf.convert_to_tensor(c_imag, dtype=tf.float64)
        counts = _escape_run(cr, ci, tf.constant(max_iter, dtype=tf.int64))
    return counts.numpy()


def scalar_escape_counts(c_real: np.ndarray, c_imag: np.ndarray, max_iter: int) -> np.ndarray:
    """Same contract as :func:`escape_counts`, one :func:`escape_time` call per point."""

    counts = np.full(np.shape(c_real), max_iter, dtype=np.int64)
    for index in np.ndindex(counts.shape):
        result = escape_time(complex(c_real[index], c_imag[index]), max_iter)
        if result is not None:
            counts[index] = result
    return counts


KERNELS: dict[str, Kernel] = {
    "tensor": escape_counts,
    "scalar": scalar_escape_counts,
}
