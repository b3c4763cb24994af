"""Band-parallel rendering of Mandelbrot rasters."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .escape import Kernel, escape_counts
from .palette import Palette, intensity_table

log = logging.getLogger(__name__)

# Band count used when the worker count was fixed.
LEGACY_WORKERS = 24


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane mapped onto the raster."""

    re_start: float = -2.5
    re_end: float = 1.5
    im_start: float = -2.0
    im_end: float = 2.0


@dataclass(frozen=True)
class RenderConfig:
    """Parameters that describe a single render."""

    width: int = 7680
    height: int = 4320
    max_iter: int = 1000
    palette: Palette = Palette.LIGHT
    name: str = "mandelbrot"


@dataclass(frozen=True)
class Band:
    """Contiguous range of raster rows ``[start, stop)`` owned by one worker."""

    index: int
    start: int
    stop: int

    @property
    def rows(self) -> int:
        return self.stop - self.start


@dataclass(frozen=True)
class BandFailure:
    band: Band
    error: BaseException


@dataclass(frozen=True)
class RenderOutcome:
    """Finished raster together with the bands that produced it."""

    raster: np.ndarray
    bands: tuple[Band, ...]
    failures: tuple[BandFailure, ...]
    unassigned_rows: range

    @property
    def complete(self) -> bool:
        return not self.failures and not self.unassigned_rows


def default_workers() -> int:
    return os.cpu_count() or 1


def pixel_to_complex(viewport: Viewport, width: int, height: int, x: int, y: int) -> complex:
    real = viewport.re_start + (x / width) * (viewport.re_end - viewport.re_start)
    imag = viewport.im_start + (y / height) * (viewport.im_end - viewport.im_start)
    return complex(real, imag)


def band_coordinates(
    viewport: Viewport, width: int, height: int, start: int, stop: int
) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary grids for rows ``[start, stop)``, shaped ``(stop - start, width)``."""

    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(start, stop, dtype=np.float64)
    re = viewport.re_start + (xs / width) * (viewport.re_end - viewport.re_start)
    im = viewport.im_start + (ys / height) * (viewport.im_end - viewport.im_start)
    c_real, c_imag = np.meshgrid(re, im)
    return c_real, c_imag


def partition_rows(height: int, workers: int, *, fill_remainder: bool = True) -> list[Band]:
    """Split ``height`` rows into ``workers`` equal bands starting at row 0.

    Each band holds ``height // workers`` rows. The ``height % workers``
    trailing rows go to the last band when ``fill_remainder`` is set and are
    left out otherwise. Empty bands are dropped.
    """

    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")

    size = height // workers
    bands = []
    for index in range(workers):
        start = index * size
        stop = height if fill_remainder and index == workers - 1 else start + size
        if stop > start:
            bands.append(Band(index=index, start=start, stop=stop))
    return bands


def _render_band(
    view: np.ndarray,
    band: Band,
    config: RenderConfig,
    viewport: Viewport,
    table: np.ndarray,
    kernel: Kernel,
) -> None:
    c_real, c_imag = band_coordinates(viewport, config.width, config.height, band.start, band.stop)
    counts = kernel(c_real, c_imag, config.max_iter)
    view[...] = table[counts][..., np.newaxis]


def render(
    config: RenderConfig,
    viewport: Optional[Viewport] = None,
    *,
    workers: Optional[int] = None,
    kernel: Kernel = escape_counts,
    fill_remainder: bool = True,
) -> RenderOutcome:
    """Render ``config`` over ``viewport`` with one thread per row band.

    Every band writes only to its own slice of the raster, so the buffer is
    shared without a lock. A band that raises is logged and recorded in the
    outcome while the others run to completion; its rows keep the zero
    default colour.
    """

    viewport = viewport if viewport is not None else Viewport()
    workers = default_workers() if workers is None else workers
    bands = partition_rows(config.height, workers, fill_remainder=fill_remainder)
    unassigned = range(bands[-1].stop if bands else 0, config.height)

    raster = np.zeros((config.height, config.width, 3), dtype=np.uint8)
    table = intensity_table(config.max_iter, config.palette)

    log.debug(
        "Rendering %dx%d, max_iter=%d, %d bands of %d rows",
        config.width,
        config.height,
        config.max_iter,
        len(bands),
        bands[0].rows if bands else 0,
    )

    failures = []
    if bands:
        with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as pool:
            futures = [
                (band, pool.submit(_render_band, raster[band.start:band.stop], band, config, viewport, table, kernel))
                for band in bands
            ]
            for band, future in futures:
                error = future.exception()
                if error is not None:
                    log.error(
                        "Band %d (rows %d-%d) failed",
                        band.index,
                        band.start,
                        band.stop - 1,
                        exc_info=error,
                    )
                    failures.append(BandFailure(band=band, error=error))

    return RenderOutcome(
        raster=raster,
        bands=tuple(bands),
        failures=tuple(failures),
        unassigned_rows=unassigned,
    )
