"""Public API for Mandelbrot plotting utilities."""

from .escape import KERNELS, escape_counts, escape_time, scalar_escape_counts
from .palette import Palette, intensity_table, pixel_intensity
from .renderer import (
    LEGACY_WORKERS,
    Band,
    BandFailure,
    RenderConfig,
    RenderOutcome,
    Viewport,
    band_coordinates,
    default_workers,
    partition_rows,
    pixel_to_complex,
    render,
)
from .sink import ImageSaveError, output_path, save_png, to_image

__version__ = "0.1.0"

__all__ = [
    "KERNELS",
    "LEGACY_WORKERS",
    "Band",
    "BandFailure",
    "ImageSaveError",
    "Palette",
    "RenderConfig",
    "RenderOutcome",
    "Viewport",
    "band_coordinates",
    "default_workers",
    "escape_counts",
    "escape_time",
    "intensity_table",
    "output_path",
    "partition_rows",
    "pixel_intensity",
    "pixel_to_complex",
    "render",
    "save_png",
    "scalar_escape_counts",
    "to_image",
]
