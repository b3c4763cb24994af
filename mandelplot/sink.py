"""Persisting rendered rasters as PNG files."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import PIL.Image

log = logging.getLogger(__name__)


class ImageSaveError(Exception):
    """Raised when a raster cannot be written to disk."""


def output_path(name: str) -> Path:
    return Path(f"{name}.png")


def to_image(raster: np.ndarray) -> PIL.Image.Image:
    return PIL.Image.fromarray(raster)


def save_png(raster: np.ndarray, name: str) -> Path:
    """Write ``raster`` to ``<name>.png`` and return the path."""

    path = output_path(name)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        to_image(raster).save(str(path), format="PNG")
    except (OSError, ValueError) as exc:
        raise ImageSaveError(f"{path}: {exc}") from exc
    log.debug("Wrote %dx%d image to %s", raster.shape[1], raster.shape[0], path)
    return path
