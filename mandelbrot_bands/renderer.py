"""Band-parallel rendering of Mandelbrot frames."""

from __future__ import annotations

import numbers
import threading
from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import ConfigurationError
from .escape import Limit, escape_counts, pixel_values
from .plane import PixelBounds, PlaneRegion, pixel_grid, pixel_to_point


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    upper_left: complex
    lower_right: complex
    limit: Union[Limit, int]
    workers: int = 1

    @property
    def bounds(self) -> PixelBounds:
        return PixelBounds(self.width, self.height)

    @property
    def region(self) -> PlaneRegion:
        return PlaneRegion(complex(self.upper_left), complex(self.lower_right))

    @property
    def iterations(self) -> int:
        """The iteration limit resolved to a plain integer."""

        if isinstance(self.limit, Limit):
            return self.limit.value
        return self.limit

    def validate(self) -> None:
        for name in ("width", "height", "workers"):
            if not _is_integer(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer, got {getattr(self, name)!r}")
        if not isinstance(self.limit, Limit) and not _is_integer(self.limit):
            raise ConfigurationError(f"iteration limit must be a Limit or an integer, got {self.limit!r}")
        self.bounds.validate()
        self.region.validate()
        if self.workers < 1:
            raise ConfigurationError(f"worker count must be at least 1, got {self.workers}")
        if self.iterations < 1:
            raise ConfigurationError(f"iteration limit must be at least 1, got {self.iterations}")


@dataclass(frozen=True)
class Band:
    """A horizontal strip of the output image.

    ``bounds`` and ``region`` describe the strip itself. Pixels are mapped
    against ``image_bounds`` and ``image_region`` at rows offset by ``top``,
    so a band yields the same points as a render of the whole image.
    """

    top: int
    bounds: PixelBounds
    region: PlaneRegion
    image_bounds: PixelBounds
    image_region: PlaneRegion

    @classmethod
    def whole(cls, bounds: PixelBounds, region: PlaneRegion) -> "Band":
        return cls(0, bounds, region, bounds, region)

    @property
    def start(self) -> int:
        return self.top * self.bounds.width

    @property
    def stop(self) -> int:
        return self.start + self.bounds.size


def render_band(pixels: np.ndarray, band: Band, limit: int) -> None:
    """Fill ``pixels`` (row-major, one byte per pixel) for ``band``."""

    if len(pixels) != band.bounds.size:
        raise AssertionError(
            f"pixel view holds {len(pixels)} bytes but band bounds "
            f"{band.bounds.width}x{band.bounds.height} need {band.bounds.size}"
        )
    cr, ci = pixel_grid(band.image_bounds, band.image_region, band.top, band.bounds.height)
    pixels[:] = pixel_values(escape_counts(cr, ci, limit), limit).ravel()


def band_rows(height: int, workers: int) -> int:
    """Rows per band when ``height`` rows are shared by ``workers``."""

    return -(-height // workers)


def split_bands(bounds: PixelBounds, region: PlaneRegion, workers: int) -> list[Band]:
    """Split the image into horizontal bands of ``ceil(height / workers)`` rows.

    Each band's region corners are mapped through ``pixel_to_point``
    against the full image.
    """

    rows_per_band = band_rows(bounds.height, workers)
    bands = []
    for top in range(0, bounds.height, rows_per_band):
        height = min(rows_per_band, bounds.height - top)
        upper_left = pixel_to_point(bounds, (0, top), region)
        lower_right = pixel_to_point(bounds, (bounds.width, top + height), region)
        band_region = PlaneRegion(upper_left, lower_right)
        bands.append(Band(top, PixelBounds(bounds.width, height), band_region, bounds, region))
    return bands


def render(params: RenderParameters) -> np.ndarray:
    """Render ``params`` into a flat ``uint8`` buffer of ``width * height`` samples."""

    params.validate()
    bounds = params.bounds
    region = params.region
    limit = params.iterations
    pixels = np.zeros(bounds.size, dtype=np.uint8)

    if params.workers == 1:
        render_band(pixels, Band.whole(bounds, region), limit)
        return pixels

    errors: list[Exception] = []

    def work(band: Band) -> None:
        try:
            render_band(pixels[band.start:band.stop], band, limit)
        except Exception as exc:
            errors.append(exc)

    threads = [
        threading.Thread(target=work, args=(band,), name=f"band-{band.top}")
        for band in split_bands(bounds, region, params.workers)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    return pixels
