"""Mapping between the pixel grid and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class PixelBounds:
    """Width and height of a pixel grid."""

    width: int
    height: int

    @property
    def size(self) -> int:
        return self.width * self.height

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"pixel bounds must be positive, got {self.width}x{self.height}"
            )


@dataclass(frozen=True)
class PlaneRegion:
    """Rectangle of the complex plane mapped onto a pixel grid.

    Row 0 of the grid sits on ``upper_left.imag``; rows grow toward
    ``lower_right.imag``.
    """

    upper_left: complex
    lower_right: complex

    @property
    def width(self) -> float:
        return self.lower_right.real - self.upper_left.real

    @property
    def height(self) -> float:
        return self.upper_left.imag - self.lower_right.imag

    def validate(self) -> None:
        if not self.width > 0.0 or not self.height > 0.0:
            raise ConfigurationError(
                "plane region must have lower_right to the right of and below "
                f"upper_left, got {self.upper_left} and {self.lower_right}"
            )


def pixel_to_point(bounds: PixelBounds, pixel: tuple[int, int], region: PlaneRegion) -> complex:
    """Return the point of ``region`` under ``pixel`` = (column, row).

    ``bounds`` must describe the same grid ``region`` covers. A zero
    dimension raises ``ZeroDivisionError``; callers validate first.
    """

    column, row = pixel
    re = region.upper_left.real + column * region.width / bounds.width
    im = region.upper_left.imag - row * region.height / bounds.height
    return complex(re, im)


def pixel_grid(bounds: PixelBounds, region: PlaneRegion, top: int, rows: int) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary parts of ``pixel_to_point`` for rows ``top:top + rows``.

    Returns two ``(rows, bounds.width)`` float64 arrays holding the same
    values ``pixel_to_point`` gives for each pixel.
    """

    columns = np.arange(bounds.width, dtype=np.float64)
    row_indices = np.arange(top, top + rows, dtype=np.float64)
    re = region.upper_left.real + columns * region.width / bounds.width
    im = region.upper_left.imag - row_indices * region.height / bounds.height
    return np.broadcast_to(re, (rows, bounds.width)), np.broadcast_to(im[:, np.newaxis], (rows, bounds.width))
