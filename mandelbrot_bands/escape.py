"""Escape-time evaluation of the Mandelbrot iteration."""

from __future__ import annotations

import enum
from typing import Optional

import numpy as np

ESCAPE_NORM_SQR = 4.0
NOT_ESCAPED = -1


class Limit(enum.Enum):
    """Named iteration limit tiers."""

    VERY_LOW = 128
    LOW = 256
    MEDIUM = 512
    HIGH = 1024

    @classmethod
    def parse(cls, name: str) -> "Limit":
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(cls.choices())
            raise ValueError(f"unknown limit '{name}', expected one of: {choices}") from None

    @classmethod
    def choices(cls) -> list[str]:
        return [member.name.lower().replace("_", "-") for member in cls]


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Try to prove that ``c`` lies outside the Mandelbrot set.

    Starting from ``z = 0`` the map ``z = z * z + c`` is applied up to
    ``limit`` times. The squared magnitude is tested before each
    application, so the result is the index ``i`` of the first iteration
    that starts with ``|z|**2 > 4``. ``None`` means the point did not
    escape within ``limit`` iterations.

    ``z * z`` is spelled out on the real and imaginary parts, in the same
    order ``escape_counts`` uses.
    """

    zr = zi = 0.0
    cr, ci = c.real, c.imag
    for i in range(limit):
        if zr * zr + zi * zi > ESCAPE_NORM_SQR:
            return i
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci
    return None


def escape_counts(cr: np.ndarray, ci: np.ndarray, limit: int) -> np.ndarray:
    """Array form of ``escape_time`` over a grid of points.

    Returns an ``int64`` array shaped like ``cr`` holding the escape index
    of every point, ``NOT_ESCAPED`` where ``escape_time`` gives ``None``.
    Points drop out of the working set once they escape.
    """

    shape = np.shape(cr)
    counts = np.full(shape, NOT_ESCAPED, dtype=np.int64).ravel()
    index = np.arange(counts.size)
    cr = np.asarray(cr, dtype=np.float64).ravel()
    ci = np.asarray(ci, dtype=np.float64).ravel()
    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)

    for i in range(limit):
        escaped = zr * zr + zi * zi > ESCAPE_NORM_SQR
        if escaped.any():
            counts[index[escaped]] = i
            keep = ~escaped
            index, zr, zi, cr, ci = index[keep], zr[keep], zi[keep], cr[keep], ci[keep]
            if index.size == 0:
                break
        zr, zi = zr * zr - zi * zi + cr, zr * zi + zi * zr + ci

    return counts.reshape(shape)


def pixel_value(count: Optional[int], limit: int) -> int:
    """Grayscale byte for an escape count.

    Points that never escaped are black. Escaped points use
    ``limit - count`` truncated to its low byte, so ``HIGH`` wraps around
    instead of saturating at 255.
    """

    if count is None:
        return 0
    return (limit - count) & 0xFF


def pixel_values(counts: np.ndarray, limit: int) -> np.ndarray:
    """``pixel_value`` applied to an array from ``escape_counts``."""

    values = np.where(counts == NOT_ESCAPED, 0, (limit - counts) & 0xFF)
    return values.astype(np.uint8)
