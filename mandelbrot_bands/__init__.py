"""Public API for band-parallel Mandelbrot rendering."""

from .errors import ConfigurationError
from .escape import NOT_ESCAPED, Limit, escape_counts, escape_time, pixel_value, pixel_values
from .output import write_image
from .plane import PixelBounds, PlaneRegion, pixel_grid, pixel_to_point
from .renderer import Band, RenderParameters, band_rows, render, render_band, split_bands

__all__ = [
    "Band",
    "ConfigurationError",
    "Limit",
    "NOT_ESCAPED",
    "PixelBounds",
    "PlaneRegion",
    "RenderParameters",
    "band_rows",
    "escape_counts",
    "escape_time",
    "pixel_grid",
    "pixel_to_point",
    "pixel_value",
    "pixel_values",
    "render",
    "render_band",
    "split_bands",
    "write_image",
]
