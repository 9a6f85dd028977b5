"""Persisting rendered buffers as grayscale images."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
import PIL.Image

from .plane import PixelBounds


def _pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(
    path: Union[str, Path],
    pixels: np.ndarray,
    bounds: PixelBounds,
    image_format: Optional[str] = None,
) -> None:
    """Write ``pixels`` as an 8-bit grayscale image of ``bounds``.

    The format is inferred from the extension when ``image_format`` is not
    given, PNG when there is none. File system errors propagate.
    """

    output_path = Path(path)
    if image_format is None:
        image_format = output_path.suffix or "png"
    data = np.asarray(pixels, dtype=np.uint8).reshape(bounds.height, bounds.width)
    image = PIL.Image.fromarray(data)
    image.save(str(output_path), format=_pil_format_name(image_format))
