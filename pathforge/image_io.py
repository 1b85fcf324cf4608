"""
Image output.

Converts the renderer's linear float framebuffer to 8-bit values and writes
it either as plain-text PPM (P3) or, through Pillow, as any format Pillow
knows (PNG, BMP, ...).
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TextIO, Union

import numpy as np
from PIL import Image as PILImage

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Largest value kept before scaling by 256, so 1.0 maps to 255 not 256.
MAX_INTENSITY = 0.999


def to_ldr(image: np.ndarray) -> np.ndarray:
    """Convert a linear image to 8-bit with gamma-2 correction.

    Each channel is clamped to [0, 0.999], square-rooted, scaled by 256 and
    truncated. NaN channels become 0.

    Args:
        image: Linear image array (float), any shape ending in 3

    Returns:
        uint8 array of the same shape
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    clamped = np.clip(linear, 0.0, MAX_INTENSITY)
    return (256.0 * np.sqrt(clamped)).astype(np.uint8)


def write_ppm(image: np.ndarray, stream: TextIO) -> None:
    """Write an image as plain-text PPM (P3), top row first.

    Args:
        image: Linear float image (height, width, 3) or an 8-bit image
        stream: Text stream to write to
    """
    ldr = image if image.dtype == np.uint8 else to_ldr(image)
    height, width = ldr.shape[:2]

    stream.write(f"P3\n{width} {height}\n255\n")
    for r, g, b in ldr.reshape(-1, 3):
        stream.write(f"{r} {g} {b}\n")


def check_output_path(filename: Union[str, Path]) -> Path:
    """Make sure an image can be saved under this name.

    Raises:
        ConfigurationError: if neither the PPM writer nor Pillow can write
            the file extension
    """
    path = Path(filename)
    suffix = path.suffix.lower()
    if suffix == '.ppm':
        return path

    image_format = PILImage.registered_extensions().get(suffix)
    if image_format is None or image_format not in PILImage.SAVE:
        raise ConfigurationError(
            f"Cannot save images as '{suffix or path.name}'; use .ppm or a format Pillow can write (.png, .bmp, ...)"
        )
    return path


def save_image(image: np.ndarray, filename: Union[str, Path]) -> None:
    """Save image to file.

    ``.ppm`` files are written as plain-text P3; every other extension is
    handed to Pillow.

    Args:
        image: Image array (linear float or 8-bit)
        filename: Output filename (extension determines format)

    Raises:
        ConfigurationError: for an extension no writer supports
    """
    path = check_output_path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == '.ppm':
        with path.open('w', newline='\n') as f:
            write_ppm(image, f)
    else:
        ldr = image if image.dtype == np.uint8 else to_ldr(image)
        PILImage.fromarray(np.ascontiguousarray(ldr)).save(path)

    logger.info("Saved %s", path)
