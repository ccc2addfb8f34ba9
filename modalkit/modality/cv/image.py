"""Image creation and in-place drawing helpers on top of Pillow.

Images are plain ``PIL.Image.Image`` objects. Colors are RGBA tuples; packed
ARGB integers (``0xAARRGGBB``) are accepted where noted and converted with
:func:`argb_to_rgba`.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import torch
from PIL import Image

from ...core.io import is_absolute_uri, read_url_bytes

Color = Tuple[int, int, int, int]

SUPPORTED_DRAW_MODES = ("RGB", "RGBA")


def argb_to_rgba(argb: int) -> Color:
    """Unpack ``0xAARRGGBB`` into ``(r, g, b, a)``."""
    return ((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF)


def rgba_to_argb(rgba: Sequence[int]) -> int:
    """Pack ``(r, g, b[, a])`` into ``0xAARRGGBB``; alpha defaults to opaque."""
    r, g, b = rgba[:3]
    a = rgba[3] if len(rgba) > 3 else 255
    return (a << 24) | (r << 16) | (g << 8) | b


class ImageFactory:
    """Creates Pillow images from files, URLs, streams and arrays."""

    _instance: Optional["ImageFactory"] = None

    @classmethod
    def get_instance(cls) -> "ImageFactory":
        if ImageFactory._instance is None:
            ImageFactory._instance = cls()
        return ImageFactory._instance

    def from_file(self, path: Union[str, Path]) -> Image.Image:
        """Read an image file fully into memory.

        Raises:
            FileNotFoundError: The file does not exist.
            OSError: The file is not a readable image.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        with Image.open(path) as im:
            im.load()
            return im.copy()

    def from_url(self, url: str) -> Image.Image:
        """Read an image from an absolute URI, or from a local path otherwise."""
        if is_absolute_uri(url):
            return self.from_input_stream(io.BytesIO(read_url_bytes(url)))
        return self.from_file(Path(url))

    def from_input_stream(self, stream) -> Image.Image:
        """Read an image from a binary file-like object."""
        im = Image.open(stream)
        im.load()
        return im

    def from_array(self, pixels: Sequence[int], width: int, height: int) -> Image.Image:
        """Build an RGBA image from row-major packed ARGB integers."""
        packed = np.asarray(pixels, dtype=np.uint32)
        if packed.size != width * height:
            raise ValueError(f"Expected {width * height} pixels, got {packed.size}")
        packed = packed.reshape(height, width)
        rgba = np.stack(
            [(packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF, (packed >> 24) & 0xFF],
            axis=-1,
        ).astype(np.uint8)
        return Image.fromarray(rgba)

    def from_ndarray(self, array) -> Image.Image:
        """Build an image from a CHW or HWC tensor/array.

        Floating point input is taken to be in ``[0, 1]``; integer input in
        ``[0, 255]``.
        """
        if isinstance(array, torch.Tensor):
            array = array.detach().cpu().numpy()
        array = np.asarray(array)
        if array.ndim == 3 and array.shape[0] in (1, 3, 4) and array.shape[-1] not in (1, 3, 4):
            array = np.transpose(array, (1, 2, 0))
        if array.ndim == 3 and array.shape[-1] == 1:
            array = array[..., 0]
        if array.ndim not in (2, 3):
            raise ValueError(f"Expected a 2-D or 3-D image array, got shape {array.shape}")
        if np.issubdtype(array.dtype, np.floating):
            array = np.clip(array * 255.0 + 0.5, 0, 255)
        return Image.fromarray(array.astype(np.uint8))


def _check_drawable(image: Image.Image) -> None:
    if image.mode not in SUPPORTED_DRAW_MODES:
        raise ValueError(f"Cannot draw on {image.mode} images; convert to RGB or RGBA first")


def draw_overlay(image: Image.Image, overlay: Image.Image) -> None:
    """Composite an RGBA ``overlay`` onto ``image`` in place."""
    _check_drawable(image)
    if overlay.size != image.size:
        raise ValueError(f"Overlay size {overlay.size} does not match image size {image.size}")
    overlay = overlay.convert("RGBA")
    if image.mode == "RGBA":
        image.alpha_composite(overlay)
    else:
        image.paste(overlay.convert(image.mode), (0, 0), overlay)


def paste_region(image: Image.Image, region: np.ndarray, fill: Union[Color, Image.Image]) -> None:
    """Replace the pixels selected by the boolean ``region`` grid, in place.

    ``fill`` is an RGBA color or an image of the same size. Replacement is
    exact: a transparent fill color clears the selected pixels of an RGBA
    image.
    """
    _check_drawable(image)
    region = np.asarray(region, dtype=bool)
    if region.shape != (image.height, image.width):
        raise ValueError(f"Region shape {region.shape} does not match image size {image.size}")
    mask = Image.fromarray(region.astype(np.uint8) * 255)
    if isinstance(fill, Image.Image):
        if fill.size != image.size:
            raise ValueError(f"Fill image size {fill.size} does not match image size {image.size}")
        image.paste(fill.convert(image.mode), (0, 0), mask)
    else:
        color = tuple(int(c) for c in fill)
        if len(color) == 3:
            color += (255,)
        image.paste(color if image.mode == "RGBA" else color[:3], None, mask)
