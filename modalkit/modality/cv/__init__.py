"""
Vision modality helpers.

Pillow-based image creation and drawing, plus the outputs of segmentation
and classification models.
"""

from .image import (
    ImageFactory,
    argb_to_rgba,
    rgba_to_argb,
    draw_overlay,
    paste_region,
)
from .output import CategoryMask, Classifications

__all__ = [
    # Images
    "ImageFactory",
    "argb_to_rgba",
    "rgba_to_argb",
    "draw_overlay",
    "paste_region",
    # Outputs
    "CategoryMask",
    "Classifications",
]
