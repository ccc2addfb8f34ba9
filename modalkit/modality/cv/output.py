"""Inference outputs for vision models: segmentation masks and classifications."""

from __future__ import annotations

import json
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import torch
from PIL import Image

from ...core.serialization import JsonSerializable
from .image import Color, argb_to_rgba, draw_overlay, paste_region


class CategoryMask(JsonSerializable):
    """Semantic segmentation result: one class index per pixel.

    The grid is indexed ``mask[h][w]`` and every entry must be a valid index
    into ``classes``. Both are frozen on construction: ``classes`` becomes a
    tuple and ``mask`` a read-only ``int32`` array.

    Only the grid is serialized; class names travel separately.

    Args:
        classes: Ordered class names. Index 0 is the background class.
        mask: 2-D grid of class indices (nested lists, array or tensor).

    Raises:
        ValueError: The grid is empty, not 2-D, not integral, or holds an
            index outside ``[0, len(classes))``.
    """

    def __init__(self, classes: Sequence[str], mask):
        self._classes = tuple(classes)
        if isinstance(mask, torch.Tensor):
            mask = mask.detach().cpu().numpy()
        grid = np.asarray(mask)
        if grid.ndim != 2 or grid.size == 0:
            raise ValueError(f"Mask must be a non-empty 2-D grid, got shape {grid.shape}")
        if not np.issubdtype(grid.dtype, np.integer):
            raise ValueError(f"Mask must hold integer class indices, got {grid.dtype}")
        invalid = (grid < 0) | (grid >= len(self._classes))
        if invalid.any():
            h, w = np.argwhere(invalid)[0]
            raise ValueError(
                f"Class index {grid[h, w]} at ({h}, {w}) is outside [0, {len(self._classes)})"
            )
        grid = grid.astype(np.int32)
        grid.setflags(write=False)
        self._mask = grid

    @property
    def classes(self) -> Tuple[str, ...]:
        return self._classes

    @property
    def mask(self) -> np.ndarray:
        return self._mask

    @property
    def height(self) -> int:
        return self._mask.shape[0]

    @property
    def width(self) -> int:
        return self._mask.shape[1]

    def to_json(self) -> str:
        return json.dumps({"mask": self._mask.tolist()}) + "\n"

    @classmethod
    def from_json(cls, text: Union[str, bytes], classes: Sequence[str]) -> "CategoryMask":
        """Rebuild a mask from :meth:`to_json` output and its class names."""
        payload = json.loads(text)
        if not isinstance(payload, dict) or "mask" not in payload:
            raise ValueError("JSON does not contain a 'mask' field")
        return cls(classes, payload["mask"])

    def generate_colors(self, transparency: float) -> np.ndarray:
        """Draw one random RGBA color per class.

        Colors come from NumPy's global RNG, so :func:`modalkit.core.set_seed`
        makes them repeatable.

        Args:
            transparency: 0.0 is opaque, 1.0 fully transparent.

        Returns:
            ``uint8`` array of shape ``(len(classes), 4)``.
        """
        if not 0.0 <= transparency <= 1.0:
            raise ValueError(f"transparency must be in [0, 1], got {transparency}")
        alpha = int((1 - transparency) * 255.0 + 0.5)
        colors = np.empty((len(self._classes), 4), dtype=np.uint8)
        colors[:, :3] = np.random.randint(0, 256, size=(len(self._classes), 3))
        colors[:, 3] = alpha
        return colors

    def to_image(self, transparency: float = 0.0, colors: Optional[np.ndarray] = None) -> Image.Image:
        """Render the mask alone as an RGBA image."""
        if colors is None:
            colors = self.generate_colors(transparency)
        return Image.fromarray(colors[self._mask])

    def draw_mask(
        self,
        image: Image.Image,
        transparency: float = 0.5,
        background: Union[None, int, Color, Image.Image] = None,
    ) -> None:
        """Highlight every class on ``image`` with random colors, in place.

        Args:
            image: RGB or RGBA image of the same size as the mask.
            transparency: Transparency of the class colors.
            background: ``None`` colors the background class like any other.
                A color (RGBA tuple or packed ARGB int) replaces class-0
                pixels with exactly that color; use a transparent color to
                remove the background. An image replaces class-0 pixels with
                its own pixels, resized to the mask when needed.
        """
        self._check_size(image)
        colors = self.generate_colors(transparency)
        layer = colors[self._mask]
        if background is None:
            draw_overlay(image, Image.fromarray(layer))
            return

        background_region = self._mask == 0
        layer[background_region] = 0
        draw_overlay(image, Image.fromarray(layer))
        if isinstance(background, Image.Image):
            if background.size != image.size:
                background = background.resize(image.size)
            paste_region(image, background_region, background)
        elif isinstance(background, (int, np.integer)):
            paste_region(image, background_region, argb_to_rgba(int(background)))
        else:
            paste_region(image, background_region, tuple(background))

    def draw_class(self, image: Image.Image, class_id: int, color: Union[int, Color]) -> None:
        """Highlight only the pixels of ``class_id`` with ``color``, in place."""
        self._check_size(image)
        if isinstance(color, (int, np.integer)):
            color = argb_to_rgba(int(color))
        layer = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        layer[self._mask == class_id] = color
        draw_overlay(image, Image.fromarray(layer))

    def _check_size(self, image: Image.Image) -> None:
        if image.size != (self.width, self.height):
            raise ValueError(
                f"Image size {image.size} does not match mask size {(self.width, self.height)}"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, CategoryMask):
            return NotImplemented
        return self._classes == other._classes and np.array_equal(self._mask, other._mask)

    __hash__ = None

    def __repr__(self) -> str:
        return f"CategoryMask(classes={list(self._classes)}, size={self.width}x{self.height})"


class Classifications(JsonSerializable):
    """Class probabilities produced by an image classifier.

    Args:
        class_names: Class name per output index.
        probabilities: Probability per output index (sequence or tensor).
    """

    def __init__(self, class_names: Sequence[str], probabilities):
        if isinstance(probabilities, torch.Tensor):
            probabilities = probabilities.detach().cpu().tolist()
        self.class_names = list(class_names)
        self.probabilities = [float(p) for p in probabilities]
        if len(self.class_names) != len(self.probabilities):
            raise ValueError(
                f"Got {len(self.class_names)} class names for {len(self.probabilities)} probabilities"
            )

    def items(self) -> List[Tuple[str, float]]:
        return list(zip(self.class_names, self.probabilities))

    def top_k(self, k: int = 5) -> List[Tuple[str, float]]:
        """Return the ``k`` most probable ``(class_name, probability)`` pairs."""
        return sorted(self.items(), key=lambda item: item[1], reverse=True)[:k]

    def best(self) -> Tuple[str, float]:
        return self.top_k(1)[0]

    def to_json(self) -> str:
        payload = [{"class_name": name, "probability": prob} for name, prob in self.top_k(len(self.class_names))]
        return json.dumps(payload, indent=2) + "\n"

    def __repr__(self) -> str:
        name, prob = self.best()
        return f"Classifications(best={name!r}, probability={prob:.4f}, classes={len(self.class_names)})"
