"""Plotting utilities for segmentation results.

Functions import matplotlib lazily to avoid importing it at module import
time when not needed.
"""

from typing import Optional, Tuple

import numpy as np
from PIL import Image

from ..modality.cv.output import CategoryMask


def plot_category_mask(
    image: Image.Image,
    mask: CategoryMask,
    transparency: Optional[float] = None,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (6, 5),
    legend_outside: bool = True,
) -> "tuple[object, object]":
    """Show ``image`` with ``mask`` overlaid and a legend of class colors.

    The input image is left untouched; drawing happens on a copy.

    Args:
        image: Image of the same size as the mask.
        mask: Segmentation result to draw.
        transparency: Overlay transparency; ``None`` reads
            ``visualization.transparency`` from the configuration.
        title: Optional plot title.
        figsize: Figure size.
        legend_outside: Place the legend to the right of the axes.

    Returns:
        ``(fig, ax)``
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import Patch

    if transparency is None:
        from ..config.library import get_config
        transparency = get_config().mask_transparency

    colors = mask.generate_colors(transparency)
    canvas = image.convert("RGBA")
    canvas.alpha_composite(mask.to_image(colors=colors))

    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(np.asarray(canvas))
    ax.set_axis_off()
    if title:
        ax.set_title(title, pad=6)

    present = np.unique(mask.mask)
    handles = [
        Patch(facecolor=colors[i, :3] / 255.0, edgecolor="#333", linewidth=0.4, label=mask.classes[i])
        for i in present
    ]
    if legend_outside:
        ax.legend(handles=handles, loc="center left", bbox_to_anchor=(1.0, 0.5), frameon=False)
    else:
        ax.legend(handles=handles, loc="best", frameon=False)
    plt.tight_layout()
    return fig, ax
