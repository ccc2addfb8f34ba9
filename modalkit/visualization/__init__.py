"""
Visualization utilities.

Plotting helpers for model outputs, with matplotlib imported lazily.
"""

from .masks import plot_category_mask

__all__ = [
    "plot_category_mask",
]
