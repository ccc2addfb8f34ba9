"""Transform and statistics helpers for image datasets.

Provides:
- Transform creation with optional light augmentations
- Loading per-channel statistics (mean/std) from a stats file
"""

import json

from torchvision import transforms

IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


def make_transforms(
    mean=IMAGENET_MEAN,
    std=IMAGENET_STD,
    size=None,
    aug_flip: bool = False,
    aug_jitter: bool = False,
    aug_rotation: bool = False,
    rotation_degrees: float = 10.0
):
    """Create a torchvision transform pipeline.

    Args:
        mean: Per-channel mean (length-3 sequence of floats) for normalization.
        std: Per-channel std (length-3 sequence of floats) for normalization.
        size: Optional ``(height, width)`` or int passed to ``Resize``.
        aug_flip: If True, apply random horizontal flip with p=0.5.
        aug_jitter: If True, apply color jitter on brightness, contrast, and saturation.
        aug_rotation: If True, apply small random rotation (±rotation_degrees).
        rotation_degrees: Maximum rotation angle in degrees (only used if aug_rotation=True).

    Returns:
        transforms.Compose combining optional resize and augmentations, ToTensor, and Normalize.
    """
    tfms = []
    if size is not None:
        tfms.append(transforms.Resize(size))

    # Geometric augmentations (applied before ToTensor)
    if aug_rotation:
        tfms.append(transforms.RandomRotation(degrees=(-rotation_degrees, rotation_degrees)))
    if aug_flip:
        tfms.append(transforms.RandomHorizontalFlip(p=0.5))

    if aug_jitter:
        tfms.append(transforms.ColorJitter(brightness=0.2, contrast=0.2, saturation=0.1, hue=0.0))

    # Must be last
    tfms.append(transforms.ToTensor())
    tfms.append(transforms.Normalize(mean=mean, std=std))

    return transforms.Compose(tfms)


def load_stats(stats_path):
    """Load per-channel normalization statistics from a JSON file.

    The file holds ``mean`` and ``std`` as 3-element sequences. Statistics
    measured on raw pixels carry ``max_pixel_value`` (e.g. 255) and are
    rescaled to the [0, 1] range produced by ``ToTensor()``.

    Args:
        stats_path: Path to the stats JSON file.

    Returns:
        Tuple (mean, std) as lists of floats.
    """
    with open(stats_path, "r") as f:
        stats = json.load(f)
    scale = float(stats.get("max_pixel_value", 1.0))
    mean = [float(m) / scale for m in stats["mean"]]
    std = [float(s) / scale for s in stats["std"]]
    if len(mean) != 3 or len(std) != 3:
        raise ValueError(f"Expected 3-channel mean/std in {stats_path}, got {len(mean)} and {len(std)}")
    return mean, std
