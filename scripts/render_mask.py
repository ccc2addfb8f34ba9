#!/usr/bin/env python3
"""Draw a saved segmentation mask over its source image.

Reads the source image, a mask JSON file as written by
``CategoryMask.to_json()`` and a classes file (one class name per line, index
0 first), then writes the image with every class highlighted in a random
color. With ``--background`` the background class (index 0) is replaced by a
fixed color instead; ``--background 00000000`` removes it.

Typical usage:
  python scripts/render_mask.py --image street.jpg --mask street_mask.json \
    --classes classes.txt --out street_overlay.png [--transparency 0.5] \
    [--background 00000000] [--seed 7]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from modalkit.config import get_config
from modalkit.core import set_seed, setup_logging
from modalkit.modality.cv import CategoryMask, ImageFactory

logger = logging.getLogger("render_mask")

DEFAULT_TRANSPARENCY = 0.5


def parse_color(value: str) -> int:
    """Parse ``AARRGGBB`` or ``RRGGBB`` hex (optional ``#``/``0x``) into packed ARGB."""
    text = value.strip().lower()
    for prefix in ("#", "0x"):
        if text.startswith(prefix):
            text = text[len(prefix):]
    if len(text) not in (6, 8):
        raise argparse.ArgumentTypeError(f"Expected RRGGBB or AARRGGBB, got {value!r}")
    try:
        argb = int(text, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid hex color: {value!r}")
    if len(text) == 6:
        argb |= 0xFF000000
    return argb


def read_classes(path: Path) -> List[str]:
    """Read one class name per non-empty line."""
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: List of CLI arguments (excluding the program name).

    Returns:
        Parsed ``argparse.Namespace``.
    """
    p = argparse.ArgumentParser(description="Draw a segmentation mask JSON over its source image.")
    p.add_argument("--image", type=str, required=True, help="Source image the mask was predicted on.")
    p.add_argument("--mask", type=str, required=True, help="Mask JSON written by CategoryMask.to_json().")
    p.add_argument("--classes", type=str, required=True, help="Text file with one class name per line.")
    p.add_argument("--out", type=str, default=None, help="Output PNG (defaults to <image>_mask.png).")
    p.add_argument("--transparency", type=float, default=DEFAULT_TRANSPARENCY, help="Overlay transparency in [0, 1].")
    p.add_argument("--background", type=parse_color, default=None, help="Replace class 0 with this AARRGGBB color.")
    p.add_argument("--seed", type=int, default=None, help="Seed for the class palette (defaults to environment.random_seed).")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Program entry point.

    Args:
        argv: List of CLI arguments (excluding the program name).

    Returns:
        Process exit code where 0 indicates success.
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging()
    set_seed(args.seed if args.seed is not None else get_config().random_seed)

    image_path = Path(args.image)
    out_path = Path(args.out) if args.out else image_path.with_name(f"{image_path.stem}_mask.png")

    classes = read_classes(Path(args.classes))
    mask = CategoryMask.from_json(Path(args.mask).read_text(encoding="utf-8"), classes)
    image = ImageFactory.get_instance().from_file(image_path).convert("RGBA")

    mask.draw_mask(image, transparency=args.transparency, background=args.background)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(out_path)

    logger.info(f"Mask {mask.width}x{mask.height} with {len(classes)} classes written to {out_path}")
    print(f"Overlay written to: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
