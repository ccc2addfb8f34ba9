#!/usr/bin/env python3
"""Print basic properties of audio files.

Decodes each file or URL with the process-wide ``AudioFactory`` (the first
installed backend in priority order) and prints its sample rate, channel
count and duration. Unreadable inputs are reported and make the exit code 1.

Typical usage:
  python scripts/audio_info.py clip.wav https://example.com/clip.flac
"""

import argparse
import sys
from typing import List, Optional

from modalkit.core import setup_logging
from modalkit.modality.audio import AudioFactory


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(description="Print sample rate, channels and duration of audio files.")
    p.add_argument("inputs", nargs="+", help="Audio file paths or URLs.")
    p.add_argument("--log-level", type=str, default=None, help="Logging level (defaults to the configuration).")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.log_level)
    factory = AudioFactory.get_instance()

    failures = 0
    for source in args.inputs:
        try:
            audio = factory.from_url(source)
        except OSError as e:
            failures += 1
            print(f"{source}: error: {e}", file=sys.stderr)
            continue
        print(
            f"{source}: {audio.sample_rate:g} Hz, {audio.channels} channel(s), "
            f"{audio.duration:.3f} s ({len(audio)} samples)"
        )
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
