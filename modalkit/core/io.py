"""URL and download helpers shared by the modality factories and the model zoo."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests
from tqdm import tqdm

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
BLOCK_SIZE = 8192


def is_absolute_uri(url: str) -> bool:
    """Return True when ``url`` carries a scheme such as ``http`` or ``file``.

    Single-letter schemes are Windows drive letters, not URIs.
    """
    scheme = urlparse(url).scheme
    return len(scheme) > 1


def read_url_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch the full content behind an absolute URI.

    Raises:
        OSError: The resource cannot be read. ``requests`` failures are
            re-raised as ``OSError`` so callers only deal with I/O errors.
    """
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path)).read_bytes()
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise OSError(f"Failed to read {url}: {e}") from e
    return response.content


def download_file(url: str, output: Path, timeout: float = DEFAULT_TIMEOUT) -> Path:
    """Download ``url`` to ``output`` through a temporary file.

    The destination only appears once the transfer completed, so an
    interrupted download never leaves a truncated artifact behind.
    """
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    temp_dir = tempfile.mkdtemp(dir=output.parent)
    temp_output = os.path.join(temp_dir, output.name)
    logger.info(f"Downloading {url} to {output}")
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            if response.status_code == 404:
                raise FileNotFoundError(f"Remote file not found: {url}")
            response.raise_for_status()
            total_size_in_bytes = int(response.headers.get("content-length", 0))
            with tqdm(total=total_size_in_bytes, unit="iB", unit_scale=True, leave=False, dynamic_ncols=True) as progress_bar:
                with open(temp_output, "wb") as f:
                    for data in response.iter_content(BLOCK_SIZE):
                        progress_bar.update(len(data))
                        f.write(data)
        shutil.move(temp_output, output)
    except requests.exceptions.RequestException as e:
        raise OSError(f"Error downloading {url}: {e}") from e
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
    return output
