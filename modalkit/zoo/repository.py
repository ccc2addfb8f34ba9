"""Model artifact repositories.

Artifacts live at ``<base>/<group path>/<artifact_id>/<version>/`` where the
group path is the dotted group id split into directories
(``cv.classification`` -> ``cv/classification``). A repository is either a
local directory or an ``http(s)`` base URL; remote files are downloaded into
a cache directory on first use.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..core.io import download_file

logger = logging.getLogger(__name__)


class Repository:
    """Resolves artifact files from a local directory or a remote base URL.

    Args:
        base_uri: Local directory, ``file://`` URI or ``http(s)://`` base URL.
        cache_dir: Download cache for remote repositories. ``None`` reads
            ``repository.cache_dir`` from the configuration.
    """

    def __init__(self, base_uri: Union[str, Path], cache_dir: Optional[Union[str, Path]] = None):
        self.base_uri = str(base_uri)
        parsed = urlparse(self.base_uri)
        self.is_remote = parsed.scheme in ("http", "https")
        if parsed.scheme == "file":
            self.base_dir = Path(url2pathname(parsed.path))
        elif self.is_remote:
            self.base_dir = None
        else:
            self.base_dir = Path(self.base_uri).expanduser()

        if cache_dir is None:
            from ..config.library import get_config
            cache_dir = get_config().repository_cache_dir
        self.cache_dir = Path(cache_dir).expanduser()

    @classmethod
    def from_config(cls) -> "Repository":
        """Build the repository named by ``repository.base_uri`` in the configuration."""
        from ..config.library import get_config
        repo_config = get_config().get_repository_config()
        return cls(repo_config["base_uri"], cache_dir=repo_config["cache_dir"])

    @staticmethod
    def artifact_path(group_id: str, artifact_id: str, version: str) -> PurePosixPath:
        return PurePosixPath(*group_id.split("."), artifact_id, version)

    def resolve(self, group_id: str, artifact_id: str, version: str) -> Path:
        """Return the local directory that holds (or will hold) the artifact."""
        relative = self.artifact_path(group_id, artifact_id, version)
        root = self.cache_dir if self.is_remote else self.base_dir
        return root / Path(relative)

    def open_file(self, group_id: str, artifact_id: str, version: str, name: str) -> Path:
        """Return the local path of one artifact file, downloading it if needed.

        Raises:
            FileNotFoundError: The repository has no such file.
            OSError: A remote file could not be downloaded.
        """
        path = self.resolve(group_id, artifact_id, version) / name
        if path.is_file():
            return path
        if not self.is_remote:
            raise FileNotFoundError(f"Artifact file not found: {path}")

        url = f"{self.base_uri.rstrip('/')}/{self.artifact_path(group_id, artifact_id, version)}/{name}"
        return download_file(url, path)

    def __repr__(self) -> str:
        return f"Repository({self.base_uri!r})"
