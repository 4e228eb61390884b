# =============================================================================
# mobile_core/utils/file_utils.py
# Local Filesystem Helpers (documents dir, download targets, multipart files)
# =============================================================================

from __future__ import annotations
import hashlib
import mimetypes
import os
import sys
from pathlib import Path
from typing import Tuple, Union
from urllib.parse import unquote, urlparse

APP_DIR_NAME = "mobile-core"
DOWNLOADS_SUBDIR = "downloads"


def get_application_documents_directory() -> Path:
    """
    Per-user application documents directory (cross-platform).

    Honors MOBILE_CORE_HOME when set, mainly for tests and sandboxes.
    """
    override = os.environ.get("MOBILE_CORE_HOME")
    if override:
        return Path(override)

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME


def get_file_from_url(file_url: str, base_dir: Path) -> Path:
    """
    Resolve the local path a remote file is downloaded to.

    The same URL always maps to the same path. The hash prefix keeps files
    with the same name from different hosts or folders apart.

    Args:
        file_url: Absolute URL of the remote file
        base_dir: Storage root; files land under ``base_dir/downloads``

    Returns:
        Destination path (its parent directory is created)
    """
    parsed = urlparse(file_url)
    name = Path(unquote(parsed.path)).name or "download"
    digest = hashlib.sha1(file_url.encode("utf-8")).hexdigest()[:12]

    target_dir = Path(base_dir) / DOWNLOADS_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)
    return target_dir / f"{digest}_{name}"


def convert_file_to_multipart_file(
    file: Union[str, Path],
) -> Tuple[str, bytes, str]:
    """
    Read a local file into the (filename, content, mime type) triple used for
    multipart file parts.
    """
    path = Path(file)
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), content_type
