"""
File Operations - Download, extraction and directory helpers

Thin wrappers over requests, zipfile and shutil that translate failures
into the build exception hierarchy.
"""

import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Optional, Union

import requests

from nsis_build.utils.exceptions import ArchiveError, FileOperationError, NetworkError
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

CHUNK_SIZE = 1024 * 1024


def ensure_clean_directory(path: PathLike) -> Path:
    """Delete the directory's contents (or create it) so it exists and is empty."""
    directory = Path(path)
    try:
        if directory.exists():
            for child in directory.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        else:
            directory.mkdir(parents=True)
    except OSError as e:
        raise FileOperationError(str(directory), "clean", "Could not clean directory", original_error=e)
    logger.debug(f"[FILES] Clean directory: {directory}")
    return directory


def create_temp_file(suffix: str = "") -> Path:
    """Reserve a temporary file path; the caller deletes it."""
    fd, name = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return Path(name)


def delete_file(path: PathLike) -> None:
    """Delete a file if it exists."""
    target = Path(path)
    try:
        target.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise FileOperationError(str(target), "delete", "Could not delete file", original_error=e)


def download_file(
    url: str,
    destination: PathLike,
    timeout: float = 60.0,
    session: Optional[requests.Session] = None
) -> Path:
    """
    Stream a URL to a local file.

    Args:
        url: Source URL
        destination: File to write (overwritten)
        timeout: Connect/read timeout in seconds
        session: Optional requests session

    Returns:
        Path of the written file

    Raises:
        NetworkError: On connection errors, timeouts and non-2xx responses
    """
    target = Path(destination)
    http = session or requests
    logger.info(f"[DOWNLOAD] Downloading '{url}' to '{target}'")

    try:
        with http.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(target, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise NetworkError(url, "Download failed", status_code=status, original_error=e)
    except requests.Timeout as e:
        raise NetworkError(url, f"Download timed out after {timeout} seconds", original_error=e)
    except requests.RequestException as e:
        raise NetworkError(url, "Download failed", original_error=e)
    except OSError as e:
        raise FileOperationError(str(target), "download", "Could not write download", original_error=e)

    logger.debug(f"[DOWNLOAD] Wrote {target.stat().st_size} bytes to {target}")
    return target


def extract_zip(archive: PathLike, destination: PathLike) -> Path:
    """
    Extract a zip archive, refusing entries that would land outside destination.

    Raises:
        ArchiveError: The archive is corrupt or contains unsafe entries
    """
    archive_path = Path(archive)
    dest_dir = Path(destination)
    logger.info(f"[EXTRACT] Extracting '{archive_path.name}' to {dest_dir}")

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        base = dest_dir.resolve()
        with zipfile.ZipFile(archive_path, 'r') as zf:
            for member in zf.infolist():
                resolved = (dest_dir / member.filename).resolve()
                if resolved != base and base not in resolved.parents:
                    raise ArchiveError(
                        str(archive_path),
                        f"Refusing to extract outside destination: {member.filename}"
                    )
            zf.extractall(dest_dir)
    except zipfile.BadZipFile as e:
        raise ArchiveError(str(archive_path), "Not a valid zip archive", original_error=e)
    except OSError as e:
        raise FileOperationError(str(dest_dir), "extract", "Could not extract archive", original_error=e)

    return dest_dir


def rename_directory(source: PathLike, target: PathLike) -> Path:
    """
    Rename a directory; the target must not exist yet.

    Raises:
        FileOperationError: Source missing, target present, or rename failed
    """
    src = Path(source)
    dst = Path(target)
    if not src.is_dir():
        raise FileOperationError(str(src), "rename", "Source directory does not exist")
    if dst.exists():
        raise FileOperationError(str(dst), "rename", "Target already exists")

    try:
        src.rename(dst)
    except OSError as e:
        raise FileOperationError(str(src), "rename", f"Could not rename to '{dst}'", original_error=e)

    logger.info(f"[FILES] Renamed '{src.name}' to '{dst.name}'")
    return dst
