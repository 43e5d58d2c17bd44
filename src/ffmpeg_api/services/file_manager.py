"""Temporary file management for uploads and tool outputs."""

import logging
import os
import secrets
import shutil
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fastapi import UploadFile

from ..models.config import APIConfig
from .exceptions import UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def random_name() -> str:
    return secrets.token_hex(16)


class FileManager:
    """Owns the uploads/ and outputs/ directories under ``temp_dir``.

    Every file gets a random name, so concurrent requests never collide and no
    locking is needed.
    """

    def __init__(self, config: APIConfig):
        self.config = config
        self.uploads_dir = Path(config.uploads_dir)
        self.outputs_dir = Path(config.outputs_dir)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    async def save_upload(self, upload: UploadFile) -> Tuple[Path, int]:
        """
        Stream an uploaded file to disk.

        Args:
            upload: The multipart file received by FastAPI

        Returns:
            The stored path and its size in bytes

        Raises:
            UploadTooLargeError: If the upload exceeds ``max_upload_bytes``.
                The partial file is removed before raising.
        """
        path = self.uploads_dir / random_name()
        limit = self.config.max_upload_bytes
        size = 0

        try:
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > limit:
                        raise UploadTooLargeError(limit, size)
                    out.write(chunk)
        except BaseException:
            self.discard(path)
            raise
        finally:
            await upload.close()

        return path, size

    def new_output_path(self, extension: str) -> Path:
        return self.outputs_dir / f"{random_name()}.{extension}"

    def new_output_dir(self) -> Path:
        path = self.outputs_dir / random_name()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def discard(self, path: Optional[Path]) -> None:
        """Delete a file or directory, ignoring errors."""
        if path is None:
            return
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)

    def reset(self) -> None:
        """Wipe and recreate both temp directories."""
        for directory in (self.uploads_dir, self.outputs_dir):
            shutil.rmtree(directory, ignore_errors=True)
            directory.mkdir(parents=True, exist_ok=True)

    def sweep(self, max_age_seconds: Optional[int] = None) -> Dict[str, Any]:
        """Remove temp entries older than ``max_age_seconds``.

        Entries are top level files in uploads/ and outputs/ plus the
        per-request segment directories in outputs/.
        """
        if max_age_seconds is None:
            max_age_seconds = self.config.file_ttl_seconds
        current_time = time.time()

        files_deleted = 0
        bytes_freed = 0

        for directory in (self.uploads_dir, self.outputs_dir):
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                continue

            for entry in directory.iterdir():
                try:
                    modified = entry.stat().st_mtime
                except FileNotFoundError:
                    continue
                if current_time - modified < max_age_seconds:
                    continue

                entry_files, entry_bytes = _usage(entry)
                self.discard(entry)
                if not entry.exists():
                    files_deleted += entry_files
                    bytes_freed += entry_bytes

        return {
            "files_deleted": files_deleted,
            "bytes_freed": bytes_freed,
        }


def _usage(path: Path) -> Tuple[int, int]:
    if path.is_file():
        return 1, path.stat().st_size

    files = 0
    total = 0
    for root, _dirs, names in os.walk(path):
        for name in names:
            try:
                total += os.path.getsize(os.path.join(root, name))
                files += 1
            except OSError:
                continue
    return files, total
