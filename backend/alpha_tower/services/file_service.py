"""
Alpha Tower Backend — Avatar File Storage Service
===================================================

What:  Validates, stores, resolves and deletes uploaded avatar files.
How:   Extension and size checks, then an async write (aiofiles) under the
       upload directory as `<random hex>-<sanitized original name>`.
Who:   Used by the avatar route (store), UpdateUserAvatarService and
       DeleteUserService (cleanup), and the /files route (resolve).

Security Model:
    - Stored names start with 32 random hex chars, so uploads never collide
      and never overwrite each other
    - Original names are reduced to [A-Za-z0-9._-] and stripped of any
      directory part
    - Every path handed back in (cleanup, serving) must resolve inside the
      upload root
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from alpha_tower.exceptions import BadRequestError, FileStorageError, NotFoundError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif"}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class FileService:
    """
    Manages the avatar upload lifecycle.

    Directory Structure:
        uploads/
        ├── 9f1c...e2-profile.png
        └── 03ab...7d-me.jpg
    """

    def __init__(self, upload_directory: str, max_size: int):
        self.upload_root = Path(upload_directory).resolve()
        self.max_size = max_size
        self.upload_root.mkdir(parents=True, exist_ok=True)

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized (lowercase) extension.

        Raises:
            BadRequestError if the extension is not an allowed image type
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise BadRequestError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="avatar",
                context={"extension": ext},
            )
        return ext

    def validate_size(self, actual_size: int) -> None:
        if actual_size == 0:
            raise BadRequestError(message="Avatar file is empty.", field="avatar")

        if actual_size > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise BadRequestError(
                message=f"Avatar file is too large. Maximum size is {max_mb:.1f}MB.",
                field="avatar",
                context={"max_size": self.max_size, "actual_size": actual_size},
            )

    def generate_filename(self, original_name: str) -> str:
        """`<uuid4 hex>-<sanitized basename>`, e.g. `9f1c...e2-profile.png`."""
        base = _UNSAFE_CHARS.sub("_", Path(original_name).name).strip("._") or "avatar"
        return f"{uuid.uuid4().hex}-{base}"

    def resolve_path(self, filename: str) -> Path:
        """
        Absolute path of a stored file.

        Raises:
            BadRequestError: the name escapes the upload root (e.g. `../x`)
        """
        path = (self.upload_root / filename).resolve()
        if path != self.upload_root and self.upload_root not in path.parents:
            raise BadRequestError(message="Invalid file path", context={"filename": filename})
        return path

    async def store_file(self, content: bytes, original_name: str) -> str:
        """
        Write content to the upload root; returns the stored filename.

        Raises:
            FileStorageError if the write fails
        """
        filename = self.generate_filename(original_name)
        path = self.upload_root / filename

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded avatar. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return filename

    async def validate_and_store(self, filename: Optional[str], content: bytes) -> str:
        """
        Complete validation and storage pipeline for one upload.

        Order: extension → size → write.
        """
        original_name = filename or "avatar"
        self.validate_extension(original_name)
        self.validate_size(len(content))
        return await self.store_file(content, original_name)

    def open_stored(self, filename: str) -> Path:
        """
        Path of an existing stored file, for serving.

        Raises:
            NotFoundError if nothing is stored under that name
        """
        path = self.resolve_path(filename)
        if not path.is_file():
            raise NotFoundError("File not found.", resource_id=filename)
        return path

    async def cleanup_file(self, filename: str) -> None:
        """
        Remove a stored file if it exists (replaced or orphaned avatars).

        Best effort: a failed delete is logged and never fails the request
        that triggered it.
        """
        try:
            path = self.resolve_path(filename)
            if path.is_file():
                path.unlink()
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", filename)
        except (OSError, BadRequestError) as e:
            logger.warning("Failed to clean up file %s: %s", filename, str(e))
