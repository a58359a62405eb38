"""
Local image storage for generated and uploaded images.

Files live under the configured upload directory and are addressed by
public paths of the form "/uploads/<filename>".
"""

import base64
import binascii
import logging
import mimetypes
import re
import secrets
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import aiofiles
import aiofiles.os
from PIL import Image, UnidentifiedImageError

from core.config import Settings, get_settings
from core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:([^;]+);base64,")

_EXTENSIONS = {
    "PNG": "png",
    "JPEG": "jpg",
    "WEBP": "webp",
    "GIF": "gif",
}


@dataclass
class StoredImage:
    """Result of saving an image."""

    url: str
    filename: str
    path: Path
    size: int
    width: int | None = None
    height: int | None = None
    content_type: str = "image/png"


def decode_base64_image(value: str) -> tuple[bytes, str | None]:
    """
    Decode a base64 payload, with or without a data URL prefix.

    Returns:
        (raw bytes, mime type from the data URL or None)
    """
    match = _DATA_URL_RE.match(value)
    mime_type = match.group(1) if match else None
    payload = _DATA_URL_RE.sub("", value)
    try:
        return base64.b64decode(payload, validate=False), mime_type
    except (binascii.Error, ValueError) as e:
        raise ValidationError(message="Invalid base64 image data") from e


def inspect_image(data: bytes) -> tuple[int, int, str]:
    """Return (width, height, format) of an encoded image, or raise ValidationError."""
    try:
        with Image.open(BytesIO(data)) as img:
            return img.width, img.height, img.format or "PNG"
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(message="Payload is not a valid image") from e


class ImageStorage:
    """Stores image files on the local file system."""

    def __init__(self, settings: Settings | None = None, base_dir: str | Path | None = None):
        self._settings = settings or get_settings()
        self.base_path = Path(base_dir or self._settings.upload_dir)
        self.url_prefix = "/" + self._settings.upload_url_prefix.strip("/")
        self.search_paths = [self.base_path] + [
            Path(p) for p in self._settings.upload_search_dirs
        ]

        self.base_path.mkdir(parents=True, exist_ok=True)

    def _make_filename(self, prefix: str, extension: str) -> str:
        timestamp = int(time.time() * 1000)
        random_id = secrets.token_hex(4)
        return f"{prefix}-{timestamp}-{random_id}.{extension}"

    def public_url(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    async def save_bytes(self, data: bytes, prefix: str = "img") -> StoredImage:
        """
        Validate and write raw image bytes.

        Args:
            data: Encoded image bytes
            prefix: Filename prefix (e.g. "imagen", "upload")

        Returns:
            StoredImage with the public URL and dimensions
        """
        width, height, fmt = inspect_image(data)
        extension = _EXTENSIONS.get(fmt.upper(), "png")
        filename = self._make_filename(prefix, extension)
        file_path = self.base_path / filename

        try:
            await aiofiles.os.makedirs(self.base_path, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"Failed to save image to disk: {e}")
            raise StorageError() from e

        logger.debug(f"Saved image to local storage: {filename}")

        return StoredImage(
            url=self.public_url(filename),
            filename=filename,
            path=file_path,
            size=len(data),
            width=width,
            height=height,
            content_type=mimetypes.guess_type(filename)[0] or "image/png",
        )

    async def save_base64(self, value: str, prefix: str = "img") -> StoredImage:
        """Decode and store a base64 image string."""
        data, _ = decode_base64_image(value)
        return await self.save_bytes(data, prefix=prefix)

    def _safe_relative(self, path: str) -> Path:
        """Normalise a request path and reject directory traversal."""
        relative = path.strip()
        if relative.startswith(self.url_prefix + "/"):
            relative = relative[len(self.url_prefix) + 1 :]
        relative = relative.lstrip("/\\")

        candidate = Path(relative)
        if not relative or candidate.is_absolute() or ".." in candidate.parts:
            raise ValidationError(message="Invalid file path")
        return candidate

    def resolve(self, path: str) -> Path | None:
        """
        Find the file for a public path or relative key.

        Checks the upload directory first, then the fallback directories.
        """
        relative = self._safe_relative(path)

        for root in self.search_paths:
            full_path = (root / relative).resolve()
            if not full_path.is_relative_to(root.resolve()):
                continue
            if full_path.is_file():
                return full_path
        return None

    async def load(self, path: str) -> tuple[bytes, str] | None:
        """Load file bytes and mime type, or None if not found."""
        full_path = self.resolve(path)
        if full_path is None:
            return None

        try:
            async with aiofiles.open(full_path, "rb") as f:
                data = await f.read()
        except OSError as e:
            logger.error(f"Failed to load file {path}: {e}")
            return None

        mime_type = mimetypes.guess_type(full_path.name)[0] or "application/octet-stream"
        return data, mime_type

    async def delete(self, path: str) -> bool:
        """Delete a stored file. Returns False if it did not exist."""
        try:
            full_path = self.resolve(path)
        except ValidationError:
            return False
        if full_path is None:
            return False

        try:
            await aiofiles.os.remove(full_path)
        except OSError as e:
            logger.error(f"Failed to delete file {path}: {e}")
            return False

        logger.debug(f"Deleted file from local storage: {path}")
        return True

    def exists(self, path: str) -> bool:
        try:
            return self.resolve(path) is not None
        except ValidationError:
            return False

    def list_files(self) -> list[str]:
        """Public URLs of every file in the upload directory."""
        if not self.base_path.exists():
            return []
        return sorted(
            self.public_url(p.name) for p in self.base_path.iterdir() if p.is_file()
        )

    def is_local_url(self, url: str | None) -> bool:
        return bool(url) and url.startswith(self.url_prefix + "/")
