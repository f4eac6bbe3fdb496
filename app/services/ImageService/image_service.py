from __future__ import annotations

import base64
import logging
from pathlib import Path

from app.entities.message import ImageAttachment
from app.services.ImageService.image_service_interface import ImageServiceInterface


class ImageProcessingError(Exception):
    """Base error for image attachment failures."""


class ImageReadError(ImageProcessingError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read image '{path}': {reason}")


class UnsupportedImageError(ImageProcessingError):
    def __init__(self, path: str, extension: str | None) -> None:
        self.path = path
        self.extension = extension
        super().__init__(
            f"Unsupported image type for '{path}': {extension or 'no extension'}"
        )


class ImageService(ImageServiceInterface):
    """
    Turns a local image file into an inline attachment.

    The media type is taken from the file extension only. Bytes are passed
    through untouched; the inference server is trusted to decode them.
    """

    MIME_TYPES: dict[str, str] = {
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".webp": "image/webp",
        ".gif": "image/gif",
    }

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def mime_type_for(self, path: str) -> str:
        extension = Path(path).suffix.lower()
        mime_type = self.MIME_TYPES.get(extension)
        if mime_type is None:
            raise UnsupportedImageError(path, extension or None)
        return mime_type

    def encode(self, path: str) -> ImageAttachment:
        mime_type = self.mime_type_for(path)
        file_path = Path(path)

        if not file_path.is_file():
            raise ImageReadError(path, "no such file")

        try:
            data = file_path.read_bytes()
        except OSError as exc:
            raise ImageReadError(path, exc.strerror or str(exc)) from exc

        size_bytes = len(data)
        if size_bytes == 0:
            raise ImageReadError(path, "empty image file")

        attachment: ImageAttachment = {
            "base64": base64.b64encode(data).decode("ascii"),
            "file_name": file_path.name,
            "mime_type": mime_type,
            "size_bytes": size_bytes,
        }
        self.logger.info(
            "Encoded image attachment: %s (%s, %s bytes)",
            file_path.name,
            mime_type,
            size_bytes,
        )
        return attachment
