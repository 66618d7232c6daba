"""
VendorBridge Backend — Avatar Upload Validation
=================================================

What:  Checks an uploaded avatar before any storage call is made.
Why:   Storage is a paid, public bucket; rejecting junk early keeps it clean
       and gives the client a 400 instead of a provider error.
How:   Cheap checks first: presence → emptiness → size → extension →
       MIME type read from the file's header bytes.

Content type rules:
    - The stored content type is the one libmagic detects, never the
      client's declaration. A renamed HTML or script file is rejected even
      when it arrives as "photo.jpg" with Content-Type image/jpeg.
    - The detected type must be one of ALLOWED_CONTENT_TYPES.
"""

import logging
from pathlib import PurePosixPath
from typing import Optional

import magic

from app.exceptions import ProviderError, UserInputError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": {".jpg", ".jpeg"},
    "image/png": {".png"},
    "image/webp": {".webp"},
    "image/gif": {".gif"},
}

EXTENSION_CONTENT_TYPES = {
    ext: content_type
    for content_type, extensions in ALLOWED_CONTENT_TYPES.items()
    for ext in extensions
}

# Older libmagic builds report the non-standard alias
MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg"}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


class FileService:
    """
    Validates avatar uploads against a size limit and an image allow list.

    Args:
        max_file_size: Maximum accepted payload in bytes
    """

    def __init__(self, max_file_size: int):
        self.max_file_size = max_file_size

    def validate_extension(self, filename: str) -> str:
        """Returns the lowercase extension (with dot)."""
        ext = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
        if ext not in EXTENSION_CONTENT_TYPES:
            raise UserInputError(
                message=(
                    f"File type '{ext or 'none'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(EXTENSION_CONTENT_TYPES))}"
                ),
                field="file",
                context={"extension": ext},
            )
        return ext

    def validate_size(self, content: bytes) -> None:
        if not content:
            raise UserInputError("The uploaded file is empty", field="file")
        if len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise UserInputError(
                message=f"File is too large ({len(content) / (1024 * 1024):.1f}MB). Maximum is {max_mb:.1f}MB.",
                field="file",
                context={"size": len(content), "max_size": self.max_file_size},
            )

    def validate_mime_type(self, content: bytes, filename: str) -> str:
        """
        Detect the real MIME type from the file's header bytes.

        Returns:
            Detected MIME type, e.g. "image/jpeg"

        Raises:
            UserInputError: the bytes are not one of the allowed image types
            ProviderError:  libmagic could not inspect the buffer
        """
        try:
            detected = magic.from_buffer(content, mime=True)
        except Exception as e:
            logger.error("MIME type detection failed for %s: %s", filename, e)
            raise ProviderError("file_inspection", "Could not verify file type. Please try again.")

        mime_type = MIME_ALIASES.get(detected, detected)
        if mime_type not in ALLOWED_CONTENT_TYPES:
            raise UserInputError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    "The file must be a valid image."
                ),
                field="file",
                context={"detected_mime": mime_type, "allowed": sorted(ALLOWED_CONTENT_TYPES)},
            )
        return mime_type

    def validate(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        declared_content_type: Optional[str] = None,
    ) -> str:
        """
        Run every check and return the content type to store the object with.

        Raises:
            UserInputError: no file, empty file, too large, or not an image
        """
        if content is None or not filename:
            raise UserInputError("No file was sent", field="file")
        self.validate_size(content)
        self.validate_extension(filename)
        content_type = self.validate_mime_type(content, filename)
        declared = (declared_content_type or "").split(";")[0].strip().lower()
        if declared not in GENERIC_CONTENT_TYPES and MIME_ALIASES.get(declared, declared) != content_type:
            logger.warning("Upload %s declared as %s but contains %s", filename, declared, content_type)
        logger.debug("Validated upload %s (%d bytes, %s)", filename, len(content), content_type)
        return content_type
