"""
VendorBridge Backend — Avatar Key Scheme and Latest-Version Resolution
========================================================================

What:  Computes physical storage keys for avatars and picks the "current"
       object among several timestamped copies of the same original file.
Why:   This is the only piece of the profile endpoints with real logic; the
       rest is SDK calls. Keeping it pure makes it testable without storage.
How:   Every key is built and parsed by one structured type, AvatarKey.

Two naming conventions share the avatar folder:

    Fixed name (one object per user, overwritten on update):
        avatars/<userId>.jpg

    Timestamped (one object per upload, accumulates until removed):
        avatars/<unixMillis>_<originalName>

Resolution over a listing:
    avatars/100_photo.jpg   ┐
    avatars/200_photo.jpg   ├─ candidates for "photo.jpg" → 200 wins
    avatars/abc_photo.jpg   ┘  (non-numeric prefix ranks below any number)
    avatars/50_other.jpg       ignored
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional, Tuple

from app.exceptions import NotFoundError, UserInputError

USER_AVATAR_EXTENSION = "jpg"

# Unix millis stay 13 digits wide from 2001 until 2286
UPLOAD_TIMESTAMP_DIGITS = 13

_PATH_SEPARATORS = ("/", "\\")


def _unix_millis() -> int:
    return int(time.time() * 1000)


def sanitize_original_name(original_name: str) -> str:
    """
    Make a client-supplied filename safe to embed in a storage key.

    Path separators become underscores so a name like "../x.jpg" cannot
    escape the avatar folder. Nothing else changes, so the key always ends
    with "_" plus the name as sent.

    Raises:
        UserInputError: the name is empty or only whitespace.
    """
    name = original_name or ""
    for sep in _PATH_SEPARATORS:
        name = name.replace(sep, "_")
    if not name.strip():
        raise UserInputError("A file name is required", field="originalName")
    return name


@dataclass(frozen=True)
class AvatarKey:
    """
    Structured form of a physical avatar key.

    Attributes:
        folder:        Namespace inside the bucket (e.g. "avatars")
        logical_name:  User id (fixed-name) or original filename (timestamped)
        timestamp:     Upload time in unix millis; None for fixed-name keys
                       and for timestamped-looking keys with a bad prefix
        extension:     Only used by fixed-name keys ("jpg"); timestamped keys
                       keep the extension inside logical_name
    """

    folder: str
    logical_name: str
    timestamp: Optional[int] = None
    extension: str = ""

    def encode(self) -> str:
        if self.timestamp is not None:
            file_part = f"{self.timestamp}_{self.logical_name}"
        elif self.extension:
            file_part = f"{self.logical_name}.{self.extension}"
        else:
            file_part = self.logical_name
        return f"{self.folder}/{file_part}"

    @classmethod
    def decode(cls, name: str) -> "AvatarKey":
        """
        Parse a physical key back into its parts.

        The prefix before the first underscore is the timestamp when it is all
        digits. Anything else decodes as a plain name with no timestamp, so
        decoding never raises. A fixed-name key whose userId looks like
        "<digits>_<rest>" (avatars/5_photo.jpg) reads back as a timestamped
        key; the name alone cannot tell the two apart.
        """
        folder, _, file_part = name.rpartition("/")
        prefix, sep, rest = file_part.partition("_")
        if sep and prefix.isdecimal() and rest:
            return cls(folder=folder, logical_name=rest, timestamp=int(prefix))
        stem, dot, ext = file_part.rpartition(".")
        if dot and stem:
            return cls(folder=folder, logical_name=stem, extension=ext)
        return cls(folder=folder, logical_name=file_part)


@dataclass
class StoredObject:
    """A physical object in the avatar folder, as seen by one listing."""

    name: str
    logical_key: str
    timestamp: Optional[int] = None
    content_type: str = "application/octet-stream"
    content: Optional[bytes] = None
    size: Optional[int] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def from_name(cls, name: str, **kwargs) -> "StoredObject":
        """Build a StoredObject whose logical key and timestamp come from its name."""
        key = AvatarKey.decode(name)
        return cls(name=name, logical_key=key.logical_name, timestamp=key.timestamp, **kwargs)


class AvatarKeys:
    """
    Key builder and resolver bound to one avatar folder and one clock.

    Args:
        folder: Namespace inside the storage bucket.
        clock:  Returns the current time in unix millis; injectable for tests.
    """

    def __init__(self, folder: str = "avatars", clock: Optional[Callable[[], int]] = None):
        self.folder = folder.strip("/")
        self._clock = clock or _unix_millis

    @property
    def prefix(self) -> str:
        return f"{self.folder}/"

    def key_for_upload(self, original_name: str) -> str:
        """Key for a new timestamped upload: <folder>/<millis>_<originalName>."""
        logical = sanitize_original_name(original_name)
        return AvatarKey(self.folder, logical, timestamp=self._clock()).encode()

    def key_for_user(self, user_id: str) -> str:
        """
        Fixed key for a user's avatar: <folder>/<userId>.jpg.

        Raises:
            UserInputError: user_id is empty.
        """
        if not user_id:
            raise UserInputError("A userId is required", field="userId")
        return AvatarKey(self.folder, user_id, extension=USER_AVATAR_EXTENSION).encode()

    def candidates(self, objects: Iterable[StoredObject], original_name: str) -> list:
        """Objects whose name carries `_<originalName>` (sanitized like uploads)."""
        needle = "_" + sanitize_original_name(original_name)
        return [obj for obj in objects if needle in obj.name]

    def previous_uploads(
        self,
        objects: Iterable[StoredObject],
        original_name: str,
        before: Optional[int] = None,
    ) -> list:
        """
        Timestamped copies of exactly `original_name` in this folder.

        Stricter than candidates(): "avatars/1_my_photo.jpg" and a user's
        "avatars/x_photo.jpg" are not copies of "photo.jpg". The prefix must
        be a full unix-millis value (UPLOAD_TIMESTAMP_DIGITS digits) no later
        than `before`, so a fixed-name avatar such as "avatars/5_photo.jpg"
        (userId "5_photo") is never taken for an upload.
        """
        logical = sanitize_original_name(original_name)
        found = []
        for obj in objects:
            key = AvatarKey.decode(obj.name)
            if key.folder != self.folder or key.timestamp is None or key.logical_name != logical:
                continue
            prefix = obj.name.rpartition("/")[2].partition("_")[0]
            if len(prefix) != UPLOAD_TIMESTAMP_DIGITS:
                continue
            if before is not None and key.timestamp > before:
                continue
            found.append(obj)
        return found

    def resolve_latest(self, objects: Iterable[StoredObject], original_name: str) -> StoredObject:
        """
        Pick the most recent timestamped copy of `original_name`.

        Ranking: numeric timestamps beat non-numeric prefixes; larger
        timestamps beat smaller ones; equal timestamps fall back to the
        lexicographically greatest full name. Input order never matters.

        Raises:
            NotFoundError: no object in the listing matches.
        """
        matches = self.candidates(objects, original_name)
        if not matches:
            raise NotFoundError(resource="image", resource_id=original_name)
        return max(matches, key=_rank)


def _rank(obj: StoredObject) -> Tuple[bool, int, str]:
    timestamp = AvatarKey.decode(obj.name).timestamp
    return timestamp is not None, timestamp or 0, obj.name
