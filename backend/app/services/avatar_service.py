"""
VendorBridge Backend — Avatar Service (Profile Endpoint Orchestrator)
=======================================================================

What:  Implements the /api/profile operations on top of the storage gateway
       and the avatar key scheme.
Why:   Keeps the routes HTTP-only; every storage decision lives here.
How:   Stateless apart from its collaborators, which are passed in.

Operation map:
    upload(file)              → remove older "<ts>_<name>" copies, write
                                avatars/<now>_<name>
    get_user_image(userId)    → URL of avatars/<userId>.jpg (404 if absent)
    update_user_image(...)    → upsert avatars/<userId>.jpg
    delete_user_image(userId) → remove avatars/<userId>.jpg
    list_files()              → every object in the avatar folder
    latest_image(name)        → newest "<ts>_<name>" by timestamp

Concurrency: no per-key locking. Two uploads of the same name racing
through remove-then-write can both survive; the resolver still picks the
newest deterministically.
"""

import logging
from typing import List, Optional

from app.exceptions import NotFoundError
from app.schemas.profile import (
    AvatarResponse,
    AvatarUrlResponse,
    DeleteResponse,
    FileListResponse,
    StoredFileItem,
)
from app.services.avatar_keys import AvatarKey, AvatarKeys, StoredObject
from app.services.file_service import FileService
from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class AvatarService:
    """
    Args:
        storage: Storage gateway bound to the avatar bucket
        keys:    Key builder/resolver bound to the avatar folder
        files:   Upload validator
    """

    def __init__(self, storage: StorageService, keys: AvatarKeys, files: FileService):
        self.storage = storage
        self.keys = keys
        self.files = files

    async def _listing(self) -> List[StoredObject]:
        return await self.storage.list(self.keys.prefix)

    async def upload(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> AvatarResponse:
        """
        Store a new timestamped copy of an uploaded image.

        Older copies of the same original name are removed first so the
        folder normally holds one copy per name. Only full unix-millis
        prefixes no later than the new key count as copies; fixed-name
        avatars are left alone.
        """
        resolved_type = self.files.validate(filename, content, content_type)
        key = self.keys.key_for_upload(filename)

        uploaded_at = AvatarKey.decode(key).timestamp
        listing = await self._listing()
        stale = [obj.name for obj in self.keys.previous_uploads(listing, filename, before=uploaded_at)]
        if stale:
            logger.info("Replacing %d older copy(ies) of %s", len(stale), filename)
            await self.storage.remove(stale)

        await self.storage.upload(key, content, resolved_type, overwrite=False)
        return AvatarResponse(
            message="Image uploaded successfully",
            file_name=key,
            url=self.storage.get_public_url(key),
        )

    async def get_user_image(self, user_id: str) -> AvatarUrlResponse:
        key = self.keys.key_for_user(user_id)
        if not await self.storage.exists(key):
            raise NotFoundError(resource="image", resource_id=key)
        return AvatarUrlResponse(file_name=key, url=self.storage.get_public_url(key))

    async def update_user_image(
        self,
        user_id: str,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> AvatarResponse:
        """Upsert the user's fixed-name avatar. Last write wins."""
        key = self.keys.key_for_user(user_id)
        resolved_type = self.files.validate(filename, content, content_type)
        await self.storage.upload(key, content, resolved_type, overwrite=True)
        return AvatarResponse(
            message="Image updated successfully",
            file_name=key,
            url=self.storage.get_public_url(key),
        )

    async def delete_user_image(self, user_id: str) -> DeleteResponse:
        key = self.keys.key_for_user(user_id)
        await self.storage.remove([key])
        return DeleteResponse(message="Image deleted successfully", file_name=key)

    async def list_files(self) -> FileListResponse:
        listing = await self._listing()
        return FileListResponse(
            files=[
                StoredFileItem(
                    name=obj.name,
                    url=self.storage.get_public_url(obj.name),
                    timestamp=obj.timestamp,
                    size=obj.size,
                    content_type=obj.content_type,
                    updated_at=obj.updated_at,
                )
                for obj in listing
            ]
        )

    async def latest_image(self, original_name: str) -> AvatarUrlResponse:
        latest = self.keys.resolve_latest(await self._listing(), original_name)
        logger.debug("Latest copy of %s is %s", original_name, latest.name)
        return AvatarUrlResponse(
            file_name=latest.name,
            url=self.storage.get_public_url(latest.name),
            timestamp=AvatarKey.decode(latest.name).timestamp,
        )
