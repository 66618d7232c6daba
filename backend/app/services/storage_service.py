"""
VendorBridge Backend — Supabase Storage Gateway
=================================================

What:  Thin async wrapper around one Supabase Storage bucket.
Why:   Routes and the avatar service talk to storage through four calls
       (upload, remove, list, public URL) and never touch the SDK directly.
How:   The supabase-py client is synchronous, so every call runs in
       Starlette's threadpool. Any SDK exception becomes a ProviderError.
Who:   Built once in the application lifespan (or injected by tests) and
       handed to AvatarService.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from app.exceptions import ProviderError
from app.services.avatar_keys import StoredObject

logger = logging.getLogger(__name__)

PROVIDER = "storage"

# Supabase caps a single list call; larger folders are paged with offset
LIST_PAGE_SIZE = 100


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class StorageService:
    """
    Avatar storage operations against a single bucket.

    Args:
        client:      A configured supabase Client
        bucket_name: Bucket every operation targets
    """

    def __init__(self, client: Client, bucket_name: str):
        self.client = client
        self.bucket_name = bucket_name

    @classmethod
    def from_settings(cls, settings) -> "StorageService":
        """Create the supabase client from application settings."""
        if not settings.storage_configured:
            raise ProviderError(
                PROVIDER,
                "Storage is not configured. Set SUPABASE_URL and SUPABASE_KEY.",
            )
        client = create_client(settings.supabase_url, settings.supabase_key)
        logger.info("StorageService initialized for bucket=%s", settings.bucket_name)
        return cls(client, settings.bucket_name)

    def _bucket(self):
        return self.client.storage.from_(self.bucket_name)

    async def upload(
        self,
        key: str,
        content: bytes,
        content_type: str,
        overwrite: bool = False,
    ) -> None:
        """
        Write an object.

        overwrite=True is an upsert (fixed-name avatars); with False the
        provider rejects an existing key.
        """
        options = {
            "content-type": content_type,
            "upsert": "true" if overwrite else "false",
        }
        try:
            await run_in_threadpool(
                self._bucket().upload, path=key, file=content, file_options=options
            )
        except Exception as e:
            logger.error("Storage upload failed for %s: %s", key, e)
            raise ProviderError(PROVIDER, str(e), context={"key": key})
        logger.info("Uploaded %s (%d bytes, %s)", key, len(content), content_type)

    async def remove(self, keys: List[str]) -> None:
        if not keys:
            return
        try:
            await run_in_threadpool(self._bucket().remove, keys)
        except Exception as e:
            logger.error("Storage remove failed for %s: %s", keys, e)
            raise ProviderError(PROVIDER, str(e), context={"keys": keys})
        logger.info("Removed %d object(s): %s", len(keys), ", ".join(keys))

    async def list(self, prefix: str, search: Optional[str] = None) -> List[StoredObject]:
        """
        List the objects directly under `prefix` (a folder such as "avatars/").

        Returned names are full keys ("avatars/100_photo.jpg"). Sub-folders
        reported by the provider are skipped.
        """
        folder = prefix.strip("/")
        objects: List[StoredObject] = []
        offset = 0
        while True:
            options: Dict[str, Any] = {
                "limit": LIST_PAGE_SIZE,
                "offset": offset,
                "sortBy": {"column": "name", "order": "asc"},
            }
            if search:
                options["search"] = search
            try:
                page = await run_in_threadpool(self._bucket().list, folder, options)
            except Exception as e:
                logger.error("Storage list failed for %s: %s", folder, e)
                raise ProviderError(PROVIDER, str(e), context={"prefix": prefix})

            page = page or []
            for entry in page:
                if entry.get("id") is None:
                    continue
                metadata = entry.get("metadata") or {}
                objects.append(
                    StoredObject.from_name(
                        f"{folder}/{entry['name']}" if folder else entry["name"],
                        content_type=metadata.get("mimetype") or "application/octet-stream",
                        size=metadata.get("size"),
                        updated_at=_parse_timestamp(entry.get("updated_at")),
                    )
                )
            if len(page) < LIST_PAGE_SIZE:
                break
            offset += LIST_PAGE_SIZE

        logger.debug("Listed %d object(s) under %s", len(objects), folder)
        return objects

    async def exists(self, key: str) -> bool:
        folder, _, file_name = key.rpartition("/")
        listing = await self.list(folder, search=file_name)
        return any(obj.name == key for obj in listing)

    def get_public_url(self, key: str) -> str:
        """Public URL computed by the SDK; never a hard-coded bucket prefix."""
        try:
            url = self._bucket().get_public_url(key)
        except Exception as e:
            raise ProviderError(PROVIDER, str(e), context={"key": key})
        # Some SDK versions leave a dangling "?" when no transform is requested
        return url.rstrip("?")
