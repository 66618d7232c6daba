"""
VendorBridge Backend — Profile Avatar Schemas
===============================================

Responses for the /api/profile endpoints. Keys are camelCase on the wire
(`fileName`, `contentType`) to match the existing frontend.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AvatarResponse(_CamelModel):
    """Returned by upload and update."""
    message: str
    file_name: str = Field(alias="fileName", description="Physical storage key written")
    url: str = Field(description="Public URL of the stored image")


class AvatarUrlResponse(_CamelModel):
    """Returned by the image and latest-image lookups."""
    file_name: str = Field(alias="fileName")
    url: str
    timestamp: Optional[int] = Field(
        default=None,
        description="Upload time (unix millis) for timestamped keys",
    )


class DeleteResponse(_CamelModel):
    message: str
    file_name: str = Field(alias="fileName")


class StoredFileItem(_CamelModel):
    name: str = Field(description="Physical storage key")
    url: str
    timestamp: Optional[int] = None
    size: Optional[int] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class FileListResponse(_CamelModel):
    files: List[StoredFileItem]
