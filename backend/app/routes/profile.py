"""
VendorBridge Backend — Profile Avatar Routes
==============================================

What:  Upload, fetch, update, delete and list profile avatars.
How:   Each handler reads the request, calls AvatarService, returns a schema.

Two key conventions (see app/services/avatar_keys.py):
    - /upload and /latest-image use timestamped keys: avatars/<ms>_<name>
    - /image, /update and /delete use fixed keys:     avatars/<userId>.jpg

Missing files and ids are answered with 400 by the service rather than
FastAPI's 422, so file and form fields are declared optional here.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.dependencies import get_avatar_service
from app.schemas.common import ErrorResponse
from app.schemas.profile import (
    AvatarResponse,
    AvatarUrlResponse,
    DeleteResponse,
    FileListResponse,
)
from app.services.avatar_service import AvatarService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])

_ERRORS = {
    400: {"description": "Missing or invalid input", "model": ErrorResponse},
    500: {"description": "Storage provider error", "model": ErrorResponse},
}


async def _read(file: Optional[UploadFile]):
    if file is None:
        return None, None, None
    try:
        content = await file.read()
    finally:
        await file.close()
    return file.filename, content, file.content_type


@router.post(
    "/upload",
    response_model=AvatarResponse,
    responses=_ERRORS,
    summary="Upload a new timestamped avatar image",
)
async def upload_image(
    file: Optional[UploadFile] = File(default=None, description="Image file (jpg, png, webp, gif)"),
    avatars: AvatarService = Depends(get_avatar_service),
) -> AvatarResponse:
    filename, content, content_type = await _read(file)
    logger.info("Upload request: filename=%s, size=%s", filename, len(content) if content else 0)
    return await avatars.upload(filename, content, content_type)


@router.get(
    "/image/{user_id}",
    response_model=AvatarUrlResponse,
    responses={**_ERRORS, 404: {"description": "No avatar for this user", "model": ErrorResponse}},
    summary="Get the public URL of a user's avatar",
)
async def get_image(
    user_id: str,
    avatars: AvatarService = Depends(get_avatar_service),
) -> AvatarUrlResponse:
    return await avatars.get_user_image(user_id)


@router.put(
    "/update",
    response_model=AvatarResponse,
    responses=_ERRORS,
    summary="Replace a user's avatar (upsert)",
)
async def update_image(
    user_id: Optional[str] = Form(default=None, alias="userId"),
    file: Optional[UploadFile] = File(default=None),
    avatars: AvatarService = Depends(get_avatar_service),
) -> AvatarResponse:
    filename, content, content_type = await _read(file)
    return await avatars.update_user_image(user_id or "", filename, content, content_type)


@router.delete(
    "/delete/{user_id}",
    response_model=DeleteResponse,
    responses=_ERRORS,
    summary="Delete a user's avatar",
)
async def delete_image(
    user_id: str,
    avatars: AvatarService = Depends(get_avatar_service),
) -> DeleteResponse:
    return await avatars.delete_user_image(user_id)


@router.get(
    "/all-files",
    response_model=FileListResponse,
    responses={500: _ERRORS[500]},
    summary="List every stored avatar object",
)
async def list_files(
    avatars: AvatarService = Depends(get_avatar_service),
) -> FileListResponse:
    return await avatars.list_files()


@router.get(
    "/latest-image/{original_name}",
    response_model=AvatarUrlResponse,
    responses={**_ERRORS, 404: {"description": "No upload with this name", "model": ErrorResponse}},
    summary="Resolve the newest upload of an original filename",
)
async def latest_image(
    original_name: str,
    avatars: AvatarService = Depends(get_avatar_service),
) -> AvatarUrlResponse:
    return await avatars.latest_image(original_name)
