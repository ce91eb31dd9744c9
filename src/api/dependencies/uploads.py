"""
Upload Helpers

Turn multipart UploadFile objects into UploadedAsset values.

This is the one place that inspects raw uploads: after spooling, services
only see `Optional[UploadedAsset]`, never UploadFile.

Usage:
======
    avatar_asset = await spool_upload(avatar, settings.UPLOAD_TEMP_DIR)
    try:
        await auth_service.update_avatar(user.id, avatar_asset)
    finally:
        discard_uploads(avatar_asset)
"""

import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from ...shared.adapters.storage_adapter import UploadedAsset

CHUNK_SIZE = 1024 * 1024


async def spool_upload(file: Optional[UploadFile], temp_dir: str) -> Optional[UploadedAsset]:
    """
    Write an uploaded file to the temp directory.

    Returns:
        UploadedAsset, or None when no file (or an empty file part) was sent
    """
    if file is None or not file.filename:
        return None

    directory = Path(temp_dir)
    directory.mkdir(parents=True, exist_ok=True)

    filename = Path(file.filename).name
    local_path = directory / f"{uuid.uuid4().hex}-{filename}"

    size = 0
    with open(local_path, "wb") as out:
        while chunk := await file.read(CHUNK_SIZE):
            out.write(chunk)
            size += len(chunk)

    if size == 0:
        local_path.unlink(missing_ok=True)
        return None

    return UploadedAsset(
        local_path=local_path,
        filename=filename,
        content_type=file.content_type,
    )


def discard_uploads(*assets: Optional[UploadedAsset]) -> None:
    """Remove temp files the asset store did not consume."""
    for asset in assets:
        if asset is not None:
            asset.local_path.unlink(missing_ok=True)
