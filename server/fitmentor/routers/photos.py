# fitmentor/routers/photos.py
import logging
import time
from typing import List, Optional

import gridfs
from gridfs.errors import NoFile
from bson import ObjectId
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from fitmentor.auth.jwt_auth import get_current_user_id
from fitmentor.config import MAX_PHOTO_BYTES, PHOTO_BUCKET
from fitmentor.database.connection import get_db, parse_object_id
from fitmentor.models.progress import PhotoOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/photos", tags=["Progress Photos"])


def _bucket() -> gridfs.GridFSBucket:
    return gridfs.GridFSBucket(get_db(), bucket_name=PHOTO_BUCKET)


def photo_filename(month: int, original_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """Stored name: "<month>-<epoch_ms>.<ext>", keeping the upload's extension"""
    ext = "jpg"
    if original_name and "." in original_name:
        ext = original_name.rsplit(".", 1)[-1].lower() or ext
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{month}-{now_ms}.{ext}"


def month_from_filename(filename: str) -> Optional[int]:
    prefix = filename.split("-", 1)[0]
    return int(prefix) if prefix.isdigit() else None


def _photo_out(grid_out) -> PhotoOut:
    metadata = grid_out.metadata or {}
    return PhotoOut(
        id=str(grid_out._id),
        filename=grid_out.filename,
        month=month_from_filename(grid_out.filename),
        url=f"{router.prefix}/{grid_out._id}",
        content_type=metadata.get("content_type"),
        uploaded_at=grid_out.upload_date,
    )


def _owned_file(bucket, photo_id: str, user_id: str):
    """Fetch the caller's own photo or 404"""
    file_id = parse_object_id(photo_id, "photo ID")
    for grid_out in bucket.find({"_id": file_id, "metadata.user_id": ObjectId(user_id)}).limit(1):
        return grid_out
    raise HTTPException(status_code=404, detail="Photo not found")


@router.post("", response_model=PhotoOut)
async def upload_photo(
    month: int = Form(..., ge=1, le=12),
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
):
    """Upload a monthly progress photo"""
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select an image file")

    data = await file.read(MAX_PHOTO_BYTES + 1)
    if len(data) > MAX_PHOTO_BYTES:
        raise HTTPException(status_code=413, detail="Photo is too large")

    bucket = _bucket()
    filename = photo_filename(month, file.filename)
    try:
        file_id = bucket.upload_from_stream(
            filename,
            data,
            metadata={"user_id": ObjectId(user_id), "month": month, "content_type": file.content_type},
        )
    except Exception as e:
        logger.error(f"Photo upload failed for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Photo upload failed")

    logger.info(f"User {user_id} uploaded progress photo {filename} ({len(data)} bytes)")
    return PhotoOut(
        id=str(file_id),
        filename=filename,
        month=month,
        url=f"{router.prefix}/{file_id}",
        content_type=file.content_type,
    )


@router.get("", response_model=List[PhotoOut])
def list_photos(user_id: str = Depends(get_current_user_id)):
    bucket = _bucket()
    cursor = bucket.find({"metadata.user_id": ObjectId(user_id)}).sort("uploadDate", 1)
    return [_photo_out(grid_out) for grid_out in cursor]


@router.get("/{photo_id}")
def get_photo(photo_id: str, user_id: str = Depends(get_current_user_id)):
    bucket = _bucket()
    grid_out = _owned_file(bucket, photo_id, user_id)
    content_type = (grid_out.metadata or {}).get("content_type") or "application/octet-stream"
    return Response(
        content=grid_out.read(),
        media_type=content_type,
        headers={"Cache-Control": "max-age=3600"},
    )


@router.delete("/{photo_id}")
def delete_photo(photo_id: str, user_id: str = Depends(get_current_user_id)):
    bucket = _bucket()
    grid_out = _owned_file(bucket, photo_id, user_id)
    try:
        bucket.delete(grid_out._id)
    except NoFile:
        raise HTTPException(status_code=404, detail="Photo not found")
    logger.info(f"User {user_id} deleted progress photo {grid_out.filename}")
    return {"deleted": True, "id": photo_id}
