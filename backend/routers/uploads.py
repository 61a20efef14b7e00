"""Upload router - proxies id proof files to Cloudinary."""

import logging
import shutil
import uuid
from pathlib import Path

from fastapi import APIRouter, Request
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from config import get_settings
from middleware.errors import ApiError
from services.media_service import MediaUploadError, upload_file

router = APIRouter(prefix="/api", tags=["uploads"])
settings = get_settings()
logger = logging.getLogger(__name__)


class UploadResponse(BaseModel):
    url: str


@router.post("/upload", response_model=UploadResponse)
async def upload(request: Request):
    """Stage the multipart ``file`` field on disk, forward it, return its URL.

    The staged copy is removed whether or not the upload succeeds.
    """
    try:
        form = await request.form()
    except Exception as e:
        logger.error(f"File parsing error: {e}")
        raise ApiError(500, "File parsing error")

    try:
        files = [f for f in form.getlist("file") if isinstance(f, UploadFile)]
        if not files:
            raise ApiError(400, "No file uploaded")
        file = files[0]

        filename = file.filename or "upload"
        upload_dir = Path(settings.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        temp_path = upload_dir / f"{uuid.uuid4()}{Path(filename).suffix.lower()}"

        with open(temp_path, "wb") as f:
            shutil.copyfileobj(file.file, f)

        try:
            url = await upload_file(temp_path, filename)
        except MediaUploadError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise ApiError(500, "Cloudinary upload failed")
        finally:
            temp_path.unlink(missing_ok=True)
    finally:
        await form.close()

    return UploadResponse(url=url)
