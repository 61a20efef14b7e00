"""Cloudinary upload service.

Forwards locally staged files to Cloudinary's upload API using a signed
request, and returns the public (https) URL of the stored asset.
"""

import logging
import time
from pathlib import Path

import httpx
from cloudinary.utils import api_sign_request

from config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


class MediaUploadError(Exception):
    """The media host rejected the upload or could not be reached."""


async def upload_file(
    path: Path,
    filename: str,
    folder: str | None = None,
    resource_type: str = "auto",
) -> str:
    """Upload a local file and return its secure URL.

    ``resource_type="auto"`` lets the host accept images and PDFs alike.
    """
    if not settings.cloudinary_configured:
        raise MediaUploadError("Cloudinary credentials are missing")

    params = {
        "folder": folder or settings.cloudinary_folder,
        "timestamp": int(time.time()),
    }
    data = {
        **params,
        "api_key": settings.cloudinary_api_key,
        "signature": api_sign_request(params, settings.cloudinary_api_secret),
    }
    url = f"{CLOUDINARY_API_BASE}/{settings.cloudinary_cloud_name}/{resource_type}/upload"

    try:
        async with httpx.AsyncClient(timeout=60.0) as client:
            response = await client.post(
                url,
                data=data,
                files={"file": (filename, path.read_bytes())},
            )
    except httpx.HTTPError as e:
        logger.warning(f"Cloudinary request failed: {e}")
        raise MediaUploadError(str(e)) from e

    if response.status_code != 200:
        logger.warning(
            f"Cloudinary upload failed: {response.status_code} - {response.text}"
        )
        raise MediaUploadError(f"Upload rejected with status {response.status_code}")

    secure_url = response.json().get("secure_url")
    if not secure_url:
        raise MediaUploadError("Upload response did not include a URL")

    logger.info(f"Uploaded {filename} to {secure_url}")
    return secure_url
