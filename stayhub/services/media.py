from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi import Request

from stayhub.core.config import Settings, settings
from stayhub.core.errors import ListingValidationError, UpstreamError
from stayhub.core.ids import gen_hex


log = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class UploadedMedia:
    public_id: str
    secure_url: str


@dataclass(frozen=True)
class ImageFile:
    data: bytes
    filename: str
    content_type: str


@runtime_checkable
class MediaUploader(Protocol):
    async def upload(self, image: ImageFile) -> UploadedMedia: ...


class LocalMediaUploader:
    """Stores images on local disk and serves them from a public base URL."""

    def __init__(self, base_dir: str, public_base_url: str, *, folder: str = "listings"):
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        self.folder = folder

    def _put_bytes(self, *, key: str, data: bytes) -> Path:
        path = self.base / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    async def upload(self, image: ImageFile) -> UploadedMedia:
        ext = _EXTENSIONS.get(image.content_type, "bin")
        public_id = f"{self.folder}/{gen_hex()}"
        key = f"{public_id}.{ext}"
        try:
            await asyncio.to_thread(self._put_bytes, key=key, data=image.data)
        except OSError as e:
            log.exception("local media write failed: %s", key)
            raise UpstreamError("Failed to upload image") from e
        return UploadedMedia(public_id=public_id, secure_url=f"{self.public_base_url}/{key}")


class CloudinaryUploader:
    """
    Uploads through the Cloudinary SDK.

    The SDK call blocks, so it runs in a worker thread. Credentials are set
    once with cloudinary.config() when the uploader is built.
    """

    def __init__(
        self,
        *,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str = "listings",
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        if self.is_configured:
            cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _upload_sync(self, image: ImageFile) -> dict:
        return cloudinary.uploader.upload(
            io.BytesIO(image.data),
            filename=image.filename,
            folder=self.folder,
            resource_type="image",
            overwrite=False,
            unique_filename=True,
        )

    async def upload(self, image: ImageFile) -> UploadedMedia:
        if not self.is_configured:
            raise UpstreamError("Cloudinary is not configured")

        try:
            result = await asyncio.to_thread(self._upload_sync, image)
        except cloudinary.exceptions.Error as e:
            log.warning("cloudinary upload failed: %s", e)
            raise UpstreamError("Failed to upload image") from e

        if not result.get("public_id") or not result.get("secure_url"):
            raise UpstreamError("Failed to upload image", details=[{"reason": "missing public_id/secure_url"}])
        return UploadedMedia(public_id=result["public_id"], secure_url=result["secure_url"])


def build_media_uploader(cfg: Settings = settings) -> MediaUploader:
    if cfg.media_backend == "cloudinary":
        secret = cfg.cloudinary_api_secret.get_secret_value() if cfg.cloudinary_api_secret else None
        return CloudinaryUploader(
            cloud_name=cfg.cloudinary_cloud_name,
            api_key=cfg.cloudinary_api_key,
            api_secret=secret,
            folder=cfg.cloudinary_folder,
        )
    return LocalMediaUploader(cfg.media_local_dir, cfg.media_public_base_url)


async def upload_listing_photos(
    uploader: MediaUploader,
    images: list[ImageFile],
    *,
    max_photos: int | None = None,
    max_bytes: int | None = None,
) -> list[UploadedMedia]:
    """Validate the batch, then upload one image at a time."""
    limit = settings.max_listing_photos if max_photos is None else max_photos
    size_limit = settings.max_photo_bytes if max_bytes is None else max_bytes

    if not images:
        raise ListingValidationError("No photos uploaded")
    if len(images) > limit:
        raise ListingValidationError(f"Maximum {limit} photos allowed")

    errors = []
    for img in images:
        if not img.content_type.startswith("image/"):
            errors.append({"file": img.filename, "message": "Only image files are allowed"})
        elif len(img.data) > size_limit:
            errors.append({"file": img.filename, "message": f"File exceeds {size_limit} bytes"})
    if errors:
        raise ListingValidationError(", ".join(e["message"] for e in errors), details=errors)

    uploaded = []
    for img in images:
        uploaded.append(await uploader.upload(img))
    log.info("uploaded %d listing photos", len(uploaded))
    return uploaded


def get_media_uploader(request: Request) -> MediaUploader:
    # one uploader per process, built on first use
    uploader = getattr(request.app.state, "media_uploader", None)
    if uploader is None:
        uploader = build_media_uploader()
        request.app.state.media_uploader = uploader
    return uploader
