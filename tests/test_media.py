import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import pytest

from stayhub.core.errors import ListingValidationError, UpstreamError
from stayhub.services.media import (
    CloudinaryUploader,
    ImageFile,
    LocalMediaUploader,
    upload_listing_photos,
)


def _image(name: str = "a.jpg", content_type: str = "image/jpeg", data: bytes = b"\xff\xd8jpeg") -> ImageFile:
    return ImageFile(data=data, filename=name, content_type=content_type)


@pytest.mark.asyncio
async def test_local_uploader_writes_file(tmp_path):
    uploader = LocalMediaUploader(str(tmp_path), "http://media.test/")
    media = await uploader.upload(_image())

    assert media.public_id.startswith("listings/")
    assert media.secure_url == f"http://media.test/{media.public_id}.jpg"
    assert (tmp_path / f"{media.public_id}.jpg").read_bytes() == b"\xff\xd8jpeg"


@pytest.mark.asyncio
async def test_upload_batch_limits(fake_uploader):
    with pytest.raises(ListingValidationError) as ei:
        await upload_listing_photos(fake_uploader, [])
    assert ei.value.message == "No photos uploaded"

    with pytest.raises(ListingValidationError) as ei:
        await upload_listing_photos(fake_uploader, [_image(f"{i}.jpg") for i in range(6)], max_photos=5)
    assert ei.value.message == "Maximum 5 photos allowed"

    with pytest.raises(ListingValidationError) as ei:
        await upload_listing_photos(fake_uploader, [_image(data=b"x" * 11)], max_bytes=10)
    assert ei.value.details[0]["file"] == "a.jpg"

    # nothing reached the uploader
    assert fake_uploader.uploaded == []


@pytest.mark.asyncio
async def test_cloudinary_upload_goes_through_sdk(monkeypatch):
    calls = []

    def fake_upload(file, **options):
        calls.append((file.read(), options))
        return {"public_id": "listings/abc", "secure_url": "https://res.test/abc.jpg"}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)

    uploader = CloudinaryUploader(cloud_name="demo", api_key="key", api_secret="secret")
    media = await uploader.upload(_image())

    assert media.public_id == "listings/abc"
    assert media.secure_url == "https://res.test/abc.jpg"
    ((data, options),) = calls
    assert data == b"\xff\xd8jpeg"
    assert options["folder"] == "listings"
    assert options["resource_type"] == "image"
    assert options["filename"] == "a.jpg"


def test_cloudinary_credentials_are_configured():
    CloudinaryUploader(cloud_name="demo", api_key="key", api_secret="secret", folder="stays")
    cfg = cloudinary.config()
    assert cfg.cloud_name == "demo"
    assert cfg.api_key == "key"


@pytest.mark.asyncio
async def test_cloudinary_failures_are_upstream_errors(monkeypatch):
    with pytest.raises(UpstreamError) as ei:
        await CloudinaryUploader(cloud_name=None, api_key=None, api_secret=None).upload(_image())
    assert ei.value.message == "Cloudinary is not configured"

    def failing_upload(file, **options):
        raise cloudinary.exceptions.Error("Invalid Signature")

    monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)
    uploader = CloudinaryUploader(cloud_name="demo", api_key="key", api_secret="secret")
    with pytest.raises(UpstreamError) as ei:
        await uploader.upload(_image())
    assert ei.value.status_code == 502
    assert ei.value.message == "Failed to upload image"

    monkeypatch.setattr(cloudinary.uploader, "upload", lambda file, **options: {"public_id": "x"})
    with pytest.raises(UpstreamError):
        await uploader.upload(_image())


@pytest.mark.asyncio
async def test_photo_upload_endpoint(client, fake_uploader, seed_users):
    headers = seed_users["host"]["headers"]
    files = [
        ("photos", ("one.jpg", b"\xff\xd8one", "image/jpeg")),
        ("photos", ("two.png", b"\x89PNGtwo", "image/png")),
    ]
    r = await client.post("/v1/listings/photos/upload", files=files, headers=headers)
    assert r.status_code == 200, r.text
    assert [p["publicId"] for p in r.json()] == ["listings/fake-1", "listings/fake-2"]
    assert [img.filename for img in fake_uploader.uploaded] == ["one.jpg", "two.png"]


@pytest.mark.asyncio
async def test_photo_upload_endpoint_rejects_bad_batches(client, fake_uploader, seed_users):
    headers = seed_users["host"]["headers"]

    files = [("photos", (f"{i}.jpg", b"\xff\xd8", "image/jpeg")) for i in range(6)]
    r = await client.post("/v1/listings/photos/upload", files=files, headers=headers)
    assert r.status_code == 422
    assert r.json()["message"] == "Maximum 5 photos allowed"

    files = [("photos", ("notes.txt", b"hello", "text/plain"))]
    r = await client.post("/v1/listings/photos/upload", files=files, headers=headers)
    assert r.status_code == 422
    assert r.json()["message"] == "Only image files are allowed"

    r = await client.post("/v1/listings/photos/upload", headers=headers)
    assert r.status_code == 422
    assert r.json()["message"] == "No photos uploaded"

    assert fake_uploader.uploaded == []
