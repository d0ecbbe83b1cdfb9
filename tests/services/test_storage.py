"""
File storage tests
"""
import io

import httpx
import pytest
from fastapi import UploadFile

from app.core.exceptions import BadRequestException
from app.services.storage import (
    APPLY_RESUME_TYPES,
    LocalStorage,
    PORTFOLIO_TYPES,
    StorageError,
    SupabaseStorage,
    build_object_path,
    read_upload,
    validate_upload,
)


def test_validate_upload_limits():
    validate_upload("cv.pdf", "application/pdf", 1024, APPLY_RESUME_TYPES, 5 * 1024 * 1024)

    with pytest.raises(BadRequestException, match="No file provided"):
        validate_upload("", "application/pdf", 10)
    with pytest.raises(BadRequestException, match="maximum limit of 5MB"):
        validate_upload("cv.pdf", "application/pdf", 5 * 1024 * 1024 + 1, max_size=5 * 1024 * 1024)
    with pytest.raises(BadRequestException, match="File type not allowed"):
        validate_upload("cv.txt", "text/plain", 10, APPLY_RESUME_TYPES)

    validate_upload("shot.png", "image/png", 10, PORTFOLIO_TYPES)


def test_object_path():
    path = build_object_path("my  final cv.pdf", prefix="role-1/a@b.com/")
    prefix, name = path.rsplit("/", 1)
    assert prefix == "role-1/a@b.com"
    assert name.endswith("-my_final_cv.pdf")
    assert ":" not in name and "+" not in name


@pytest.mark.asyncio
async def test_local_storage_writes_file(tmp_path):
    storage = LocalStorage(root=tmp_path, public_base_url="http://localhost:8000/uploads/")
    url = await storage.upload("resumes", "role-1/cv.pdf", b"%PDF", "application/pdf")

    assert (tmp_path / "resumes" / "role-1" / "cv.pdf").read_bytes() == b"%PDF"
    assert url == "http://localhost:8000/uploads/resumes/role-1/cv.pdf"


@pytest.mark.asyncio
async def test_supabase_upload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"Key": "applications/role-1/cv.pdf"})

    storage = SupabaseStorage(
        url="https://proj.supabase.co",
        service_key="service-key",
        transport=httpx.MockTransport(handler),
    )
    url = await storage.upload("applications", "role-1/cv.pdf", b"%PDF", "application/pdf")

    assert seen["url"] == "https://proj.supabase.co/storage/v1/object/applications/role-1/cv.pdf"
    assert seen["auth"] == "Bearer service-key"
    assert seen["body"] == b"%PDF"
    assert url == "https://proj.supabase.co/storage/v1/object/public/applications/role-1/cv.pdf"


@pytest.mark.asyncio
async def test_supabase_rejection_raises_storage_error():
    storage = SupabaseStorage(
        url="https://proj.supabase.co",
        service_key="service-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "Duplicate"})),
    )
    with pytest.raises(StorageError):
        await storage.upload("applications", "cv.pdf", b"%PDF", "application/pdf")


@pytest.mark.asyncio
async def test_supabase_not_configured():
    storage = SupabaseStorage(url="", service_key="")
    with pytest.raises(StorageError):
        await storage.upload("applications", "cv.pdf", b"%PDF", "application/pdf")


@pytest.mark.asyncio
async def test_read_upload_stops_past_the_limit():
    data = b"0" * 2048
    upload = UploadFile(file=io.BytesIO(data), filename="cv.pdf")
    content, size = await read_upload(upload, max_size=1024)
    assert len(content) == 1025
    assert size == 1025

    with pytest.raises(BadRequestException, match="maximum limit"):
        validate_upload("cv.pdf", "application/pdf", size, max_size=1024)


@pytest.mark.asyncio
async def test_read_upload_skips_declared_oversize():
    upload = UploadFile(file=io.BytesIO(b"0" * 2048), filename="cv.pdf", size=2048)
    content, size = await read_upload(upload, max_size=1024)
    assert content == b""
    assert size == 2048
    assert upload.file.tell() == 0


@pytest.mark.asyncio
async def test_read_upload_small_file():
    upload = UploadFile(file=io.BytesIO(b"%PDF-1.4"), filename="cv.pdf", size=8)
    content, size = await read_upload(upload, max_size=1024)
    assert content == b"%PDF-1.4"
    assert size == 8
