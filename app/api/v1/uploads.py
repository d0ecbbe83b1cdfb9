"""
独立文件上传路由
"""
from fastapi import APIRouter, Depends, Form, File, UploadFile
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import storage_dependency
from app.core.config import settings
from app.core.database import get_db
from app.core.response import success_response, DictResponse
from app.core.exceptions import BadRequestException, UpstreamException
from app.crud import role_crud
from app.services.storage import (
    PORTFOLIO_TYPES,
    RESUME_TYPES,
    StorageError,
    build_object_path,
    read_upload,
    validate_upload,
)

router = APIRouter()


@router.post("", summary="Upload a resume or portfolio file", response_model=DictResponse)
async def upload_file(
    file: UploadFile = File(..., description="File to store"),
    role_id: str = Form(..., description="Role the file belongs to"),
    asset_type: str = Form("resume", description="resume or portfolio"),
    db: AsyncSession = Depends(get_db),
    storage=Depends(storage_dependency),
):
    """
    存储文件并返回公开访问地址
    """
    content, size = await read_upload(file)
    allowed = PORTFOLIO_TYPES if asset_type == "portfolio" else RESUME_TYPES
    validate_upload(file.filename, file.content_type, size, allowed)

    if not await role_crud.get(db, role_id):
        raise BadRequestException("Invalid role selected")

    path = build_object_path(file.filename, prefix=f"{role_id}/{asset_type}")
    try:
        url = await storage.upload(settings.storage_asset_bucket, path, content, file.content_type)
    except StorageError as exc:
        logger.error("Upload failed for role {}: {}", role_id, exc)
        raise UpstreamException("Failed to upload file. Please try again.")

    return success_response(
        data={"url": url, "file_name": file.filename, "status": "success"},
        message="File uploaded"
    )
