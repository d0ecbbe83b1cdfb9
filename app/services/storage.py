"""
文件存储模块

上传校验以及两种存储后端：本地文件系统（开发用）和通过 HTTP 访问的
Supabase 兼容对象存储
"""
import asyncio
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Iterable, Tuple
from urllib.parse import quote

import httpx
from loguru import logger

from app.core.config import settings
from app.core.exceptions import BadRequestException


PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# 申请表
APPLY_RESUME_TYPES = (PDF, DOC, DOCX)
# 聊天中上传
RESUME_TYPES = (PDF, DOC, DOCX, "text/plain")
PORTFOLIO_TYPES = RESUME_TYPES + ("image/jpeg", "image/png", "image/gif")


class StorageError(Exception):
    """上传到存储后端失败"""


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    allowed_types: Iterable[str] = RESUME_TYPES,
    max_size: Optional[int] = None,
) -> None:
    """
    存储前校验上传文件

    Raises:
        BadRequestException: 未提供文件、文件过大或类型不允许
    """
    max_size = max_size or settings.max_upload_size
    if not filename:
        raise BadRequestException("No file provided")
    if size > max_size:
        raise BadRequestException(
            f"File size exceeds maximum limit of {round(max_size / (1024 * 1024))}MB"
        )
    if content_type not in tuple(allowed_types):
        raise BadRequestException(
            "File type not allowed. Please upload a PDF, DOC, or DOCX file."
        )


async def read_upload(upload, max_size: Optional[int] = None) -> Tuple[bytes, int]:
    """
    读取 UploadFile 的内容和大小

    最多读取 max_size + 1 字节；声明大小已超限的文件不读取，直接返回
    声明大小，交由 validate_upload 拒绝
    """
    max_size = max_size or settings.max_upload_size
    if upload.size is not None and upload.size > max_size:
        return b"", upload.size
    content = await upload.read(max_size + 1)
    return content, len(content)


def build_object_path(filename: str, prefix: Optional[str] = None) -> str:
    """生成 `{prefix}/{timestamp}-{filename}`，文件名中的空白替换为下划线"""
    timestamp = re.sub(r"[:.+]", "-", datetime.now(timezone.utc).isoformat())
    name = re.sub(r"\s+", "_", Path(filename).name)
    object_name = f"{timestamp}-{name}"
    return f"{prefix.strip('/')}/{object_name}" if prefix else object_name


class LocalStorage:
    """本地存储，文件写入 storage_local_dir/{bucket}/"""

    def __init__(self, root: Optional[Path] = None, public_base_url: Optional[str] = None):
        self.root = Path(root or settings.storage_local_dir)
        self.public_base_url = (public_base_url or settings.storage_public_base_url).rstrip("/")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{quote(path)}"

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        target = self.root / bucket / path
        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as exc:
            logger.error("Local upload failed: {} ({})", target, exc)
            raise StorageError(str(exc)) from exc
        logger.info("Stored {} bytes at {}", len(content), target)
        return self.public_url(bucket, path)

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)


class SupabaseStorage:
    """Supabase 存储 REST API"""

    def __init__(
        self,
        url: Optional[str] = None,
        service_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = (url or settings.storage_url).rstrip("/")
        self.service_key = service_key or settings.storage_service_key
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.url and self.service_key)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{bucket}/{quote(path)}"

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        if not self.is_configured():
            raise StorageError("Storage backend is not configured")

        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            "Content-Type": content_type or "application/octet-stream",
            "Cache-Control": "3600",
            "x-upsert": "false",
        }
        endpoint = f"{self.url}/storage/v1/object/{bucket}/{quote(path)}"

        async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
            try:
                response = await client.post(endpoint, headers=headers, content=content)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Storage upload failed: status={}, response={}",
                    exc.response.status_code,
                    exc.response.text[:500],
                )
                raise StorageError(f"Upload rejected with status {exc.response.status_code}") from exc
            except httpx.HTTPError as exc:
                logger.error("Storage upload error: {}", exc)
                raise StorageError(str(exc)) from exc

        logger.info("Uploaded {} to bucket {}", path, bucket)
        return self.public_url(bucket, path)


def get_storage():
    """根据 settings.storage_backend 获取存储后端"""
    if settings.storage_backend == "supabase":
        return SupabaseStorage()
    return LocalStorage()
