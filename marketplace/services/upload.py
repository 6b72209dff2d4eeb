"""
Upload service for admin and listing images, category spreadsheets and the Android APK.
Files are stored under the upload directory and served from the static /uploads mount.
"""

import io
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from marketplace.config import settings
from marketplace.schemas.content import UploadResponse, AppInfo
from marketplace.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
    NotFoundError,
)
import logging

logger = logging.getLogger(__name__)

# Expected PIL formats for each declared content type
EXPECTED_FORMATS = {
    "image/jpeg": ("jpeg", "jpg", "mpo"),
    "image/png": ("png",),
    "image/webp": ("webp",),
    "image/gif": ("gif",),
}

IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

APK_CONTENT_TYPES = (
    "application/vnd.android.package-archive",
    "application/octet-stream",
    "application/zip",
)

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")

SPREADSHEET_CONTENT_TYPES = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
    "application/octet-stream",
)


class UploadService:
    """Validates and stores uploaded files."""

    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_file_size = settings.max_file_size
        self.allowed_types = settings.allowed_file_types

    async def _read(self, file: UploadFile, max_size: int) -> bytes:
        await file.seek(0)
        content = await file.read()
        if not content:
            raise FileUploadError("Uploaded file is empty")
        if len(content) > max_size:
            raise FileSizeExceededError(len(content), max_size)
        return content

    def validate_image(self, content: bytes, content_type: Optional[str]) -> str:
        """
        Check the declared type and that the bytes really are that image format.

        Returns:
            File extension to store the image under

        Raises:
            UnsupportedFileTypeError: If the type is not an allowed image type
            FileUploadError: If the content is not a readable image
        """
        if content_type not in self.allowed_types:
            raise UnsupportedFileTypeError(content_type or "unknown", self.allowed_types)

        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = (img.format or "").lower()
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        if pil_format not in EXPECTED_FORMATS.get(content_type, (pil_format,)):
            raise FileUploadError(f"File content doesn't match declared type {content_type}")

        return IMAGE_EXTENSIONS.get(content_type, ".img")

    def public_url(self, relative_path: Path) -> str:
        return f"{settings.upload_url_prefix.rstrip('/')}/{relative_path.as_posix()}"

    async def _store(self, content: bytes, relative_path: Path) -> None:
        file_path = self.upload_dir / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise FileUploadError(f"Failed to save file: {str(e)}")

        logger.info(f"Stored upload {relative_path} ({len(content)} bytes)")

    async def save_image(self, file: UploadFile, folder: str) -> UploadResponse:
        """
        Store an image under <upload_dir>/<folder>/<uuid><ext>.

        Args:
            file: Uploaded image
            folder: Sub-folder such as "banners", "maps", "blogs" or "properties/<id>"
        """
        content = await self._read(file, self.max_file_size)
        extension = self.validate_image(content, file.content_type)

        relative_path = Path(folder) / f"{uuid.uuid4()}{extension}"
        await self._store(content, relative_path)
        return UploadResponse(
            url=self.public_url(relative_path),
            filename=file.filename or relative_path.name,
            size=len(content),
            content_type=file.content_type,
        )

    async def save_spreadsheet(self, file: UploadFile, folder: str = "category-excel") -> UploadResponse:
        """
        Store an Excel workbook (.xlsx or .xls).

        Raises:
            UnsupportedFileTypeError: If the extension or declared type is not Excel
            FileSizeExceededError: If the file is over the spreadsheet size limit
        """
        extension = Path(file.filename or "").suffix.lower()
        if extension not in SPREADSHEET_EXTENSIONS:
            raise UnsupportedFileTypeError(file.filename or "unknown", list(SPREADSHEET_EXTENSIONS))
        if file.content_type and file.content_type not in SPREADSHEET_CONTENT_TYPES:
            raise UnsupportedFileTypeError(file.content_type, list(SPREADSHEET_CONTENT_TYPES))

        content = await self._read(file, settings.max_spreadsheet_size)

        relative_path = Path(folder) / f"{uuid.uuid4()}{extension}"
        await self._store(content, relative_path)
        return UploadResponse(
            url=self.public_url(relative_path),
            filename=file.filename,
            size=len(content),
            content_type=file.content_type or SPREADSHEET_CONTENT_TYPES[0],
        )

    def delete_by_url(self, url: str) -> bool:
        """Remove a stored file given its public URL; URLs outside the upload mount are ignored."""
        prefix = settings.upload_url_prefix.rstrip("/") + "/"
        if not url or not url.startswith(prefix):
            return False

        file_path = (self.upload_dir / url[len(prefix):]).resolve()
        if self.upload_dir.resolve() not in file_path.parents:
            return False

        if file_path.is_file():
            file_path.unlink()
            logger.info(f"Deleted upload {file_path}")
            return True
        return False

    @property
    def apk_path(self) -> Path:
        return Path(settings.app_apk_dir) / settings.app_apk_filename

    async def save_apk(self, file: UploadFile) -> AppInfo:
        """Replace the distributed APK."""
        if not (file.filename or "").lower().endswith(".apk"):
            raise UnsupportedFileTypeError(file.filename or "unknown", [".apk"])
        if file.content_type and file.content_type not in APK_CONTENT_TYPES:
            raise UnsupportedFileTypeError(file.content_type, list(APK_CONTENT_TYPES))

        content = await self._read(file, settings.max_apk_size)

        path = self.apk_path
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(content)

        logger.info(f"Android app updated ({len(content)} bytes)")
        return self.app_info()

    def app_info(self) -> AppInfo:
        path = self.apk_path
        if not path.is_file():
            return AppInfo(available=False, version=settings.app_version_name)

        stat = path.stat()
        return AppInfo(
            available=True,
            version=settings.app_version_name,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            download_url=f"{settings.api_prefix}/app/download",
        )

    def require_apk(self) -> Path:
        path = self.apk_path
        if not path.is_file():
            raise NotFoundError("Android app")
        return path
