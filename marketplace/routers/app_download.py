"""
Android app distribution.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services import UploadService
from marketplace.schemas.common import ApiResponse, error_responses
from marketplace.schemas.content import AppInfo
from marketplace.utils.dependencies import get_current_admin_user, get_upload_service


router = APIRouter(tags=["App"])


@router.get("/app/info", response_model=ApiResponse[AppInfo], summary="Current APK metadata")
async def app_info(uploads: UploadService = Depends(get_upload_service)) -> ApiResponse[AppInfo]:
    return ApiResponse(data=uploads.app_info())


@router.get("/app/download", summary="Download the Android app", responses=error_responses(404))
async def download_app(uploads: UploadService = Depends(get_upload_service)) -> FileResponse:
    return FileResponse(
        uploads.require_apk(),
        media_type="application/vnd.android.package-archive",
        filename=settings.app_apk_filename,
    )


@router.post(
    "/admin/app/upload",
    response_model=ApiResponse[AppInfo],
    summary="Replace the Android app",
    responses=error_responses(400, 401, 403)
)
async def upload_app(
    file: UploadFile = File(..., description=".apk file"),
    admin: User = Depends(get_current_admin_user),
    uploads: UploadService = Depends(get_upload_service)
) -> ApiResponse[AppInfo]:
    return ApiResponse(data=await uploads.save_apk(file), message="App uploaded")
