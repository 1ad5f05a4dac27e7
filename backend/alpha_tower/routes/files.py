"""
Alpha Tower Backend — Uploaded File Route
===========================================

What:  GET /files/{path} serves stored avatar images (the `avatar_url`
       in user responses points here).
How:   FileService resolves the name inside the upload root; anything that
       escapes it is rejected with 400, missing files with 404.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from alpha_tower.dependencies import get_file_service
from alpha_tower.schemas.common import ErrorResponse
from alpha_tower.services.file_service import FileService

router = APIRouter(tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve an uploaded avatar",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(
    file_path: str,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    path = file_service.open_stored(file_path)
    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
