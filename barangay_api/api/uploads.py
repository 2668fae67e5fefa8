"""File Upload Routes.

Validates document uploads (size, extension, MIME type) and returns the
sanitized filename the file will be stored under. Storage itself belongs to
the Supabase Storage bucket and is not performed here.

Author: Barangay Platform Team
Version: 1.0.0
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from barangay_api.api.dependencies import get_request_ip, get_security_config
from barangay_api.models.responses import ErrorResponse, UploadResponse
from barangay_api.security.config import SecurityConfig
from barangay_api.security.policies import validate_upload
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/uploads", tags=["Uploads"])

READ_CHUNK_SIZE = 64 * 1024


async def _measure(upload: UploadFile, limit: int) -> int:
    """Return the upload size, stopping once it exceeds ``limit``."""
    if upload.size is not None:
        return upload.size

    size = 0
    while chunk := await upload.read(READ_CHUNK_SIZE):
        size += len(chunk)
        if size > limit:
            break
    await upload.seek(0)
    return size


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def upload_document(
    file: UploadFile = File(...),
    config: SecurityConfig = Depends(get_security_config),
    client_ip: str = Depends(get_request_ip),
) -> UploadResponse:
    """Validate an uploaded document.

    Raises:
        UploadRejected: 400 if the file is too large or of a disallowed type.
    """
    size = await _measure(file, config.upload.max_file_size)
    safe_name = validate_upload(file.filename, file.content_type, size, config.upload)

    logger.info(
        f"Upload accepted: filename={safe_name}, size={size}, ip={client_ip}"
    )

    return UploadResponse(
        filename=safe_name,
        content_type=file.content_type or "application/octet-stream",
        size=size,
    )
