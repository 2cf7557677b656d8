"""Upload endpoint for post images"""
import logging

from fastapi import APIRouter, UploadFile, File, Depends, status

from app.api.deps import get_current_claims
from app.core.security import TokenClaims
from app.utils.file_handler import save_post_image, get_file_url

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/upload",
    tags=["Upload"]
)


@router.post("", status_code=status.HTTP_200_OK)
def upload_image(
    file: UploadFile = File(...),
    claims: TokenClaims = Depends(get_current_claims),
):
    """
    Upload an image for a new post or a profile picture.

    Returns the public URL to send as ``imageUrl`` / ``profileImage``.

    - **file**: JPG, PNG or GIF image (max 5MB)
    """
    file_path = save_post_image(file)
    logger.info(f"Image uploaded by user={claims.user_id}: {file_path}")

    return {"url": get_file_url(file_path)}
