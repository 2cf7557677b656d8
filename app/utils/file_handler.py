"""File upload handler for locally stored post images"""
import logging
import uuid
from pathlib import Path
from typing import Optional, Set, Tuple
from fastapi import UploadFile, HTTPException, status
from app.config import settings
from app.core.exceptions import BadRequestException

# Setup logging
logger = logging.getLogger(__name__)

# ============================================
# FILE TYPE DEFINITIONS WITH MIME VALIDATION
# ============================================

# Magic bytes signatures for file type validation
MAGIC_BYTES = {
    # JPEG: FFD8FF
    "jpeg": [b"\xff\xd8\xff"],
    # PNG: 89504E47
    "png": [b"\x89PNG\r\n\x1a\n"],
    # GIF: GIF87a or GIF89a
    "gif": [b"GIF87a", b"GIF89a"],
}

# Extension to magic type mapping
EXTENSION_TO_TYPE = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".gif": "gif",
}

ALLOWED_IMAGE_EXTENSIONS: Set[str] = set(EXTENSION_TO_TYPE)

# Storage folder for post images (relative to UPLOAD_DIR)
POST_IMAGE_SUBFOLDER = "photos/posts"

# URL prefix the upload directory is served under
UPLOADS_URL_PREFIX = "/uploads"


# ============================================
# SECURITY VALIDATION FUNCTIONS
# ============================================

def validate_magic_bytes(file_content: bytes, expected_type: str) -> bool:
    """
    Validate file content by checking magic bytes (file signature).
    This prevents attackers from uploading malicious files with fake extensions.

    Args:
        file_content: First few bytes of the file
        expected_type: Expected file type (jpeg, png, gif)

    Returns:
        True if magic bytes match expected type
    """
    signatures = MAGIC_BYTES.get(expected_type, [])
    return any(file_content.startswith(signature) for signature in signatures)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal and other attacks.

    Args:
        filename: Original filename from upload

    Returns:
        Sanitized filename (only alphanumeric, dash, underscore, and dot)
    """
    if not filename:
        return "unnamed"

    # Get only the basename (remove any path components)
    basename = Path(filename).name

    # Remove or replace potentially dangerous characters
    safe_chars = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.")
    sanitized = "".join(c if c in safe_chars else "_" for c in basename)

    # Ensure it doesn't start with a dot (hidden file)
    sanitized = sanitized.lstrip(".")

    return sanitized if sanitized else "unnamed"


def validate_path_safety(file_path: str) -> bool:
    """
    Validate that file path doesn't contain path traversal attempts.

    Args:
        file_path: File path to validate

    Returns:
        True if path is safe
    """
    if not file_path:
        return False

    # Check for path traversal patterns
    dangerous_patterns = ["..", "~", "//", "\\"]
    for pattern in dangerous_patterns:
        if pattern in file_path:
            logger.warning(f"Path traversal attempt detected: {file_path}")
            return False

    return file_path.startswith(f"{UPLOADS_URL_PREFIX}/")


def get_file_extension(filename: str) -> str:
    """Safely get file extension in lowercase."""
    if not filename:
        return ""
    return Path(filename).suffix.lower()


# ============================================
# MAIN VALIDATION FUNCTION
# ============================================

def validate_image_upload(
    upload_file: UploadFile,
    max_size_bytes: Optional[int] = None
) -> Tuple[bytes, str]:
    """
    Validate an uploaded image.

    Args:
        upload_file: FastAPI UploadFile object
        max_size_bytes: Optional custom max size, defaults to MAX_UPLOAD_SIZE (5MB)

    Returns:
        Tuple of (file_content, file_extension)

    Raises:
        BadRequestException: If the file is missing, not an image, empty or too large
    """
    if not upload_file or not upload_file.filename:
        raise BadRequestException(detail="File is required")

    content_type = upload_file.content_type or ""
    if not content_type.startswith("image/"):
        raise BadRequestException(detail="A valid image file is required")

    original_filename = sanitize_filename(upload_file.filename)
    file_ext = get_file_extension(original_filename)

    if file_ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise BadRequestException(
            detail=f"File type not allowed. Accepted formats: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
        )

    # Read file content
    upload_file.file.seek(0)
    file_content = upload_file.file.read()
    upload_file.file.seek(0)  # Reset for potential re-read

    # Validate file size
    max_size = max_size_bytes or settings.MAX_UPLOAD_SIZE
    if len(file_content) > max_size:
        size_mb = max_size / (1024 * 1024)
        raise BadRequestException(detail=f"File size must be smaller than {size_mb:.0f}MB")

    if len(file_content) == 0:
        raise BadRequestException(detail="Empty files are not allowed")

    # Validate magic bytes (content type verification)
    expected_type = EXTENSION_TO_TYPE[file_ext]
    if not validate_magic_bytes(file_content, expected_type):
        logger.warning(
            f"Magic bytes mismatch - filename: {original_filename}, "
            f"expected_type: {expected_type}"
        )
        raise BadRequestException(detail="File content does not match its extension")

    logger.info(f"Image validated: size={len(file_content)} bytes, ext={file_ext}")

    return file_content, file_ext


# ============================================
# FILE STORAGE FUNCTIONS
# ============================================

def save_post_image(upload_file: UploadFile) -> str:
    """
    Validate and store an uploaded post image on local storage.

    Args:
        upload_file: FastAPI UploadFile object

    Returns:
        str: Relative URL path (e.g., /uploads/photos/posts/uuid.jpg)

    Raises:
        BadRequestException: If validation fails
        HTTPException: 500 if the file cannot be written
    """
    file_content, file_ext = validate_image_upload(upload_file)

    # Generate unique filename with UUID
    unique_filename = f"{uuid.uuid4()}{file_ext}"

    upload_path = Path(settings.UPLOAD_DIR) / POST_IMAGE_SUBFOLDER
    upload_path.mkdir(parents=True, exist_ok=True)

    file_path = upload_path / unique_filename

    try:
        with open(file_path, "wb") as f:
            f.write(file_content)
    except OSError as e:
        logger.error(f"Failed to save file: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store the image. Please try again."
        )

    logger.info(f"File saved: {file_path}")
    return f"{UPLOADS_URL_PREFIX}/{POST_IMAGE_SUBFOLDER}/{unique_filename}"


def get_file_url(file_path: str) -> str:
    """
    Get public URL for a stored file.

    Args:
        file_path: Relative path like /uploads/photos/posts/...

    Returns:
        Full URL like http://localhost:8000/uploads/photos/posts/...
    """
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{file_path}"


def _strip_base_url(image_url: str) -> str:
    base_url = settings.PUBLIC_BASE_URL.rstrip("/")
    return image_url[len(base_url):] if image_url.startswith(base_url) else image_url


def image_url_variants(image_url: str) -> Set[str]:
    """
    Every spelling a stored image can be referenced by.

    An upload may be saved on a post or profile either as the full public URL
    or as the bare ``/uploads/...`` path.
    """
    file_path = _strip_base_url(image_url)
    variants = {image_url, file_path}
    if file_path.startswith(f"{UPLOADS_URL_PREFIX}/"):
        variants.add(get_file_url(file_path))
    return variants


def delete_local_image(image_url: Optional[str]) -> bool:
    """
    Delete a stored image given the public URL or relative path saved on a post.

    URLs that do not point into the local upload directory are ignored.
    Callers check that no other post or profile still uses the image.

    Returns:
        True if a file was deleted, False otherwise
    """
    if not image_url:
        return False

    file_path = _strip_base_url(image_url)

    if not validate_path_safety(file_path):
        return False

    clean_path = file_path[len(UPLOADS_URL_PREFIX) + 1:]
    upload_dir_resolved = Path(settings.UPLOAD_DIR).resolve()
    resolved_path = (upload_dir_resolved / clean_path).resolve()

    # Security check: ensure file is within upload directory
    if upload_dir_resolved not in resolved_path.parents:
        logger.warning(f"Path traversal blocked: {image_url} -> {resolved_path}")
        return False

    try:
        if resolved_path.is_file():
            resolved_path.unlink()
            logger.info(f"File deleted: {resolved_path}")
            return True
    except OSError as e:
        logger.error(f"Error deleting file {resolved_path}: {e}")
    return False
