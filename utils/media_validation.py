"""Validation helpers for uploaded images."""

from typing import List, Sequence

from fastapi import UploadFile

from models.analysis_models import ImageInput
from models.errors import ValidationError


def validate_image_upload(upload: UploadFile, max_bytes: int) -> None:
    """Check the declared MIME type and filename of a single upload."""
    content_type = (upload.content_type or "").lower().split(";", 1)[0].strip()
    if not content_type.startswith("image/"):
        raise ValidationError(
            f"Only image files are allowed! '{upload.filename or 'unnamed'}' has type '{upload.content_type}'."
        )
    size = getattr(upload, "size", None)
    if size is not None and size > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")


async def read_image_uploads(
    uploads: Sequence[UploadFile], *, max_files: int, max_bytes: int
) -> List[ImageInput]:
    """Validate and read a batch of uploads into memory.

    Every file is checked before any is accepted, so a rejected batch never
    produces a job.

    Raises:
        ValidationError: On an empty batch, too many files, a non-image MIME
            type, an oversize file, or an empty file.
    """
    if not uploads:
        raise ValidationError("No images uploaded")
    if len(uploads) > max_files:
        raise ValidationError(f"Too many files. Maximum is {max_files} images per analysis.")

    for upload in uploads:
        validate_image_upload(upload, max_bytes)

    images: List[ImageInput] = []
    for upload in uploads:
        data = await upload.read()
        if not data:
            raise ValidationError(f"Uploaded image '{upload.filename or 'unnamed'}' is empty.")
        # size is not always reported on the multipart part
        if len(data) > max_bytes:
            raise ValidationError(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")
        images.append(
            ImageInput(
                data=data,
                mime_type=upload.content_type.split(";", 1)[0].strip(),
                original_name=upload.filename or "uploaded_image",
            )
        )
    return images
