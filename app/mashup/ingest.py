"""
Image ingestion: turns an uploaded file into an in-memory ImageAsset.
"""
import logging

from .errors import ReadError
from .models import ImageAsset

logger = logging.getLogger(__name__)


async def read_upload(upload) -> ImageAsset:
    """
    Read an uploaded file into an ImageAsset.

    No size or type validation is done; the file picker only hints at image types.

    Args:
        upload: object with an awaitable read() and a content_type (e.g. UploadFile)

    Returns:
        ImageAsset holding the file as a data URL

    Raises:
        ReadError: if the file cannot be read
    """
    try:
        data = await upload.read()
    except Exception as e:
        raise ReadError(f"Could not read {getattr(upload, 'filename', None) or 'upload'}: {e}") from e

    mime_type = getattr(upload, "content_type", None) or ""
    logger.info(f"Ingested {len(data)} bytes ({mime_type or 'unknown type'})")
    return ImageAsset.from_bytes(data, mime_type)
