"""
Data model for the mashup flow: ingested images and the view state.
"""
import base64
from dataclasses import dataclass
from typing import Tuple, Union

# Filename offered for the generated image
DOWNLOAD_FILENAME = "character-product-mashup.png"

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ImageAsset:
    """An uploaded image held in memory as a data URL."""
    data_url: str
    base64: str
    mime_type: str

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImageAsset":
        payload = base64.b64encode(data).decode("ascii")
        data_url = to_data_url(payload, mime_type or DEFAULT_MIME_TYPE)
        return cls(
            data_url=data_url,
            base64=data_url.split(",", 1)[1],
            mime_type=mime_type
        )

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.base64)


def to_data_url(payload: str, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{payload}"


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URI into its MIME type and decoded bytes.

    Raises:
        ValueError: if the string is not a base64 data URI
    """
    if not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("Not a data URI")

    header, payload = data_url[len("data:"):].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Data URI is not base64 encoded")

    mime_type = header[:-len(";base64")] or DEFAULT_MIME_TYPE
    return mime_type, base64.b64decode(payload)


# =============================================================================
# View state
# =============================================================================

@dataclass(frozen=True)
class Empty:
    kind = "empty"


@dataclass(frozen=True)
class Loading:
    kind = "loading"


@dataclass(frozen=True)
class Error:
    message: str
    kind = "error"


@dataclass(frozen=True)
class Result:
    image: str
    kind = "result"

    @property
    def download_filename(self) -> str:
        return DOWNLOAD_FILENAME


ViewState = Union[Empty, Loading, Error, Result]
