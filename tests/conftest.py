from __future__ import annotations

import base64
import json
from pathlib import Path
import sys

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.mashup.models import ImageAsset

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
GENERATED_B64 = base64.b64encode(b"generated-mashup-image").decode("ascii")


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object | None = None):
        self.status_code = status_code
        self._body = body if body is not None else image_body(GENERATED_B64)
        self.text = json.dumps(self._body)

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> object:
        return self._body


class FakeUpload:
    def __init__(self, data: bytes, content_type: str = "image/png", filename: str = "image.png"):
        self.data = data
        self.content_type = content_type
        self.filename = filename
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        return self.data


class FailingUpload(FakeUpload):
    async def read(self) -> bytes:
        raise OSError("device not ready")


def image_body(data: str, mime_type: str = "image/png") -> dict[str, object]:
    return {
        "candidates": [
            {"content": {"parts": [
                {"text": "Here is your image."},
                {"inlineData": {"mimeType": mime_type, "data": data}},
            ]}}
        ]
    }


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture()
def character_asset() -> ImageAsset:
    return ImageAsset.from_bytes(PNG_BYTES, "image/png")


@pytest.fixture()
def product_asset() -> ImageAsset:
    return ImageAsset.from_bytes(b"\xff\xd8\xff\xe0product", "image/jpeg")


@pytest.fixture()
def gemini_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GEMINI_IMAGE_MODEL", raising=False)
    monkeypatch.delenv("GEMINI_API_BASE", raising=False)
    monkeypatch.delenv("GEMINI_TIMEOUT", raising=False)
