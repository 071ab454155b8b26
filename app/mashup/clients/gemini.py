"""
Gemini Generator for the mashup app.
Uses the Gemini generateContent REST endpoint with an image-capable model.

Required Environment Variables:
    GEMINI_API_KEY: Gemini API key

Optional Environment Variables:
    GEMINI_IMAGE_MODEL: Model name (default: gemini-2.5-flash-image)
    GEMINI_API_BASE: API base URL
    GEMINI_TIMEOUT: Transport timeout in seconds (default: none)
"""
import logging
import os
import time
from typing import Optional

import requests

from ..models import ImageAsset
from .base import BaseGenerator, GeneratorResult

logger = logging.getLogger(__name__)


class GeminiGenerator(BaseGenerator):
    """Gemini image generator (Nano Banana)."""

    ENV_API_KEY = "GEMINI_API_KEY"
    ENV_MODEL = "GEMINI_IMAGE_MODEL"
    ENV_API_BASE = "GEMINI_API_BASE"
    ENV_TIMEOUT = "GEMINI_TIMEOUT"

    DEFAULT_MODEL = "gemini-2.5-flash-image"
    DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(self):
        self.api_key = os.getenv(self.ENV_API_KEY)
        self.model = os.getenv(self.ENV_MODEL, self.DEFAULT_MODEL)
        self.api_base = os.getenv(self.ENV_API_BASE, self.DEFAULT_API_BASE).rstrip("/")
        timeout = os.getenv(self.ENV_TIMEOUT)
        self.timeout: Optional[float] = float(timeout) if timeout else None

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def is_configured(self) -> bool:
        """Check if Gemini generator is properly configured."""
        return bool(self.api_key)

    def get_missing_config(self) -> list:
        return [] if self.api_key else [self.ENV_API_KEY]

    def build_payload(self, character: ImageAsset, product: ImageAsset, prompt: str) -> dict:
        return {
            "contents": [{
                "parts": [
                    {"inlineData": {"mimeType": character.mime_type, "data": character.base64}},
                    {"inlineData": {"mimeType": product.mime_type, "data": product.base64}},
                    {"text": prompt},
                ]
            }],
            "generationConfig": {
                "responseModalities": ["IMAGE", "TEXT"]
            }
        }

    def compose(self, character: ImageAsset, product: ImageAsset, prompt: str) -> GeneratorResult:
        """Compose the two images using the Gemini endpoint."""
        if not self.is_configured():
            return GeneratorResult(
                None,
                error=f"Missing required environment variable: {self.ENV_API_KEY}"
            )

        logger.info(f"Using Gemini Endpoint: {self.endpoint}")
        logger.info(f"Using Model: {self.model}")

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }

        start_time = time.time()
        req_info = f"POST {self.endpoint}\nModel: {self.model}\nPrompt: {prompt[:50]}..."
        resp_info = ""

        try:
            logger.info("Submitting Gemini request for character/product mashup...")
            response = requests.post(
                self.endpoint,
                headers=headers,
                json=self.build_payload(character, product, prompt),
                timeout=self.timeout
            )

            latency = time.time() - start_time
            resp_info = f"Status: {response.status_code}\nLatency: {latency:.2f}s"

            response.raise_for_status()

            result = response.json()
            if not isinstance(result, dict):
                raise ValueError("response is not a JSON object")
            image = _first_inline_image(result)
            if image:
                data, mime_type = image
                return GeneratorResult(
                    data=data,
                    mime_type=mime_type,
                    request_info=req_info,
                    response_info=resp_info
                )

            text = _response_text(result)
            logger.error(f"No image in response: {list(result.keys())}")
            message = "The model did not return an image."
            if text:
                message += f" Response: {text}"
            return GeneratorResult(None, request_info=req_info, response_info=resp_info, error=message)

        except requests.exceptions.HTTPError as e:
            logger.error(f"Gemini API Error: {e}")
            detail = _error_message(e.response)
            return GeneratorResult(
                None,
                request_info=req_info,
                response_info=f"HTTP Error: {e}",
                error=f"Generation service returned an error: {detail or e}"
            )

        except (requests.exceptions.JSONDecodeError, ValueError) as e:
            logger.error(f"Gemini returned an unreadable response: {e}")
            return GeneratorResult(
                None,
                request_info=req_info,
                response_info=resp_info,
                error="The generation service returned an unreadable response."
            )

        except requests.exceptions.RequestException as e:
            logger.error(f"Gemini request failed: {e}")
            return GeneratorResult(
                None,
                request_info=req_info,
                response_info=f"Exception: {e}",
                error=f"Could not reach the generation service: {e}"
            )


def _parts(result: dict):
    candidates = result.get("candidates") or []
    if not isinstance(candidates, list):
        raise ValueError("candidates is not a list")
    for candidate in candidates:
        if not isinstance(candidate, dict):
            raise ValueError("candidate is not an object")
        content = candidate.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts or [], list):
            raise ValueError("content parts is not a list")
        for part in parts or []:
            if not isinstance(part, dict):
                raise ValueError("content part is not an object")
            yield part


def _first_inline_image(result: dict):
    for part in _parts(result):
        inline_data = part.get("inlineData") or part.get("inline_data")
        if not inline_data:
            continue
        if not isinstance(inline_data, dict) or not isinstance(inline_data.get("data"), str):
            raise ValueError("inline data is malformed")
        if inline_data["data"]:
            mime_type = inline_data.get("mimeType") or inline_data.get("mime_type") or "image/png"
            return inline_data["data"], mime_type
    return None


def _response_text(result: dict) -> str:
    texts = [part["text"].strip() for part in _parts(result) if isinstance(part.get("text"), str)]
    texts = [text for text in texts if text]
    if texts:
        return " ".join(texts)
    # Prompt-level blocks carry no candidates
    feedback = result.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return f"Blocked: {feedback['blockReason']}"
    return ""


def _error_message(response) -> str:
    if response is None:
        return ""
    try:
        body = response.json()
    except ValueError:
        return response.text or ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return response.text or ""
