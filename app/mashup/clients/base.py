"""
Base Generator class for mashup providers.
"""
from dataclasses import dataclass
from typing import Optional

from ..models import ImageAsset


@dataclass
class GeneratorResult:
    """Result from an AI image generation request."""
    data: Optional[str]
    mime_type: str = "image/png"
    request_info: str = ""
    response_info: str = ""
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.data is not None


class BaseGenerator:
    """Abstract base class for image generators."""

    def is_configured(self) -> bool:
        return True

    def get_missing_config(self) -> list:
        return []

    def compose(self, character: ImageAsset, product: ImageAsset, prompt: str) -> GeneratorResult:
        """
        Combine a character image and a product image into one new image.
        Must be implemented by subclasses.

        Args:
            character: The character reference image
            product: The product reference image
            prompt: Fixed instruction describing the composite

        Returns:
            GeneratorResult with the base64 image payload, or an error
        """
        raise NotImplementedError("Subclasses must implement compose")
