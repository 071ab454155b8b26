"""
Generation requester: one call to the generation service per invocation.
"""
import logging

from .clients import BaseGenerator, GeneratorResult
from .errors import GenerationError
from .models import ImageAsset, to_data_url

logger = logging.getLogger(__name__)

MASHUP_PROMPT = (
    "Create a new, photorealistic image that shows the character from the first image "
    "holding or using the product from the second image. Keep the character's appearance "
    "and the product's design faithful to the reference images, and place them together "
    "in a natural, well-lit scene."
)


class GenerationRequester:
    """
    Assembles the mashup request and turns the provider result into a data URI.
    """

    def __init__(self, generator: BaseGenerator, prompt: str = MASHUP_PROMPT):
        self.generator = generator
        self.prompt = prompt

    def generate(self, character: ImageAsset, product: ImageAsset) -> str:
        """
        Compose the two images with the generation service.

        Both assets must be present; callers check this before calling.

        Returns:
            The generated image as a data URI

        Raises:
            GenerationError: on transport failure, an error response or a response without an image
        """
        try:
            result: GeneratorResult = self.generator.compose(character, product, self.prompt)
        except Exception as e:
            logger.exception("Generator raised instead of returning a result")
            raise GenerationError(f"Generation failed: {e}") from e

        if not result.success:
            logger.warning(f"Generation failed - {result.response_info or result.error}")
            raise GenerationError(result.error or "The generation service did not return an image.")

        logger.info(f"Generation succeeded - {result.response_info}")
        return to_data_url(result.data, result.mime_type or "image/png")
