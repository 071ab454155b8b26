"""
App controller: coordinates the two upload slots and the generation call.
"""
import logging
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from .errors import GenerationError
from .models import Empty, Error, ImageAsset, Loading, Result, ViewState
from .requester import GenerationRequester
from .slots import SlotRole, UploadSlot

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred."


class AppController:
    """
    State machine for one browser session.

    The view state is exactly one of Empty, Loading, Error or Result.
    `busy` is only changed by begin() and run().
    """

    def __init__(self, requester: GenerationRequester):
        self.requester = requester
        self.character = UploadSlot(SlotRole.CHARACTER)
        self.product = UploadSlot(SlotRole.PRODUCT)
        self.state: ViewState = Empty()
        self.busy = False
        # Assets captured by begin() for the call run() issues
        self._pending: Optional[Tuple[ImageAsset, ImageAsset]] = None

    def slot(self, role: SlotRole) -> UploadSlot:
        return self.character if SlotRole(role) is SlotRole.CHARACTER else self.product

    @property
    def can_generate(self) -> bool:
        return not (self.character.is_empty or self.product.is_empty or self.busy)

    async def select(self, role: SlotRole, upload):
        await self.slot(role).select(upload)
        self._slots_changed()

    def remove(self, role: SlotRole):
        self.slot(role).remove()
        self._slots_changed()

    def _slots_changed(self):
        # A previous result or error stays visible until the next generate
        if not self.busy and (self.character.is_empty or self.product.is_empty):
            self.state = Empty()

    def begin(self) -> bool:
        """
        Enter Loading if both images are present and nothing is in flight.

        Returns:
            True if the transition happened
        """
        if not self.can_generate:
            return False
        self.busy = True
        self._pending = (self.character.asset, self.product.asset)
        self.state = Loading()
        logger.info("Generation started")
        return True

    async def run(self):
        """
        Issue the generation call for a controller already in Loading.
        """
        if self._pending is None:
            logger.warning("run() called without a successful begin()")
            return
        character, product = self._pending
        try:
            image = await run_in_threadpool(self.requester.generate, character, product)
            self.state = Result(image)
            logger.info("Generation completed")
        except GenerationError as e:
            self.state = Error(str(e) or GENERIC_ERROR)
            logger.info(f"Generation failed: {self.state.message}")
        except Exception:
            logger.exception("Unexpected error during generation")
            self.state = Error(GENERIC_ERROR)
        finally:
            self._pending = None
            self.busy = False

    async def generate(self) -> bool:
        """
        Generate a mashup from the two slots.

        Returns:
            False without side effects when a slot is empty or a call is in flight
        """
        if not self.begin():
            return False
        await self.run()
        return True

    def render(self) -> dict:
        return {
            "slots": [self.character.render(), self.product.render()],
            "state": self.state,
            "can_generate": self.can_generate,
            "busy": self.busy,
        }
