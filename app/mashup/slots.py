"""
Upload slots: one per image role, each owning zero or one ImageAsset.
"""
import logging
from enum import Enum
from typing import Optional

from .errors import ReadError
from .ingest import read_upload
from .models import ImageAsset

logger = logging.getLogger(__name__)


class SlotRole(str, Enum):
    CHARACTER = "character"
    PRODUCT = "product"


SLOT_TITLES = {
    SlotRole.CHARACTER: "Character Image",
    SlotRole.PRODUCT: "Product Image",
}


class UploadSlot:
    """
    Holds the image for one role and mediates add/remove gestures.
    """

    def __init__(self, role: SlotRole):
        self.role = role
        self.title = SLOT_TITLES[role]
        self.asset: Optional[ImageAsset] = None
        # Bumped on remove so the page renders a fresh file input
        self.picker_version = 0

    @property
    def is_empty(self) -> bool:
        return self.asset is None

    async def select(self, upload) -> Optional[ImageAsset]:
        """
        Ingest an upload and make it the slot's image.

        A read failure clears the slot instead of raising.
        """
        try:
            self.asset = await read_upload(upload)
        except ReadError as e:
            logger.error(f"Error processing file for {self.role.value} slot: {e}")
            self.asset = None
        return self.asset

    def remove(self):
        self.asset = None
        self.picker_version += 1

    def render(self) -> dict:
        return {
            "role": self.role.value,
            "title": self.title,
            "empty": self.is_empty,
            "preview": self.asset.data_url if self.asset else None,
            "picker_version": self.picker_version,
        }
