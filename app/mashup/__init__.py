"""
Mashup Module
Character/product image mashups generated by an AI image model.
"""
from .clients import get_generator, GeneratorResult
from .controller import AppController, GENERIC_ERROR
from .errors import GenerationError, MashupError, ReadError
from .models import DOWNLOAD_FILENAME, ImageAsset
from .requester import GenerationRequester, MASHUP_PROMPT
from .sessions import SessionStore
from .slots import SlotRole, UploadSlot

__all__ = [
    "AppController",
    "DOWNLOAD_FILENAME",
    "GENERIC_ERROR",
    "GenerationError",
    "GenerationRequester",
    "GeneratorResult",
    "ImageAsset",
    "MASHUP_PROMPT",
    "MashupError",
    "ReadError",
    "SessionStore",
    "SlotRole",
    "UploadSlot",
    "get_generator",
]
