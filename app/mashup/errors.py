"""
Error types for the mashup flow.
"""


class MashupError(Exception):
    """Base class for mashup errors."""


class ReadError(MashupError):
    """An uploaded file could not be read."""


class GenerationError(MashupError):
    """The generation service call failed or returned no image."""
