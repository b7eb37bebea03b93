"""
Exceptions raised by the post settings workflow.
"""

from typing import Iterable, List


class PostSettingsError(Exception):
    """Base exception for post settings operations."""


class DateValidationError(PostSettingsError):
    """Raised when a user supplied published date fails local validation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PostSaveError(PostSettingsError):
    """Raised when the server rejects a save. Carries field level messages."""

    def __init__(self, messages: Iterable[str]):
        self.messages: List[str] = [str(m) for m in messages if m] or ["Unknown error while saving post"]
        super().__init__("; ".join(self.messages))


class SlugGenerationError(PostSettingsError):
    """Raised when the slug endpoint can't be reached or returns garbage."""
