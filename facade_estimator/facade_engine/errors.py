"""Input contract violations raised by the facade engine."""

from __future__ import annotations


class FacadeInputError(ValueError):
    """The caller supplied input the engine cannot aggregate."""


class EmptyInputError(FacadeInputError):
    """No photograph detections were supplied."""

    def __init__(self, message: str = "At least one image detection is required"):
        super().__init__(message)
