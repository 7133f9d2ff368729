"""
Creation error taxonomy for Snipster.

Every error raised while creating a link derives from `CreationError`, which is
itself a `ValueError` so callers that only care about "bad input" can catch that.
Each subclass carries a stable `reason` identifier (useful for programmatic
handling) and a human-readable message suitable for showing next to the form.

No creation error leaves partial state behind: the manager raises before
anything is written to storage.
"""

__all__ = [
    "CreationError",
    "EmptyUrlError",
    "InvalidUrlError",
    "InvalidAliasFormatError",
    "AliasTakenError",
    "CodeGenerationExhaustedError",
]


class CreationError(ValueError):
    """Base class for recoverable link-creation failures."""

    reason = "CreationError"
    default_message = "Could not create link."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class EmptyUrlError(CreationError):
    reason = "EmptyUrl"
    default_message = "Please enter a URL."


class InvalidUrlError(CreationError):
    reason = "InvalidUrl"
    default_message = "Please enter a valid http(s) URL."


class InvalidAliasFormatError(CreationError):
    reason = "InvalidAliasFormat"
    default_message = "Custom alias must be 3-30 chars: letters, numbers, _ or -"


class AliasTakenError(CreationError):
    reason = "AliasTaken"
    default_message = "That alias is already taken. Try another."


class CodeGenerationExhaustedError(CreationError):
    reason = "CodeGenerationExhausted"
    default_message = "Could not generate a unique code. Please try again."
