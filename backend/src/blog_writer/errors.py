"""Blog writer exception hierarchy.

The renderer defines no errors: it is total over all string inputs.
"""


class BlogWriterError(Exception):
    """Base exception for all blog writer errors."""


class GenerationFailure(BlogWriterError):
    """Raised when the generative-text backend fails or is not configured."""


class ClipboardFailure(BlogWriterError):
    """Raised when writing to the clipboard fails. Logged, never shown to the user."""
