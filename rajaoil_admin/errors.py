"""
Exceptions raised by the repositories and translated to HTTP errors by the routes.
"""


class InvalidValueError(ValueError):
    """A value failed an enum or required-field check. Nothing was written."""


class DuplicateEntryError(ValueError):
    """The entry already exists (brand, category, product name, slider image)."""


class OrderNotFoundError(LookupError):
    """Raised by the order detail session when the order no longer exists."""


class MediaNotFoundError(LookupError):
    """No stored file at the given storage path."""
