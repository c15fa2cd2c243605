"""Errors raised by the service layer.

The HTTP layer maps ``InvalidArgument`` to 400 and everything else to 500.
A missing product is not an error; lookups return ``None`` or ``False``.
"""


class CatalogError(Exception):
    """Base class for catalog service errors."""


class InvalidArgument(CatalogError):
    """Caller supplied missing, malformed or out-of-range input."""


class StoreError(CatalogError):
    """The data store could not complete the operation."""
