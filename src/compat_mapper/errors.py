"""Exception types raised by the compatibility mapper."""


class CompatMapperError(Exception):
    """Base exception for mapper errors."""
    pass


class ColumnSelectionError(CompatMapperError, ValueError):
    """Raised when a caller selects a column that does not exist."""
    pass


class CatalogFormatError(CompatMapperError):
    """Raised when a compatibility list has no usable header or columns."""
    pass
