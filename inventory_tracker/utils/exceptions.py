"""Custom exception classes for the application."""


class BaseAppException(Exception):
    """Base exception class for all application exceptions."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InventoryValidationError(BaseAppException):
    """Raised when item fields are missing or have the wrong type."""
    pass


class ItemNotFoundError(BaseAppException):
    """Raised when an item id does not resolve to a stored record."""
    pass


class StorageError(BaseAppException):
    """Raised when the inventory document cannot be read or written."""
    pass


class InventoryAPIError(BaseAppException):
    """Raised when the inventory API returns an unexpected response."""
    pass


class ConfigurationError(BaseAppException):
    """Raised when there's a configuration error."""
    pass
