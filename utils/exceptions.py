"""
Custom Exceptions

Every error carries the HTTP status the API layer answers with.
"""


class CatalogError(Exception):
    """Base error for the catalog backend."""
    
    status_code = 500
    
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidArgumentError(CatalogError):
    """Caller supplied a bad parameter (ranking type, limit, sort field, page)."""
    
    status_code = 400
    
    def __init__(self, message: str, field: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.field = field


class NotFoundError(CatalogError):
    """Requested catalog entry does not exist."""
    
    status_code = 404


class UnavailableError(CatalogError):
    """Storage could not answer; the message is safe to show to clients."""
    
    status_code = 500


class StorageTimeoutError(UnavailableError):
    """Storage did not answer within the bounded wait."""
    pass
