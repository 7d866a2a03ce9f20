"""
Utilities module for the AI App Catalog.
"""
from .logger import logger, init_logging, setup_logging
from .exceptions import (
    CatalogError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
    StorageTimeoutError,
)

__all__ = [
    "logger",
    "init_logging",
    "setup_logging",
    # Errors
    "CatalogError",
    "InvalidArgumentError",
    "NotFoundError",
    "UnavailableError",
    "StorageTimeoutError",
]
