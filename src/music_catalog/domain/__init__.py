"""
Domain Layer - Music Catalog

This module contains the domain layer following Domain-Driven Design
principles. The catalog context is the only bounded context.
"""

from .catalog import (
    Artist,
    Song,
    PlayList,
    Customer,
    CustomerType,
    RegularCustomer,
    PremiumCustomer,
    CatalogSnapshot,
    CatalogService,
    CustomerSessionService,
    Session,
)
from .result import (
    Result,
    Success,
    Failure,
    success,
    failure,
    DomainError,
    ValidationError,
    NotFoundError,
    AlreadyExistsError,
    UnsupportedTypeError,
    UnsupportedOperationError,
    AuthenticationError,
)

__all__ = [
    "Artist",
    "Song",
    "PlayList",
    "Customer",
    "CustomerType",
    "RegularCustomer",
    "PremiumCustomer",
    "CatalogSnapshot",
    "CatalogService",
    "CustomerSessionService",
    "Session",
    "Result",
    "Success",
    "Failure",
    "success",
    "failure",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "AlreadyExistsError",
    "UnsupportedTypeError",
    "UnsupportedOperationError",
    "AuthenticationError",
]
