"""
Repository Implementations - Infrastructure Layer

This package contains the in-memory repositories that hold the catalog,
following the Repository pattern from Domain-Driven Design.
"""

from .catalog_repository import (
    InMemoryArtistRepository,
    InMemorySongRepository,
    InMemoryPlayListRepository,
    InMemoryCustomerRepository,
)
from ...domain.catalog.services import CatalogService


def create_in_memory_catalog() -> CatalogService:
    """Catalog service backed by fresh in-memory repositories."""
    return CatalogService(
        InMemoryArtistRepository(),
        InMemorySongRepository(),
        InMemoryPlayListRepository(),
        InMemoryCustomerRepository(),
    )


__all__ = [
    "InMemoryArtistRepository",
    "InMemorySongRepository",
    "InMemoryPlayListRepository",
    "InMemoryCustomerRepository",
    "create_in_memory_catalog",
]
