"""
Catalog Context - Managing artists, songs, playlists and customers.

This bounded context is responsible for:
- The catalog entities and their identity rules
- Sentinel entities for unresolved references
- Repository interfaces for the entity collections
- The mutation layer and customer sessions
"""

from .entities import (
    MINIMUM_AGE,
    Artist,
    Song,
    PlayList,
    Customer,
    CustomerType,
    RegularCustomer,
    PremiumCustomer,
    CatalogSnapshot,
    create_customer,
)
from .repositories import ArtistRepository, SongRepository, PlayListRepository, CustomerRepository
from .services import CatalogService, CustomerSessionService, Session

__all__ = [
    # Entities
    "MINIMUM_AGE",
    "Artist",
    "Song",
    "PlayList",
    "Customer",
    "CustomerType",
    "RegularCustomer",
    "PremiumCustomer",
    "CatalogSnapshot",
    "create_customer",
    # Repositories
    "ArtistRepository",
    "SongRepository",
    "PlayListRepository",
    "CustomerRepository",
    # Services
    "CatalogService",
    "CustomerSessionService",
    "Session",
]
