"""Music Catalog

An in-memory catalog of artists, songs, playlists and customers that is
snapshotted to and restored from delimited text or binary files.
"""

__version__ = "0.1.0"

from .domain.catalog import (
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
from .infrastructure.repositories import create_in_memory_catalog
from .infrastructure.persistence import CatalogFileManager, LoadReport
from .models.config import StorageConfig

__all__ = [
    # Entities
    "Artist",
    "Song",
    "PlayList",
    "Customer",
    "CustomerType",
    "RegularCustomer",
    "PremiumCustomer",
    "CatalogSnapshot",

    # Services
    "CatalogService",
    "CustomerSessionService",
    "Session",
    "create_in_memory_catalog",

    # Persistence
    "CatalogFileManager",
    "LoadReport",
    "StorageConfig",
]
