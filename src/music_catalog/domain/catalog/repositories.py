"""Catalog Context Repository Interfaces.

This module defines repository interfaces for the Catalog bounded context.
Each repository holds one entity collection of the in-memory catalog.
"""

from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, TypeVar

from .entities import Artist, Customer, PlayList, Song

T = TypeVar("T")


class EntityRepository(ABC, Generic[T]):
    """Operations shared by every entity collection."""

    @abstractmethod
    def add(self, entity: T) -> None:
        """Add an entity."""
        pass

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find an entity by its ID."""
        pass

    @abstractmethod
    def find_all(self) -> List[T]:
        """Copy of the whole collection, in insertion order."""
        pass

    @abstractmethod
    def by_id(self) -> Dict[str, T]:
        """Lookup table from entity ID to entity."""
        pass

    @abstractmethod
    def load_all(self, entities: List[T]) -> None:
        """Replace the whole collection."""
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> Optional[T]:
        """Delete an entity, returning it if it existed."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Get total count of entities."""
        pass


class ArtistRepository(EntityRepository[Artist]):
    """Repository for Artist entities."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Artist]:
        """Find an artist by exact name."""
        pass


class SongRepository(EntityRepository[Song]):
    """Repository for Song entities."""

    @abstractmethod
    def find_by_artist(self, artist_id: str) -> List[Song]:
        """Find all songs that reference an artist."""
        pass


class PlayListRepository(EntityRepository[PlayList]):
    """Repository for PlayList entities."""

    @abstractmethod
    def remove_song_everywhere(self, song_id: str) -> int:
        """Remove a song from every playlist. Returns the number of playlists changed."""
        pass


class CustomerRepository(EntityRepository[Customer]):
    """Repository for Customer entities."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[Customer]:
        """Find a customer by username."""
        pass
