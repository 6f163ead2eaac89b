"""
Catalog Repository Implementations.

This module provides in-memory repository implementations for the Catalog
bounded context entities. The whole catalog lives in these collections;
persistence happens by snapshotting them to files.
"""

from typing import Dict, Generic, List, Optional, TypeVar

from ...domain.catalog.entities import Artist, CatalogEntity, Customer, PlayList, Song
from ...domain.catalog.repositories import (
    ArtistRepository,
    CustomerRepository,
    PlayListRepository,
    SongRepository,
)
from ...domain.result import AlreadyExistsError

T = TypeVar("T", bound=CatalogEntity)


class _InMemoryCollection(Generic[T]):
    """Insertion-ordered storage keyed by entity ID."""

    def __init__(self):
        self._entities: Dict[str, T] = {}

    def add(self, entity: T) -> None:
        """Add an entity."""
        if entity.id in self._entities:
            raise AlreadyExistsError(f"An entity with id {entity.id} already exists")
        self._entities[entity.id] = entity

    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find an entity by its ID."""
        return self._entities.get(entity_id)

    def find_all(self) -> List[T]:
        """Copy of the whole collection."""
        return list(self._entities.values())

    def by_id(self) -> Dict[str, T]:
        """Lookup table from entity ID to entity."""
        return dict(self._entities)

    def load_all(self, entities: List[T]) -> None:
        """Replace the whole collection."""
        self._entities = {entity.id: entity for entity in entities}

    def delete(self, entity_id: str) -> Optional[T]:
        """Delete an entity, returning it if it existed."""
        return self._entities.pop(entity_id, None)

    def count(self) -> int:
        """Get total count of entities."""
        return len(self._entities)


class InMemoryArtistRepository(_InMemoryCollection[Artist], ArtistRepository):
    """In-memory implementation of ArtistRepository."""

    def find_by_name(self, name: str) -> Optional[Artist]:
        for artist in self._entities.values():
            if artist.name == name:
                return artist
        return None


class InMemorySongRepository(_InMemoryCollection[Song], SongRepository):
    """In-memory implementation of SongRepository."""

    def find_by_artist(self, artist_id: str) -> List[Song]:
        return [song for song in self._entities.values() if song.has_artist(artist_id)]


class InMemoryPlayListRepository(_InMemoryCollection[PlayList], PlayListRepository):
    """In-memory implementation of PlayListRepository."""

    def remove_song_everywhere(self, song_id: str) -> int:
        changed = 0
        for playlist in self._entities.values():
            if playlist.remove_song(song_id):
                changed += 1
        return changed


class InMemoryCustomerRepository(_InMemoryCollection[Customer], CustomerRepository):
    """In-memory implementation of CustomerRepository.

    Usernames are unique across all customers.
    """

    def add(self, entity: Customer) -> None:
        if self.find_by_username(entity.username) is not None:
            raise AlreadyExistsError(f"Username {entity.username} already exists")
        super().add(entity)

    def find_by_username(self, username: str) -> Optional[Customer]:
        for customer in self._entities.values():
            if customer.username == username:
                return customer
        return None
