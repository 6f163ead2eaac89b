"""Catalog Context Domain Services.

This module defines domain services for the Catalog bounded context.
``CatalogService`` is the mutation layer over the four entity collections;
it enforces uniqueness rules and the deletion cascades. Customer-facing
operations go through ``CustomerSessionService``, which takes an explicit
``Session`` value instead of keeping a logged-in customer around.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

from ..result import (
    AlreadyExistsError,
    AuthenticationError,
    NotFoundError,
    Result,
    ValidationError,
    failure,
    success,
)
from .entities import (
    MINIMUM_AGE,
    Artist,
    CatalogSnapshot,
    Customer,
    CustomerType,
    PlayList,
    Song,
    create_customer,
)
from .repositories import ArtistRepository, CustomerRepository, PlayListRepository, SongRepository

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]{7,30}$")
PASSWORD_PATTERN = re.compile(r"^(?=.*?[A-Z])(?=.*?[a-z])(?=.*?[0-9])(?=.*?[#?!@$ %^&*-]).{8,}$")


def _require_text(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value


class CatalogService:
    """Adds, deletes and bulk-loads catalog entities."""

    def __init__(
        self,
        artist_repo: ArtistRepository,
        song_repo: SongRepository,
        playlist_repo: PlayListRepository,
        customer_repo: CustomerRepository,
    ):
        self.artist_repo = artist_repo
        self.song_repo = song_repo
        self.playlist_repo = playlist_repo
        self.customer_repo = customer_repo

    # Creation

    def add_artist(self, name: str) -> str:
        """Add an artist and return its new id.

        Raises:
            ValidationError: If the name is empty.
            AlreadyExistsError: If an artist with that name exists.
        """
        _require_text(name, "Artist name")
        if self.artist_repo.find_by_name(name) is not None:
            raise AlreadyExistsError(f"An artist named {name} already exists")

        artist = Artist(name=name)
        self.artist_repo.add(artist)
        logger.debug(f"Added artist {artist.id} ({name})")
        return artist.id

    def add_song(self, name: str, genre: str, duration_in_seconds: int, album: str,
                 artist_ids: Sequence[str] = ()) -> str:
        """Add a song by existing artists and return its new id.

        Raises:
            ValidationError: For an empty name or genre, or a non-positive duration.
            NotFoundError: If any artist id is unknown.
        """
        _require_text(name, "Song name")
        _require_text(genre, "Genre")
        if not isinstance(duration_in_seconds, int) or duration_in_seconds <= 0:
            raise ValidationError("Duration in seconds must be a positive integer")

        artists = []
        for artist_id in artist_ids:
            artist = self.artist_repo.find_by_id(artist_id)
            if artist is None:
                raise NotFoundError(f"Artist {artist_id} does not exist")
            artists.append(artist)

        song = Song(name=name, genre=genre, duration_in_seconds=duration_in_seconds, album=album or "")
        song.add_artists(artists)
        self.song_repo.add(song)
        logger.debug(f"Added song {song.id} ({name})")
        return song.id

    def add_playlist(self, name: str) -> str:
        """Add an unowned playlist and return its new id."""
        _require_text(name, "Playlist name")
        playlist = PlayList(name=name)
        self.playlist_repo.add(playlist)
        return playlist.id

    def add_customer(self, customer_type: str, username: str, password: str, name: str,
                     last_name: str, age: int) -> str:
        """Register a customer and return its new id.

        A regular customer's default playlist is added to the playlist
        collection as well.

        Raises:
            UnsupportedTypeError: For an unknown customer type.
            ValidationError: If any field breaks the registration rules.
            AlreadyExistsError: If the username is taken.
        """
        variant = CustomerType.parse(customer_type)
        _require_text(name, "Name")
        _require_text(last_name, "Last name")
        if not USERNAME_PATTERN.match(username or ""):
            raise ValidationError(
                "Invalid username. Usernames start with a letter, contain letters, digits "
                "or underscores and are 8 to 31 characters long."
            )
        if not PASSWORD_PATTERN.match(password or ""):
            raise ValidationError(
                "Invalid password. Passwords need an uppercase letter, a lowercase letter, "
                "a digit, a special character and at least 8 characters."
            )
        if age < MINIMUM_AGE:
            raise ValidationError(f"Invalid age. Customers must be at least {MINIMUM_AGE}.")
        if self.customer_repo.find_by_username(username) is not None:
            raise AlreadyExistsError(f"Username {username} already exists")

        customer = create_customer(
            variant.value,
            username=username,
            password=password,
            name=name,
            last_name=last_name,
            age=age,
        )
        self.customer_repo.add(customer)
        for playlist in customer.playlists:
            self.playlist_repo.add(playlist)
        logger.debug(f"Added {variant.value} customer {username}")
        return customer.id

    # Deletion

    def delete_song(self, song_id: str) -> Result[Song, NotFoundError]:
        """Delete a song and remove it from every playlist."""
        song = self.song_repo.find_by_id(song_id)
        if song is None:
            return failure(NotFoundError(f"Song {song_id} does not exist"))

        changed = self.playlist_repo.remove_song_everywhere(song_id)
        self.song_repo.delete(song_id)
        logger.debug(f"Deleted song {song_id}, removed from {changed} playlists")
        return success(song)

    def delete_artist(self, artist_id: str) -> Result[Artist, NotFoundError]:
        """Delete an artist together with every song that references it.

        The artist is also dropped from the followed artists of every
        customer.
        """
        artist = self.artist_repo.find_by_id(artist_id)
        if artist is None:
            return failure(NotFoundError(f"Artist {artist_id} does not exist"))

        for song in self.song_repo.find_by_artist(artist_id):
            self.delete_song(song.id)
        for customer in self.customer_repo.find_all():
            customer.unfollow_artist(artist_id)
        self.artist_repo.delete(artist_id)
        logger.debug(f"Deleted artist {artist_id}")
        return success(artist)

    def delete_customer(self, username: str) -> Result[Customer, NotFoundError]:
        """Delete a customer and the playlists it owns."""
        customer = self.customer_repo.find_by_username(username)
        if customer is None:
            return failure(NotFoundError(f"Customer {username} does not exist"))

        for playlist_id in customer.playlist_ids:
            self.playlist_repo.delete(playlist_id)
        self.customer_repo.delete(customer.id)
        logger.debug(f"Deleted customer {username}")
        return success(customer)

    # Bulk access for persistence

    def get_artists(self) -> List[Artist]:
        return self.artist_repo.find_all()

    def get_songs(self) -> List[Song]:
        return self.song_repo.find_all()

    def get_playlists(self) -> List[PlayList]:
        return self.playlist_repo.find_all()

    def get_customers(self) -> List[Customer]:
        return self.customer_repo.find_all()

    def load_artists(self, artists: List[Artist]) -> None:
        self.artist_repo.load_all(artists)

    def load_songs(self, songs: List[Song]) -> None:
        self.song_repo.load_all(songs)

    def load_playlists(self, playlists: List[PlayList]) -> None:
        self.playlist_repo.load_all(playlists)

    def load_customers(self, customers: List[Customer]) -> None:
        self.customer_repo.load_all(customers)

    def snapshot(self) -> CatalogSnapshot:
        """Copies of all four collections, ready to export."""
        return CatalogSnapshot(
            artists=self.get_artists(),
            songs=self.get_songs(),
            playlists=self.get_playlists(),
            customers=self.get_customers(),
        )

    def apply_snapshot(self, snapshot: CatalogSnapshot) -> None:
        """Replace the whole catalog with a loaded snapshot."""
        self.load_artists(snapshot.artists)
        self.load_songs(snapshot.songs)
        self.load_playlists(snapshot.playlists)
        self.load_customers(snapshot.customers)
        logger.info(f"Catalog replaced: {snapshot.counts()}")


@dataclass(frozen=True)
class Session:
    """Proof that a customer logged in; passed to every customer operation."""
    customer_id: str
    username: str


class CustomerSessionService:
    """Operations a logged-in customer performs on their own data."""

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    def log_in(self, username: str, password: str) -> Session:
        """Check credentials and open a session.

        Raises:
            AuthenticationError: If the username is unknown or the password is wrong.
        """
        customer = self.catalog.customer_repo.find_by_username(username)
        if customer is None or not customer.check_password(password):
            raise AuthenticationError("Wrong username or password")
        return Session(customer_id=customer.id, username=customer.username)

    def customer(self, session: Session) -> Customer:
        customer = self.catalog.customer_repo.find_by_id(session.customer_id)
        if customer is None:
            raise AuthenticationError(f"Customer {session.username} no longer exists")
        return customer

    def playlists(self, session: Session) -> List[PlayList]:
        return self.customer(session).playlists

    def add_playlist(self, session: Session, name: str) -> str:
        """Create a playlist owned by the session customer.

        Raises:
            UnsupportedOperationError: For regular customers, who own exactly one.
        """
        customer = self.customer(session)
        _require_text(name, "Playlist name")
        playlist = PlayList(name=name)
        customer.add_playlist(playlist)
        self.catalog.playlist_repo.add(playlist)
        return playlist.id

    def follow_artist(self, session: Session, artist_id: str) -> Artist:
        customer = self.customer(session)
        artist = self.catalog.artist_repo.find_by_id(artist_id)
        if artist is None:
            raise NotFoundError(f"Artist {artist_id} does not exist")
        if not customer.follow_artist(artist):
            raise AlreadyExistsError(f"Artist {artist.name} is already followed")
        return artist

    def followed_artists(self, session: Session) -> List[Artist]:
        return list(self.customer(session).followed_artists)

    def add_song_to_playlist(self, session: Session, playlist_id: str, song_id: str) -> None:
        playlist = self._owned_playlist(session, playlist_id)
        song = self.catalog.song_repo.find_by_id(song_id)
        if song is None:
            raise NotFoundError(f"Song {song_id} does not exist")
        playlist.add_song(song)

    def remove_song_from_playlist(self, session: Session, playlist_id: str, song_id: str) -> bool:
        return self._owned_playlist(session, playlist_id).remove_song(song_id)

    def play_playlist(self, session: Session, playlist_id: str) -> List[str]:
        return [song.play() for song in self._owned_playlist(session, playlist_id).songs]

    def _owned_playlist(self, session: Session, playlist_id: str) -> PlayList:
        customer = self.customer(session)
        for playlist in customer.playlists:
            if playlist.id == playlist_id:
                return playlist
        raise NotFoundError(f"Playlist {playlist_id} does not belong to {customer.username}")

