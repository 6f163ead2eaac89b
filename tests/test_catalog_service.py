"""Tests for the catalog mutation layer and customer sessions."""

import pytest

from music_catalog.domain.catalog.entities import CatalogSnapshot, PremiumCustomer, RegularCustomer
from music_catalog.domain.catalog.services import CustomerSessionService, Session
from music_catalog.domain.result import (
    AlreadyExistsError,
    AuthenticationError,
    NotFoundError,
    UnsupportedOperationError,
    UnsupportedTypeError,
    ValidationError,
)
from music_catalog.infrastructure.repositories import create_in_memory_catalog

PASSWORD = "Secret#123"


@pytest.fixture
def catalog():
    return create_in_memory_catalog()


@pytest.fixture
def populated(catalog):
    """Catalog with two artists, three songs and one customer of each variant."""
    ids = {}
    ids["radiohead"] = catalog.add_artist("Radiohead")
    ids["portishead"] = catalog.add_artist("Portishead")
    ids["karma"] = catalog.add_song("Karma Police", "Rock", 258, "OK Computer", [ids["radiohead"]])
    ids["roads"] = catalog.add_song("Roads", "Trip Hop", 305, "Dummy", [ids["portishead"]])
    ids["collab"] = catalog.add_song("Collab", "Rock", 200, "", [ids["radiohead"], ids["portishead"]])
    ids["regular"] = catalog.add_customer("Regular", "listener01", PASSWORD, "Ada", "Lovelace", 30)
    ids["premium"] = catalog.add_customer("Premium", "bigspender", PASSWORD, "Bo", "Diddley", 41)
    return catalog, ids


@pytest.fixture
def sessions(populated):
    catalog, ids = populated
    return CustomerSessionService(catalog), ids


class TestAddEntities:
    """Creation through the catalog service."""

    def test_add_artist(self, catalog):
        artist_id = catalog.add_artist("Radiohead")
        assert catalog.artist_repo.find_by_id(artist_id).name == "Radiohead"

    def test_duplicate_artist_name(self, catalog):
        catalog.add_artist("Radiohead")
        with pytest.raises(AlreadyExistsError):
            catalog.add_artist("Radiohead")

    def test_empty_artist_name(self, catalog):
        with pytest.raises(ValidationError):
            catalog.add_artist("  ")

    def test_add_song_links_artists(self, populated):
        catalog, ids = populated
        song = catalog.song_repo.find_by_id(ids["collab"])
        assert song.artist_ids == [ids["radiohead"], ids["portishead"]]
        assert song.artists[0] is catalog.artist_repo.find_by_id(ids["radiohead"])

    def test_add_song_unknown_artist(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.add_song("Song", "Rock", 100, "Album", ["missing"])
        assert catalog.get_songs() == []

    @pytest.mark.parametrize("duration", [0, -5])
    def test_add_song_bad_duration(self, catalog, duration):
        with pytest.raises(ValidationError):
            catalog.add_song("Song", "Rock", duration, "Album")

    def test_add_playlist(self, catalog):
        playlist_id = catalog.add_playlist("Road trip")
        assert catalog.playlist_repo.find_by_id(playlist_id).songs == []


class TestAddCustomer:
    """Customer registration rules."""

    def test_regular_customer_registers_default_playlist(self, catalog):
        customer_id = catalog.add_customer("Regular", "listener01", PASSWORD, "Ada", "Lovelace", 30)
        customer = catalog.customer_repo.find_by_id(customer_id)
        assert isinstance(customer, RegularCustomer)
        assert catalog.playlist_repo.find_by_id(customer.playlist.id) is customer.playlist

    def test_premium_customer(self, catalog):
        customer_id = catalog.add_customer("premium", "bigspender", PASSWORD, "Bo", "Diddley", 41)
        assert isinstance(catalog.customer_repo.find_by_id(customer_id), PremiumCustomer)

    def test_duplicate_username_leaves_collection_unchanged(self, catalog):
        catalog.add_customer("Regular", "listener01", PASSWORD, "Ada", "Lovelace", 30)
        before = catalog.get_customers()

        with pytest.raises(AlreadyExistsError):
            catalog.add_customer("Premium", "listener01", PASSWORD, "Other", "Person", 50)

        assert catalog.get_customers() == before

    @pytest.mark.parametrize("username", ["short", "1starts_with_digit", "has space in", "x" * 40])
    def test_invalid_username(self, catalog, username):
        with pytest.raises(ValidationError, match="username"):
            catalog.add_customer("Regular", username, PASSWORD, "Ada", "Lovelace", 30)

    @pytest.mark.parametrize("password", ["secret#123", "SECRET#123", "Secret1234", "Se#1"])
    def test_invalid_password(self, catalog, password):
        with pytest.raises(ValidationError, match="password"):
            catalog.add_customer("Regular", "listener01", password, "Ada", "Lovelace", 30)

    def test_too_young(self, catalog):
        with pytest.raises(ValidationError, match="age"):
            catalog.add_customer("Regular", "listener01", PASSWORD, "Ada", "Lovelace", 13)

    def test_unknown_variant(self, catalog):
        with pytest.raises(UnsupportedTypeError):
            catalog.add_customer("Gold", "listener01", PASSWORD, "Ada", "Lovelace", 30)


class TestDeletion:
    """Deletion cascades and Result values."""

    def test_delete_song_removes_it_from_playlists(self, sessions):
        service, ids = sessions
        session = service.log_in("bigspender", PASSWORD)
        playlist_id = service.add_playlist(session, "Mix")
        service.add_song_to_playlist(session, playlist_id, ids["karma"])
        service.add_song_to_playlist(session, playlist_id, ids["roads"])
        service.add_song_to_playlist(session, playlist_id, ids["karma"])

        result = service.catalog.delete_song(ids["karma"])

        assert result.is_success()
        assert result.value().id == ids["karma"]
        assert service.catalog.playlist_repo.find_by_id(playlist_id).song_ids == [ids["roads"]]

    def test_delete_missing_song(self, catalog):
        result = catalog.delete_song("missing")
        assert result.is_failure()
        assert isinstance(result.error(), NotFoundError)

    def test_delete_artist_cascades(self, sessions):
        service, ids = sessions
        session = service.log_in("listener01", PASSWORD)
        service.follow_artist(session, ids["radiohead"])

        result = service.catalog.delete_artist(ids["radiohead"])

        assert result
        remaining = [s.id for s in service.catalog.get_songs()]
        assert remaining == [ids["roads"]]
        assert service.followed_artists(session) == []

    def test_delete_missing_artist(self, catalog):
        assert not catalog.delete_artist("missing")

    def test_delete_customer_drops_owned_playlists(self, populated):
        catalog, ids = populated
        customer = catalog.customer_repo.find_by_id(ids["regular"])
        playlist_id = customer.playlist.id

        assert catalog.delete_customer("listener01").is_success()
        assert catalog.customer_repo.find_by_id(ids["regular"]) is None
        assert catalog.playlist_repo.find_by_id(playlist_id) is None

    def test_delete_missing_customer(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.delete_customer("nobody_here").or_else_raise()


class TestSnapshots:
    """Bulk replacement of the catalog."""

    def test_snapshot_and_apply(self, populated):
        catalog, _ = populated
        snapshot = catalog.snapshot()

        other = create_in_memory_catalog()
        other.apply_snapshot(snapshot)

        assert other.snapshot().counts() == snapshot.counts()
        assert other.get_songs()[0] is snapshot.songs[0]

    def test_apply_replaces_existing_entities(self, populated):
        catalog, _ = populated
        catalog.apply_snapshot(CatalogSnapshot())
        assert catalog.snapshot().is_empty

    def test_snapshot_lists_are_copies(self, populated):
        catalog, _ = populated
        catalog.snapshot().artists.clear()
        assert len(catalog.get_artists()) == 2


class TestCustomerSessions:
    """Operations performed by a logged-in customer."""

    def test_log_in(self, sessions):
        service, ids = sessions
        session = service.log_in("listener01", PASSWORD)
        assert session == Session(customer_id=ids["regular"], username="listener01")

    @pytest.mark.parametrize("username,password", [("listener01", "Wrong#123"), ("nobody_here", PASSWORD)])
    def test_log_in_fails(self, sessions, username, password):
        service, _ = sessions
        with pytest.raises(AuthenticationError):
            service.log_in(username, password)

    def test_stale_session(self, sessions):
        service, _ = sessions
        session = service.log_in("listener01", PASSWORD)
        service.catalog.delete_customer("listener01")
        with pytest.raises(AuthenticationError):
            service.playlists(session)

    def test_regular_cannot_add_playlist(self, sessions):
        service, _ = sessions
        session = service.log_in("listener01", PASSWORD)
        with pytest.raises(UnsupportedOperationError):
            service.add_playlist(session, "Second")

    def test_premium_adds_playlists(self, sessions):
        service, _ = sessions
        session = service.log_in("bigspender", PASSWORD)
        first = service.add_playlist(session, "One")
        second = service.add_playlist(session, "Two")
        assert [p.id for p in service.playlists(session)] == [first, second]
        assert service.catalog.playlist_repo.find_by_id(first) is not None

    def test_follow_artist(self, sessions):
        service, ids = sessions
        session = service.log_in("listener01", PASSWORD)
        artist = service.follow_artist(session, ids["portishead"])
        assert artist.name == "Portishead"
        with pytest.raises(AlreadyExistsError):
            service.follow_artist(session, ids["portishead"])
        with pytest.raises(NotFoundError):
            service.follow_artist(session, "missing")

    def test_add_and_play_songs(self, sessions):
        service, ids = sessions
        session = service.log_in("listener01", PASSWORD)
        playlist_id = service.playlists(session)[0].id
        service.add_song_to_playlist(session, playlist_id, ids["karma"])
        service.add_song_to_playlist(session, playlist_id, ids["roads"])
        assert service.play_playlist(session, playlist_id) == [
            "Playing song: Karma Police",
            "Playing song: Roads",
        ]

    def test_remove_song_from_playlist(self, sessions):
        service, ids = sessions
        session = service.log_in("listener01", PASSWORD)
        playlist_id = service.playlists(session)[0].id
        service.add_song_to_playlist(session, playlist_id, ids["karma"])
        assert service.remove_song_from_playlist(session, playlist_id, ids["karma"]) is True
        assert service.remove_song_from_playlist(session, playlist_id, ids["karma"]) is False

    def test_cannot_touch_someone_elses_playlist(self, sessions):
        service, ids = sessions
        owner = service.log_in("bigspender", PASSWORD)
        playlist_id = service.add_playlist(owner, "Private")
        intruder = service.log_in("listener01", PASSWORD)
        with pytest.raises(NotFoundError):
            service.add_song_to_playlist(intruder, playlist_id, ids["karma"])

    def test_add_unknown_song(self, sessions):
        service, _ = sessions
        session = service.log_in("listener01", PASSWORD)
        playlist_id = service.playlists(session)[0].id
        with pytest.raises(NotFoundError):
            service.add_song_to_playlist(session, playlist_id, "missing")
