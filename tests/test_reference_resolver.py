"""Tests for reference resolution while loading."""

import logging

from music_catalog.domain.catalog.entities import Artist, PlayList, Song
from music_catalog.infrastructure.persistence.reference_resolver import (
    ReferenceResolver,
    UnresolvedReference,
)


class TestReferenceResolver:
    """Test sentinel substitution for dangling IDs."""

    def setup_method(self):
        self.radiohead = Artist(id="a1", name="Radiohead")
        self.artists = {"a1": self.radiohead}

    def test_known_ids_resolve_to_table_entries(self):
        resolver = ReferenceResolver()
        resolved = resolver.resolve_artists(["a1"], self.artists)
        assert resolved[0] is self.radiohead
        assert resolver.unresolved == []

    def test_missing_id_becomes_sentinel(self):
        resolver = ReferenceResolver()
        resolved = resolver.resolve_artists(["a1", "a9"], self.artists, "song s1")
        assert resolved[0] is self.radiohead
        assert resolved[1].is_unknown
        assert resolved[1].id == "a9"
        assert resolver.unresolved == [UnresolvedReference(kind="artist", id="a9", referenced_by="song s1")]

    def test_table_is_not_modified(self):
        resolver = ReferenceResolver()
        resolver.resolve_artists(["a9"], self.artists)
        assert list(self.artists) == ["a1"]

    def test_same_missing_id_shares_one_sentinel(self):
        resolver = ReferenceResolver()
        first = resolver.resolve_songs(["s9"], {}, "playlist p1")
        second = resolver.resolve_songs(["s9"], {}, "playlist p2")
        assert first[0] is second[0]
        assert len(resolver.unresolved) == 2

    def test_sentinel_types(self):
        resolver = ReferenceResolver()
        song = resolver.resolve_songs(["x"], {})[0]
        playlist = resolver.resolve_playlists(["x"], {})[0]
        assert isinstance(song, Song) and song.is_unknown
        assert isinstance(playlist, PlayList) and playlist.is_unknown
        assert song is not playlist

    def test_order_is_preserved(self):
        resolver = ReferenceResolver()
        songs = {"s1": Song(id="s1", name="One", genre="g", duration_in_seconds=1)}
        resolved = resolver.resolve_songs(["s9", "s1", "s9"], songs)
        assert [s.id for s in resolved] == ["s9", "s1", "s9"]

    def test_unresolved_reference_is_logged(self, caplog):
        resolver = ReferenceResolver()
        with caplog.at_level(logging.WARNING):
            resolver.resolve_playlists(["p9"], {}, "customer listener01")
        assert "p9" in caplog.text
