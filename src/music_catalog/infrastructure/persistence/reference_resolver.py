"""
Reference resolution for decoded records.

Stored records reference other entities by ID. While loading, each list of
ID tokens is resolved against a lookup table built from the collection that
was loaded before it. A token that is missing from the table never aborts
the load: it is replaced by the sentinel entity of the right type carrying
the unresolved ID.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Tuple, TypeVar

from ...domain.catalog.entities import Artist, CatalogEntity, PlayList, Song

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=CatalogEntity)


@dataclass(frozen=True)
class UnresolvedReference:
    """An ID that was replaced by a sentinel during loading."""
    kind: str
    id: str
    referenced_by: str


class ReferenceResolver:
    """
    Resolves ID tokens for one load pass.

    Lookup tables are only read. Sentinels created during the pass are
    remembered, so every dangling reference to the same ID resolves to the
    same placeholder object.
    """

    def __init__(self):
        self._sentinels: Dict[Tuple[str, str], CatalogEntity] = {}
        self.unresolved: List[UnresolvedReference] = []

    def resolve_artists(self, tokens: List[str], artists_by_id: Mapping[str, Artist],
                        referenced_by: str = "") -> List[Artist]:
        """Resolve artist IDs, substituting ``Artist.unknown`` for missing ones."""
        return self._resolve(tokens, artists_by_id, "artist", Artist.unknown, referenced_by)

    def resolve_songs(self, tokens: List[str], songs_by_id: Mapping[str, Song],
                      referenced_by: str = "") -> List[Song]:
        """Resolve song IDs, substituting ``Song.unknown`` for missing ones."""
        return self._resolve(tokens, songs_by_id, "song", Song.unknown, referenced_by)

    def resolve_playlists(self, tokens: List[str], playlists_by_id: Mapping[str, PlayList],
                          referenced_by: str = "") -> List[PlayList]:
        """Resolve playlist IDs, substituting ``PlayList.unknown`` for missing ones."""
        return self._resolve(tokens, playlists_by_id, "playlist", PlayList.unknown, referenced_by)

    def _resolve(self, tokens: List[str], table: Mapping[str, T], kind: str,
                 make_unknown: Callable[[str], T], referenced_by: str) -> List[T]:
        resolved: List[T] = []
        for token in tokens:
            entity = table.get(token)
            if entity is None:
                entity = self._sentinel(kind, token, make_unknown, referenced_by)
            resolved.append(entity)
        return resolved

    def _sentinel(self, kind: str, entity_id: str, make_unknown: Callable[[str], T],
                  referenced_by: str) -> T:
        self.unresolved.append(UnresolvedReference(kind=kind, id=entity_id, referenced_by=referenced_by))
        logger.warning(f"Unresolved {kind} reference {entity_id} in {referenced_by or 'record'}")

        key = (kind, entity_id)
        if key not in self._sentinels:
            self._sentinels[key] = make_unknown(entity_id)
        return self._sentinels[key]
