"""
Binary snapshot codec.

Each entity collection is pickled as one unit. Pickle's memo table maps
every object already written to a reference index, so an artist shared by
several songs is written once and comes back as one shared instance. Never
pickle the elements of a collection one by one: that would silently turn
shared references into equal but distinct copies.

Loading only reconstructs this package's entity classes; any other global
in a blob is rejected.
"""

import io
import logging
import pickle
from typing import Any, Dict, List, Optional, Tuple, Type

from ...domain.catalog.entities import (
    Artist,
    CatalogSnapshot,
    Customer,
    CustomerType,
    PlayList,
    PremiumCustomer,
    RegularCustomer,
    Song,
)
from ...exceptions import FormatError

logger = logging.getLogger(__name__)

_ALLOWED_CLASSES: Tuple[type, ...] = (
    Artist, Song, PlayList, RegularCustomer, PremiumCustomer, CustomerType,
)
_ALLOWED_GLOBALS = {(cls.__module__, cls.__qualname__) for cls in _ALLOWED_CLASSES}

_COLLECTIONS = ("artists", "songs", "playlists", "customers")


class CatalogUnpickler(pickle.Unpickler):
    """Unpickler restricted to catalog entity classes."""

    def find_class(self, module: str, name: str) -> Any:
        if (module, name) in _ALLOWED_GLOBALS:
            return super().find_class(module, name)
        raise pickle.UnpicklingError(f"Global {module}.{name} is not allowed in a catalog snapshot")


class BinarySnapshotCodec:
    """Serialize entity collections into opaque binary blobs and back."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def dumps(self, entities: List[Any]) -> bytes:
        """Encode a whole collection in a single pass."""
        return pickle.dumps(list(entities), protocol=self.protocol)

    def loads(self, blob: bytes, entity_type: Optional[Type] = None) -> List[Any]:
        """Decode a collection written by ``dumps``.

        Raises:
            FormatError: If the blob is corrupt, not a collection, or holds
                entities of the wrong type.
        """
        entities = self._unpickle(blob)
        self._check_collection(entities, entity_type, "collection")
        logger.debug(f"Decoded {len(entities)} entities from binary snapshot")
        return entities

    def dumps_catalog(self, snapshot: CatalogSnapshot) -> bytes:
        """Encode all four collections together so identity holds across them."""
        payload = {name: list(getattr(snapshot, name)) for name in _COLLECTIONS}
        return pickle.dumps(payload, protocol=self.protocol)

    def loads_catalog(self, blob: bytes) -> CatalogSnapshot:
        """Decode a blob written by ``dumps_catalog``."""
        payload = self._unpickle(blob)
        if not isinstance(payload, dict) or set(payload) != set(_COLLECTIONS):
            raise FormatError("Binary catalog snapshot has an unexpected layout")

        expected: Dict[str, Type] = {
            "artists": Artist,
            "songs": Song,
            "playlists": PlayList,
            "customers": Customer,
        }
        for name, entity_type in expected.items():
            self._check_collection(payload[name], entity_type, name)
        return CatalogSnapshot(**payload)

    def _unpickle(self, blob: bytes) -> Any:
        try:
            return CatalogUnpickler(io.BytesIO(blob)).load()
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError,
                IndexError, KeyError, TypeError, ValueError) as e:
            raise FormatError(f"Corrupt binary snapshot: {e}") from e

    @staticmethod
    def _check_collection(entities: Any, entity_type: Optional[Type], name: str) -> None:
        if not isinstance(entities, list):
            raise FormatError(f"Binary snapshot {name} is not a list")
        if entity_type is None:
            return
        for entity in entities:
            if not isinstance(entity, entity_type):
                raise FormatError(
                    f"Binary snapshot {name} holds a {type(entity).__name__}, "
                    f"expected {entity_type.__name__}"
                )
