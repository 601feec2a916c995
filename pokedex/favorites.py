import json
import logging

from pokedex.storage import FAVORITES_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class FavoritesStore:
    """
    The set of favorite Pokemon ids.

    Reads (`has`, `list`) use the in-memory set. Every mutation writes the
    whole set back to the key/value store as a JSON array before returning.
    """

    def __init__(self, store: KeyValueStore, ids: set[int] | None = None):
        self.store = store
        self._ids: set[int] = set(ids or ())

    @classmethod
    async def load(cls, store: KeyValueStore) -> "FavoritesStore":
        raw = await store.get(FAVORITES_KEY)
        ids: set[int] = set()
        if raw:
            try:
                ids = {int(i) for i in json.loads(raw)}
            except (TypeError, ValueError):
                logger.warning("Ignoring unreadable favorites entry: %r", raw)
        return cls(store, ids)

    def has(self, pokemon_id: int) -> bool:
        return pokemon_id in self._ids

    def list(self) -> list[int]:
        return sorted(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    async def add(self, pokemon_id: int) -> None:
        await self._replace(self._ids | {pokemon_id})

    async def remove(self, pokemon_id: int) -> None:
        await self._replace(self._ids - {pokemon_id})

    async def toggle(self, pokemon_id: int) -> bool:
        """Flip membership; returns True if the id is now a favorite."""
        if pokemon_id in self._ids:
            await self.remove(pokemon_id)
            return False
        await self.add(pokemon_id)
        return True

    async def clear(self) -> None:
        await self._replace(set())

    async def _replace(self, ids: set[int]) -> None:
        # Memory only changes once the write went through
        await self.store.set(FAVORITES_KEY, json.dumps(sorted(ids)))
        self._ids = ids
