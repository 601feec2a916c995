import asyncio
import logging

import httpx
from pydantic import ValidationError

from pokedex.config import POKEAPI_BASE_URL
from pokedex.pokeapi_client import MalformedRecord, fetch_pokemon
from pokedex.records import Pokemon

logger = logging.getLogger(__name__)


class RecordCache:
    """
    Memo of fetched Pokemon, keyed by id and by name.

    A record is stored under the key it was requested with, its numeric id
    and its lowercase name, all pointing at the same object. Entries live as
    long as the cache: the catalog is bounded (~1000 entries) so there is no
    eviction.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str = POKEAPI_BASE_URL):
        self.client = client
        self.base_url = base_url
        self._records: dict[str, Pokemon] = {}
        self._pending: dict[str, asyncio.Future] = {}

    @staticmethod
    def _key(id_or_name: int | str) -> str:
        return str(id_or_name).strip().lower()

    def __contains__(self, id_or_name: int | str) -> bool:
        return self._key(id_or_name) in self._records

    def __len__(self) -> int:
        """Number of distinct records held."""
        return len({id(r) for r in self._records.values()})

    def peek(self, id_or_name: int | str) -> Pokemon | None:
        """Cached record or None, never touches the network."""
        return self._records.get(self._key(id_or_name))

    async def get(self, id_or_name: int | str) -> Pokemon:
        """
        Return the record for an id or name, fetching it on first use.

        Concurrent calls for the same key share a single request.

        Raises:
            NotFound: PokeAPI does not know the id/name.
            FetchFailure: any other upstream failure. Failures are not cached.
        """
        key = self._key(id_or_name)
        record = self._records.get(key)
        if record is not None:
            return record

        pending = self._pending.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._load(key))
            self._pending[key] = pending
            pending.add_done_callback(lambda _: self._pending.pop(key, None))
        return await asyncio.shield(pending)

    async def _load(self, key: str) -> Pokemon:
        data = await fetch_pokemon(self.client, key, base_url=self.base_url)
        try:
            fetched = Pokemon.from_api(data)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise MalformedRecord(f"{self.base_url}/pokemon/{key}", reason=str(e)) from e

        # Another key may have loaded the same record meanwhile, keep the first
        record = self._records.get(str(fetched.id)) or fetched
        self._records[key] = record
        self._records[str(record.id)] = record
        self._records[record.name] = record
        logger.debug("Cached %s (%s)", record.name, record.id)
        return record
