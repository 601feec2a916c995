import asyncio
import logging
import re
from typing import Iterable

import httpx

from pokedex.cache import RecordCache
from pokedex.config import NATIONAL_DEX_MAX, POKEAPI_BASE_URL, TEXT_FETCH_BATCH, TEXT_MATCH_CAP
from pokedex.generations import generation_range
from pokedex.pokeapi_client import FetchFailure, extract_id, fetch_type_member_urls
from pokedex.state import FilterState

logger = logging.getLogger(__name__)

_NUMERIC_QUERY = re.compile(r"[0-9]+")


class QueryResolver:
    """
    Turns a FilterState into the ascending list of matching Pokemon ids.

    Filters apply in a fixed order:

    1. Base set. A type filter is evaluated by PokeAPI (one call to
       /type/{name}); without one the base set is 1..universe.
    2. Generation. Intersect with the generation's id range.
    3. Text. An all-digit query is an exact id lookup. Anything else is a
       case-insensitive substring match on names, which needs each
       candidate's record: candidates are fetched through the cache in
       ascending id order, `batch_size` at a time, and the scan stops once
       `match_cap` names matched. Candidates that fail to load are skipped.

    Because batches are consumed in ascending order, the result does not
    depend on `batch_size`: it is always the first `match_cap` matches by id.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: RecordCache,
        *,
        universe: int = NATIONAL_DEX_MAX,
        match_cap: int = TEXT_MATCH_CAP,
        batch_size: int = TEXT_FETCH_BATCH,
        base_url: str = POKEAPI_BASE_URL,
    ):
        if match_cap < 1:
            raise ValueError("match_cap must be at least 1")
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.cache = cache
        self.universe = universe
        self.match_cap = match_cap
        self.batch_size = batch_size
        self.base_url = base_url

    async def resolve(self, state: FilterState) -> list[int]:
        ids = await self.base_ids(state.category)

        if state.generation:
            start, end = generation_range(state.generation, self.universe)
            ids = [i for i in ids if start <= i <= end]

        query = state.query.strip()
        if query:
            ids = await self.filter_by_query(ids, query)

        return sorted(set(ids))

    async def base_ids(self, category: str) -> list[int]:
        if not category:
            return list(range(1, self.universe + 1))

        urls = await fetch_type_member_urls(self.client, category, base_url=self.base_url)
        ids = set()
        for url in urls:
            pokemon_id = extract_id(url)
            # Alternate forms are numbered 10001+, outside the national dex
            if pokemon_id is not None and 1 <= pokemon_id <= self.universe:
                ids.add(pokemon_id)
        return sorted(ids)

    async def filter_by_query(self, ids: Iterable[int], query: str) -> list[int]:
        q = query.strip().lower()
        candidates = sorted(set(ids))

        if _NUMERIC_QUERY.fullmatch(q):
            wanted = int(q)
            return [wanted] if wanted in candidates else []

        matches: list[int] = []
        for start in range(0, len(candidates), self.batch_size):
            batch = candidates[start:start + self.batch_size]
            names = await asyncio.gather(*(self._name_of(i) for i in batch))
            for pokemon_id, name in zip(batch, names):
                if name is not None and q in name:
                    matches.append(pokemon_id)
                    if len(matches) >= self.match_cap:
                        logger.debug("Name search %r hit the cap of %d", q, self.match_cap)
                        return matches
        return matches

    async def _name_of(self, pokemon_id: int) -> str | None:
        try:
            record = await self.cache.get(pokemon_id)
        except FetchFailure as e:
            logger.debug("Skipping #%d in name search: %s", pokemon_id, e)
            return None
        return record.name.lower()
