import asyncio
import logging
import math
from dataclasses import dataclass

import httpx

from pokedex.cache import RecordCache
from pokedex.config import FAVORITES_DISPLAY_CAP, POKEAPI_BASE_URL
from pokedex.favorites import FavoritesStore
from pokedex.pager import paginate
from pokedex.pokeapi_client import NotFound, fetch_all_types, fetch_species
from pokedex.records import Pokemon, english_flavor_text
from pokedex.resolver import QueryResolver
from pokedex.schemas import (
    CatalogView,
    FavoriteEntry,
    FavoritesView,
    PokemonCard,
    PokemonDetail,
    StatRow,
    TypeOption,
)
from pokedex.state import FilterState, Resolved, transition

logger = logging.getLogger(__name__)

LOADING_STATUS = "Loading…"
EMPTY_STATUS = "No results."
ERROR_STATUS = "Something went wrong. Check your connection and try again."

# Types PokeAPI lists that no Pokemon actually has
HIDDEN_TYPES = ("shadow", "unknown")

DETAIL_STATS = (
    ("hp", "HP"),
    ("attack", "Attack"),
    ("defense", "Defense"),
    ("special-attack", "Sp. Atk"),
    ("special-defense", "Sp. Def"),
    ("speed", "Speed"),
)
# Rough ceiling of a base stat, used to scale the stat bars
STAT_BAR_MAX = 255


@dataclass(frozen=True)
class RenderResult:
    state: FilterState
    view: CatalogView


def status_for(total: int) -> str:
    return f"{total} result(s)" if total else EMPTY_STATUS


def placeholder_view(state: FilterState, status: str, ok: bool = True) -> CatalogView:
    """A view of `state` with no cards, used while loading and after errors."""
    return CatalogView(
        query=state.query,
        type=state.category,
        generation=state.generation,
        page=state.page,
        page_size=state.page_size,
        total=state.total,
        max_page=state.max_page,
        status=status,
        ok=ok,
        cards=[],
    )


class RenderPipeline:
    """
    Resolver -> Pager -> Cache -> view model.

    `build` does one pass and lets errors through. `render` is what the
    session uses: it turns errors into an empty grid with a generic status
    and drops results of renders that were overtaken by a newer one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: RecordCache,
        resolver: QueryResolver,
        favorites: FavoritesStore,
        *,
        favorites_cap: int = FAVORITES_DISPLAY_CAP,
        base_url: str = POKEAPI_BASE_URL,
    ):
        self.client = client
        self.cache = cache
        self.resolver = resolver
        self.favorites = favorites
        self.favorites_cap = favorites_cap
        self.base_url = base_url
        self._latest_token = 0

    def card(self, record: Pokemon) -> PokemonCard:
        return PokemonCard(
            id=record.id,
            number=record.number,
            name=record.name,
            types=list(record.types),
            image=record.image,
            favorite=self.favorites.has(record.id),
        )

    async def build(self, state: FilterState) -> RenderResult:
        ids = await self.resolver.resolve(state)
        state = transition(state, Resolved(len(ids)))
        page = paginate(ids, state.page, state.page_size)

        # Fetch details for what's on screen in parallel
        records = await asyncio.gather(*(self.cache.get(i) for i in page.ids))

        view = CatalogView(
            query=state.query,
            type=state.category,
            generation=state.generation,
            page=state.page,
            page_size=state.page_size,
            total=page.total,
            max_page=page.max_page,
            status=status_for(page.total),
            cards=[self.card(r) for r in records],
        )
        return RenderResult(state, view)

    async def render(self, state: FilterState) -> RenderResult | None:
        """
        Render `state`, or return None if a later render started meanwhile.
        """
        self._latest_token += 1
        token = self._latest_token

        try:
            result = await self.build(state)
        except Exception:
            logger.exception("Render failed for %s", state)
            # Nothing resolved, so the grid and its paging start over empty
            state = transition(state, Resolved(0))
            result = RenderResult(state, placeholder_view(state, ERROR_STATUS, ok=False))

        if token != self._latest_token:
            logger.debug("Discarding render %d, render %d is newer", token, self._latest_token)
            return None
        return result

    def sync_favorites(self, view: CatalogView) -> CatalogView:
        """Copy of `view` with the star on every card matching the favorites set."""
        cards = [c.model_copy(update={"favorite": self.favorites.has(c.id)}) for c in view.cards]
        return view.model_copy(update={"cards": cards})

    async def favorites_view(self) -> FavoritesView:
        ids = self.favorites.list()
        fetched = await asyncio.gather(*(self._favorite_record(i) for i in ids[: self.favorites_cap]))
        records = [r for r in fetched if r is not None]
        return FavoritesView(
            ids=ids,
            total=len(ids),
            shown=[
                FavoriteEntry(id=r.id, number=r.number, name=r.name, sprite=r.sprite)
                for r in sorted(records, key=lambda r: r.id)
            ],
        )

    async def _favorite_record(self, pokemon_id: int) -> Pokemon | None:
        try:
            return await self.cache.get(pokemon_id)
        except NotFound:
            logger.warning("Favorite #%d is unknown upstream, not shown", pokemon_id)
            return None

    async def detail(self, id_or_name: int | str) -> PokemonDetail:
        record = await self.cache.get(id_or_name)
        species = await fetch_species(self.client, record.id, base_url=self.base_url)

        stats = []
        for name, label in DETAIL_STATS:
            value = record.stat(name)
            percent = 0
            if value is not None:
                percent = min(100, math.floor(value / STAT_BAR_MAX * 100 + 0.5))
            stats.append(StatRow(name=name, label=label, value=value, percent=percent))

        return PokemonDetail(
            id=record.id,
            number=record.number,
            name=record.name,
            description=english_flavor_text(species),
            image=record.image,
            types=list(record.types),
            height_m=record.height / 10 if record.height is not None else None,
            weight_kg=record.weight / 10 if record.weight is not None else None,
            base_experience=record.base_experience,
            abilities=list(record.abilities),
            stats=stats,
            favorite=self.favorites.has(record.id),
        )

    async def type_options(self) -> list[TypeOption]:
        names = await fetch_all_types(self.client, base_url=self.base_url)
        return [
            TypeOption(value=n, label=n.capitalize())
            for n in sorted(n for n in names if n not in HIDDEN_TYPES)
        ]
