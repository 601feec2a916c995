import httpx

from pokedex.cache import RecordCache
from pokedex.config import (
    DEFAULT_PAGE_SIZE,
    FAVORITES_DISPLAY_CAP,
    NATIONAL_DEX_MAX,
    POKEAPI_BASE_URL,
    TEXT_FETCH_BATCH,
    TEXT_MATCH_CAP,
)
from pokedex.favorites import FavoritesStore
from pokedex.pipeline import LOADING_STATUS, RenderPipeline, placeholder_view
from pokedex.resolver import QueryResolver
from pokedex.schemas import CatalogView
from pokedex.state import Action, FilterState, transition
from pokedex.storage import KeyValueStore, load_dark_mode, save_dark_mode


class CatalogSession:
    """
    Everything one user of the catalog works with.

    Owns the record cache (so its lifetime is the session's), the current
    filter state and the last view that was actually applied.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: KeyValueStore,
        favorites: FavoritesStore,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        universe: int = NATIONAL_DEX_MAX,
        match_cap: int = TEXT_MATCH_CAP,
        batch_size: int = TEXT_FETCH_BATCH,
        favorites_cap: int = FAVORITES_DISPLAY_CAP,
        base_url: str = POKEAPI_BASE_URL,
    ):
        self.client = client
        self.store = store
        self.favorites = favorites
        self.cache = RecordCache(client, base_url=base_url)
        self.resolver = QueryResolver(
            client,
            self.cache,
            universe=universe,
            match_cap=match_cap,
            batch_size=batch_size,
            base_url=base_url,
        )
        self.pipeline = RenderPipeline(
            client,
            self.cache,
            self.resolver,
            favorites,
            favorites_cap=favorites_cap,
            base_url=base_url,
        )
        self.state = FilterState(page_size=page_size)
        self.view: CatalogView | None = None

    @classmethod
    async def open(cls, client: httpx.AsyncClient, store: KeyValueStore, **kwargs) -> "CatalogSession":
        favorites = await FavoritesStore.load(store)
        return cls(client, store, favorites, **kwargs)

    def current_view(self) -> CatalogView:
        if self.view is None:
            return placeholder_view(self.state, LOADING_STATUS)
        return self.view

    async def dispatch(self, action: Action) -> CatalogView:
        self.state = transition(self.state, action)
        return await self.refresh()

    async def refresh(self) -> CatalogView:
        result = await self.pipeline.render(self.state)
        if result is not None:
            self.state = result.state
            # Favorites may have changed while the page was loading
            self.view = self.pipeline.sync_favorites(result.view)
        return self.current_view()

    async def toggle_favorite(self, pokemon_id: int) -> bool:
        favorite = await self.favorites.toggle(pokemon_id)
        self._sync_favorites()
        return favorite

    async def add_favorite(self, pokemon_id: int) -> None:
        await self.favorites.add(pokemon_id)
        self._sync_favorites()

    async def remove_favorite(self, pokemon_id: int) -> None:
        await self.favorites.remove(pokemon_id)
        self._sync_favorites()

    async def clear_favorites(self) -> None:
        await self.favorites.clear()
        self._sync_favorites()

    def _sync_favorites(self) -> None:
        if self.view is not None:
            self.view = self.pipeline.sync_favorites(self.view)

    async def dark_mode(self) -> bool:
        return await load_dark_mode(self.store)

    async def set_dark_mode(self, enabled: bool) -> bool:
        await save_dark_mode(self.store, enabled)
        return enabled

    async def close(self) -> None:
        await self.client.aclose()
