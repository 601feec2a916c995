import logging

from fastapi import Depends, FastAPI, Path, Request
from fastapi.responses import JSONResponse

from pokedex.config import DEFAULT_PAGE_SIZE, LOG_LEVEL, MAX_PAGE_SIZE, NATIONAL_DEX_MAX
from pokedex.db import AsyncSessionLocal, check_connection, engine, run_migrations
from pokedex.logger import configure_logging
from pokedex.pokeapi_client import FetchFailure, NotFound, create_client
from pokedex.schemas import (
    CatalogAction,
    CatalogView,
    DarkModeUpdate,
    ErrorResponse,
    FavoritesView,
    FavoriteToggleResponse,
    PokemonDetail,
    Preferences,
    TypeOption,
)
from pokedex.session import CatalogSession
from pokedex.state import (
    Action,
    FilterState,
    GoToPage,
    NextPage,
    PreviousPage,
    SetCategory,
    SetGeneration,
    SetPageSize,
    SetQuery,
)
from pokedex.storage import KeyValueStore
from pokedex.utils import parse_page_params

logger = logging.getLogger(__name__)

app = FastAPI(title="Pokédex Catalog Service")


@app.on_event("startup")
async def on_startup():
    """
    Application startup hook.

    Creates the settings table, then opens the catalog session (HTTP client,
    record cache, persisted favorites). A session already placed on
    app.state is left alone.
    """
    configure_logging(LOG_LEVEL)
    await run_migrations(engine)

    if getattr(app.state, "catalog", None) is None:
        store = KeyValueStore(AsyncSessionLocal)
        app.state.catalog = await CatalogSession.open(create_client(), store)
        logger.info("Catalog session ready (%d favorites)", len(app.state.catalog.favorites))


@app.on_event("shutdown")
async def on_shutdown():
    catalog = getattr(app.state, "catalog", None)
    if catalog is not None:
        await catalog.close()
    await engine.dispose()


def get_catalog(request: Request) -> CatalogSession:
    """
    FastAPI dependency that provides the catalog session.

    Usage in endpoints:
        async def some_endpoint(catalog: CatalogSession = Depends(get_catalog)):
            ...
    """
    return request.app.state.catalog


def to_action(req: CatalogAction) -> Action:
    """
    Map an action request onto a state action.

    Raises ValueError when the value does not fit the action.
    """
    if req.action == "next_page":
        return NextPage()
    if req.action == "previous_page":
        return PreviousPage()

    if req.action == "set_page_size":
        page_size = int(req.value)
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError("page size out of range")
        return SetPageSize(page_size)
    if req.action == "go_to_page":
        page = int(req.value)
        if page < 1:
            raise ValueError("page out of range")
        return GoToPage(page)

    text = "" if req.value is None else str(req.value)
    if req.action == "set_query":
        return SetQuery(text)
    if req.action == "set_category":
        return SetCategory(text)
    return SetGeneration(text)


@app.get("/health")
async def health_check():
    """
    Health endpoint.

    Checks:
    - App is running
    - Settings database is reachable (simple SELECT 1)
    """
    return {
        "status": "ok",
        "db": await check_connection(engine),
    }


@app.get(
    "/types",
    response_model=list[TypeOption],
    responses={502: {"model": ErrorResponse}},
)
async def list_types(catalog: CatalogSession = Depends(get_catalog)):
    """
    Options for the type filter: every type PokeAPI knows except
    'shadow' and 'unknown', alphabetically.

    Failure:
      502, { "error": "Failed to fetch Pokemon types" }
    """
    try:
        return await catalog.pipeline.type_options()
    except FetchFailure as e:
        logger.warning("Type list unavailable: %s", e)
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to fetch Pokemon types"},
        )


@app.get(
    "/pokemon",
    response_model=CatalogView,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def search_pokemon(
    q: str | None = None,
    type: str | None = None,
    gen: str | None = None,
    page: str | None = None,
    page_size: str | None = None,
    catalog: CatalogSession = Depends(get_catalog),
):
    """
    One page of the catalog for the given filters, without touching the
    session's own filter state.

    Query params:
      - q: name substring or exact dex number
      - type: Pokemon type, e.g. 'fire'
      - gen: generation '1'..'9'
      - page: optional, default 1, must be >= 1 (clamped to the last page)
      - page_size: optional, default 24, must be 1-100

    Error 400:
      { "error": "Invalid page or page_size parameter" }

    Error 502:
      { "error": "Failed to fetch Pokemon data" }
    """
    try:
        page_value, page_size_value = parse_page_params(
            page_str=page,
            page_size_str=page_size,
            default_page_size=DEFAULT_PAGE_SIZE,
            max_page_size=MAX_PAGE_SIZE,
        )
    except ValueError:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid page or page_size parameter"},
        )

    state = FilterState(
        query=(q or "").strip().lower(),
        category=(type or "").strip().lower(),
        generation=(gen or "").strip(),
        page=page_value,
        page_size=page_size_value,
    )

    try:
        result = await catalog.pipeline.build(state)
    except FetchFailure as e:
        logger.warning("Catalog page failed: %s", e)
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to fetch Pokemon data"},
        )
    return result.view


@app.get(
    "/pokemon/{id_or_name}",
    response_model=PokemonDetail,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def pokemon_detail(
    id_or_name: str,
    catalog: CatalogSession = Depends(get_catalog),
):
    """
    Detail view: record, English description, stats.

    Error 404:
      { "error": "Pokemon not found" }

    Error 502:
      { "error": "Failed to load details. Try again." }
    """
    try:
        return await catalog.pipeline.detail(id_or_name)
    except NotFound:
        return JSONResponse(
            status_code=404,
            content={"error": "Pokemon not found"},
        )
    except FetchFailure as e:
        logger.warning("Detail for %r failed: %s", id_or_name, e)
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to load details. Try again."},
        )


@app.get("/catalog", response_model=CatalogView)
async def current_catalog(catalog: CatalogSession = Depends(get_catalog)):
    """
    The session's current page. Renders once if nothing was rendered yet.
    """
    if catalog.view is None:
        return await catalog.refresh()
    return catalog.current_view()


@app.post(
    "/catalog/actions",
    response_model=CatalogView,
    responses={400: {"model": ErrorResponse}},
)
async def catalog_action(
    req: CatalogAction,
    catalog: CatalogSession = Depends(get_catalog),
):
    """
    Apply a filter or navigation action to the session and re-render.

    Errors while rendering do not fail the request: the returned view has
    ok=false, no cards and a generic status message.

    Error 400:
      { "error": "Invalid action value" }
    """
    try:
        action = to_action(req)
    except (TypeError, ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid action value"},
        )
    return await catalog.dispatch(action)


@app.get(
    "/favorites",
    response_model=FavoritesView,
    responses={502: {"model": ErrorResponse}},
)
async def list_favorites(catalog: CatalogSession = Depends(get_catalog)):
    """
    Favorite ids (ascending) plus the first 20 as list entries.

    Error 502:
      { "error": "Failed to fetch favorites" }
    """
    try:
        return await catalog.pipeline.favorites_view()
    except FetchFailure as e:
        logger.warning("Favorites list failed: %s", e)
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to fetch favorites"},
        )


@app.put("/favorites/{pokemon_id}", response_model=FavoriteToggleResponse)
async def add_favorite(
    pokemon_id: int = Path(..., ge=1, le=NATIONAL_DEX_MAX),
    catalog: CatalogSession = Depends(get_catalog),
):
    await catalog.add_favorite(pokemon_id)
    return {"id": pokemon_id, "favorite": True}


@app.delete("/favorites/{pokemon_id}", response_model=FavoriteToggleResponse)
async def remove_favorite(
    pokemon_id: int = Path(..., ge=1),
    catalog: CatalogSession = Depends(get_catalog),
):
    await catalog.remove_favorite(pokemon_id)
    return {"id": pokemon_id, "favorite": False}


@app.post("/favorites/{pokemon_id}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    pokemon_id: int = Path(..., ge=1, le=NATIONAL_DEX_MAX),
    catalog: CatalogSession = Depends(get_catalog),
):
    favorite = await catalog.toggle_favorite(pokemon_id)
    return {"id": pokemon_id, "favorite": favorite}


@app.delete("/favorites")
async def clear_favorites(catalog: CatalogSession = Depends(get_catalog)):
    await catalog.clear_favorites()
    return {"message": "Cleared favorites"}


@app.get("/preferences", response_model=Preferences)
async def get_preferences(catalog: CatalogSession = Depends(get_catalog)):
    return {"dark_mode": await catalog.dark_mode()}


@app.put("/preferences/dark-mode", response_model=Preferences)
async def set_dark_mode(
    req: DarkModeUpdate,
    catalog: CatalogSession = Depends(get_catalog),
):
    return {"dark_mode": await catalog.set_dark_mode(req.enabled)}
