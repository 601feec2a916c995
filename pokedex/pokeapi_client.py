import logging

import httpx

from pokedex.config import HTTP_TIMEOUT, POKEAPI_BASE_URL

logger = logging.getLogger(__name__)


class FetchFailure(Exception):
    """
    Any unsuccessful call to PokeAPI.

    `status` is the HTTP status code, or None when the request never got a
    response (connection error, timeout) or the body was not JSON.
    """

    def __init__(self, url: str, status: int | None = None, reason: str | None = None):
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"HTTP {status} for {url}"
        else:
            message = f"Request failed for {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotFound(FetchFailure):
    """PokeAPI answered 404 for the requested resource."""


class MalformedRecord(FetchFailure):
    """The response decoded fine but lacks fields a record cannot do without."""


def create_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """
    Build the shared AsyncClient.

    Tests pass an `httpx.MockTransport` to stand in for PokeAPI.
    """
    return httpx.AsyncClient(transport=transport, timeout=HTTP_TIMEOUT)


async def fetch_json(client: httpx.AsyncClient, url: str, params: dict | None = None):
    """
    GET a PokeAPI URL and return the parsed JSON body.

    Raises:
        NotFound: on 404.
        FetchFailure: on any other non-2xx status, transport error or
            undecodable body.
    """
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as e:
        raise FetchFailure(url, reason=str(e) or type(e).__name__) from e

    if not resp.is_success:
        logger.debug("GET %s returned %s", url, resp.status_code)
        if resp.status_code == 404:
            raise NotFound(url, status=404)
        raise FetchFailure(url, status=resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise FetchFailure(url, status=resp.status_code, reason="invalid JSON body") from e


async def fetch_pokemon(
    client: httpx.AsyncClient,
    id_or_name: int | str,
    base_url: str = POKEAPI_BASE_URL,
) -> dict:
    """
    Fetch a single Pokemon.

    Calls:
        GET {base_url}/pokemon/{id_or_name}
    """
    key = str(id_or_name).strip().lower()
    return await fetch_json(client, f"{base_url}/pokemon/{key}")


async def fetch_type_member_urls(
    client: httpx.AsyncClient,
    type_name: str,
    base_url: str = POKEAPI_BASE_URL,
) -> list[str]:
    """
    Return the resource URL of every Pokemon listed under a type.

    Calls:
        GET {base_url}/type/{type_name}

    Entries without a URL are skipped.
    """
    data = await fetch_json(client, f"{base_url}/type/{type_name.strip().lower()}")

    urls: list[str] = []
    for entry in data.get("pokemon", []):
        url = (entry.get("pokemon") or {}).get("url")
        if url:
            urls.append(url)
    return urls


async def fetch_all_types(
    client: httpx.AsyncClient,
    base_url: str = POKEAPI_BASE_URL,
) -> list[str]:
    """
    Fetches all available type names from PokeAPI.

    Over-fetch with a large limit to avoid pagination, since there are only
    ~20 types.
    """
    data = await fetch_json(client, f"{base_url}/type", params={"limit": 1000})

    names: list[str] = []
    for item in data.get("results", []):
        name = item.get("name")
        if name:
            names.append(name)
    return names


async def fetch_species(
    client: httpx.AsyncClient,
    pokemon_id: int,
    base_url: str = POKEAPI_BASE_URL,
) -> dict:
    """
    Fetch the species document (flavor text lives here, not on /pokemon).

    Calls:
        GET {base_url}/pokemon-species/{pokemon_id}
    """
    return await fetch_json(client, f"{base_url}/pokemon-species/{pokemon_id}")


def extract_id(url: str) -> int | None:
    """
    Pull the trailing numeric id out of a resource URL.

    URLs look like .../pokemon/25/ . Returns None if the last segment is not
    a number.
    """
    parts = [p for p in url.split("/") if p]
    if not parts or not parts[-1].isdecimal():
        return None
    return int(parts[-1])
