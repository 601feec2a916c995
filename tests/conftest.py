import asyncio
import os
import tempfile

# Keep the module-level engine in pokedex.db away from the working directory
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(), 'pokedex.db')}",
)

import httpx
import pytest

from pokedex.db import create_engine, create_session_factory, run_migrations
from pokedex.storage import KeyValueStore

API = "https://pokeapi.co/api/v2"

NAMES = {
    1: "bulbasaur",
    2: "ivysaur",
    3: "venusaur",
    4: "charmander",
    5: "charmeleon",
    6: "charizard",
    7: "squirtle",
    25: "pikachu",
    37: "vulpix",
    38: "ninetales",
    58: "growlithe",
    59: "arcanine",
    77: "ponyta",
    78: "rapidash",
    126: "magmar",
    155: "cyndaquil",
}

FIRE = [4, 5, 6, 37, 38, 58, 59, 77, 78, 126]

TYPES = {
    # 155 is generation 2, 10034 is Mega Charizard X (an alternate form)
    "fire": FIRE + [155, 10034],
    "grass": [1, 2, 3],
    "poison": [1, 2, 3],
    "electric": [25],
    "water": [7],
}

STATS = {
    "hp": 39,
    "attack": 52,
    "defense": 43,
    "special-attack": 60,
    "special-defense": 50,
    "speed": 65,
}

CHARMANDER_FLAVOR = (
    "Obviously prefers\nhot places.\fWhen it rains, steam\nis said to spout\nfrom the tip of its\ntail."
)


class FakePokeApi:
    """
    In-memory stand-in for PokeAPI, served through httpx.MockTransport.

    Every id up to `universe` exists; ids without a real name in NAMES are
    called 'mon-{id}'. Ids in `missing` answer 404, ids in `failing` 500.
    """

    def __init__(self, universe: int = 151, names: dict | None = None, types: dict | None = None):
        self.names = {i: f"mon-{i}" for i in range(1, universe + 1)}
        self.names.update(NAMES if names is None else names)
        self.types = TYPES if types is None else types
        self.missing: set[int] = set()
        self.failing: set[int] = set()
        self.failing_types: set[str] = set()
        self.calls: list[str] = []

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def count(self, resource: str) -> int:
        """Number of requests made to a resource, e.g. 'pokemon' or 'type'."""
        return sum(1 for path in self.calls if path.split("/")[0] == resource)

    def handler(self, request: httpx.Request) -> httpx.Response:
        segments = [s for s in request.url.path.split("/") if s]
        if segments[-1] == "type":
            self.calls.append("type")
            return self._type_list()

        resource, key = segments[-2], segments[-1]
        self.calls.append(f"{resource}/{key}")
        if resource == "pokemon":
            return self._pokemon(key)
        if resource == "type":
            return self._type(key)
        if resource == "pokemon-species":
            return self._species(int(key))
        return httpx.Response(404, json={"detail": "Not found."})

    def _lookup(self, key: str) -> int | None:
        if key.isdigit():
            return int(key) if int(key) in self.names else None
        for pokemon_id, name in self.names.items():
            if name == key:
                return pokemon_id
        return None

    def _pokemon(self, key: str) -> httpx.Response:
        pokemon_id = self._lookup(key)
        if pokemon_id is None or pokemon_id in self.missing:
            return httpx.Response(404, text="Not Found")
        if pokemon_id in self.failing:
            return httpx.Response(500, text="Internal Server Error")
        return httpx.Response(200, json=self.pokemon_document(pokemon_id))

    def pokemon_document(self, pokemon_id: int) -> dict:
        member_of = [t for t, ids in self.types.items() if pokemon_id in ids]
        return {
            "id": pokemon_id,
            "name": self.names[pokemon_id],
            "height": 6,
            "weight": 85,
            "base_experience": 62,
            "types": [
                {"slot": slot, "type": {"name": t, "url": f"{API}/type/{t}/"}}
                for slot, t in enumerate(member_of, start=1)
            ],
            "stats": [
                {"base_stat": value, "effort": 0, "stat": {"name": name, "url": ""}}
                for name, value in STATS.items()
            ],
            "abilities": [{"ability": {"name": "blaze"}, "is_hidden": False}],
            "sprites": {
                "front_default": f"https://img.test/sprites/{pokemon_id}.png",
                "other": {
                    "official-artwork": {
                        "front_default": f"https://img.test/artwork/{pokemon_id}.png",
                    },
                },
            },
        }

    def _type(self, name: str) -> httpx.Response:
        if name in self.failing_types:
            return httpx.Response(503, text="Service Unavailable")
        if name not in self.types:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(
            200,
            json={
                "name": name,
                "pokemon": [
                    {
                        "slot": 1,
                        "pokemon": {
                            "name": self.names.get(i, f"form-{i}"),
                            "url": f"{API}/pokemon/{i}/",
                        },
                    }
                    for i in self.types[name]
                ],
            },
        )

    def _type_list(self) -> httpx.Response:
        names = list(self.types) + ["shadow", "unknown"]
        return httpx.Response(
            200,
            json={
                "count": len(names),
                "results": [{"name": n, "url": f"{API}/type/{n}/"} for n in names],
            },
        )

    def _species(self, pokemon_id: int) -> httpx.Response:
        if pokemon_id not in self.names:
            return httpx.Response(404, text="Not Found")
        entries = [{"flavor_text": "ほのおの ポケモン。", "language": {"name": "ja"}}]
        if pokemon_id == 4:
            entries.append({"flavor_text": CHARMANDER_FLAVOR, "language": {"name": "en"}})
        return httpx.Response(200, json={"id": pokemon_id, "flavor_text_entries": entries})


@pytest.fixture
def api() -> FakePokeApi:
    return FakePokeApi()


@pytest.fixture
def store(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'settings.db'}")
    asyncio.run(run_migrations(engine, max_retries=1))
    yield KeyValueStore(create_session_factory(engine))
    asyncio.run(engine.dispose())
