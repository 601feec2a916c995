from pydantic import BaseModel, ConfigDict


class Pokemon(BaseModel):
    """
    A fetched Pokemon record.

    Frozen: once the cache stores a record it is shared by every caller, so
    nobody may mutate it. Only the fields the catalog shows are kept from
    the (very large) PokeAPI document.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    types: tuple[str, ...] = ()
    # (stat name, base value) in PokeAPI order
    stats: tuple[tuple[str, int], ...] = ()
    image: str = ""
    sprite: str = ""
    height: int | None = None
    weight: int | None = None
    base_experience: int | None = None
    abilities: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict) -> "Pokemon":
        """
        Build a record from a raw /pokemon/{id} document.

        Raises KeyError or ValueError when id or name is missing; every
        other field falls back to an empty default.
        """
        pokemon_id = int(data["id"])
        name = str(data["name"]).lower()

        types = tuple(
            t["type"]["name"]
            for t in sorted(data.get("types") or [], key=lambda t: t.get("slot", 0))
            if (t.get("type") or {}).get("name")
        )
        stats = tuple(
            (s["stat"]["name"], int(s.get("base_stat") or 0))
            for s in data.get("stats") or []
            if (s.get("stat") or {}).get("name")
        )
        abilities = tuple(
            a["ability"]["name"]
            for a in data.get("abilities") or []
            if (a.get("ability") or {}).get("name")
        )

        sprites = data.get("sprites") or {}
        artwork = ((sprites.get("other") or {}).get("official-artwork") or {}).get("front_default")
        front = sprites.get("front_default")

        return cls(
            id=pokemon_id,
            name=name,
            types=types,
            stats=stats,
            # Cards prefer the large artwork, the favorites list the small sprite
            image=artwork or front or "",
            sprite=front or artwork or "",
            height=data.get("height"),
            weight=data.get("weight"),
            base_experience=data.get("base_experience"),
            abilities=abilities,
        )

    def stat(self, name: str) -> int | None:
        for stat_name, value in self.stats:
            if stat_name == name:
                return value
        return None

    @property
    def number(self) -> str:
        """Dex number as shown on cards, e.g. #025."""
        return f"#{self.id:03d}"


def english_flavor_text(species: dict) -> str:
    """
    First English flavor text of a species document, flattened to one line.

    PokeAPI keeps the games' original line breaks and form feeds.
    """
    for entry in species.get("flavor_text_entries") or []:
        if (entry.get("language") or {}).get("name") == "en" and entry.get("flavor_text"):
            return entry["flavor_text"].replace("\f", " ").replace("\n", " ")
    return "No description."
