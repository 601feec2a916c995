# pokedex/schemas.py
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field


# ---- Shared error model (for docs / consistency) ----
class ErrorResponse(BaseModel):
    error: str


# ---- Catalog grid ----
class PokemonCard(BaseModel):
    id: int
    number: str
    name: str
    types: List[str]
    image: str
    favorite: bool


class CatalogView(BaseModel):
    query: str
    type: str
    generation: str
    page: int
    page_size: int
    total: int
    max_page: int
    status: str
    ok: bool = True
    cards: List[PokemonCard] = []


# ---- /catalog/actions ----
class CatalogAction(BaseModel):
    action: Literal[
        "set_query",
        "set_category",
        "set_generation",
        "set_page_size",
        "next_page",
        "previous_page",
        "go_to_page",
    ]
    value: Optional[Union[int, str]] = None


# ---- /pokemon/{id_or_name} ----
class StatRow(BaseModel):
    name: str
    label: str
    value: Optional[int]
    percent: int


class PokemonDetail(BaseModel):
    id: int
    number: str
    name: str
    description: str
    image: str
    types: List[str]
    height_m: Optional[float]
    weight_kg: Optional[float]
    base_experience: Optional[int]
    abilities: List[str]
    stats: List[StatRow]
    favorite: bool


# ---- /types ----
class TypeOption(BaseModel):
    value: str
    label: str


# ---- /favorites ----
class FavoriteEntry(BaseModel):
    id: int
    number: str
    name: str
    sprite: str


class FavoritesView(BaseModel):
    ids: List[int]
    total: int
    shown: List[FavoriteEntry]


class FavoriteToggleResponse(BaseModel):
    id: int
    favorite: bool


# ---- /preferences ----
class Preferences(BaseModel):
    dark_mode: bool


class DarkModeUpdate(BaseModel):
    enabled: bool = Field(..., description="Turn dark mode on or off")
