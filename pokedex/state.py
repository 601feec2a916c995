"""
Filter state and the actions that change it.

The state is an immutable snapshot; `transition` is the only way to get a
new one. Any filter change starts over at page 1, page navigation keeps the
filters and stays within the last known result count.
"""

from dataclasses import dataclass, replace
from typing import Union

from pokedex.config import DEFAULT_PAGE_SIZE
from pokedex.pager import clamp_page, max_page_for


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    category: str = ""
    generation: str = ""
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    # Size of the last resolved id list, used to bound page navigation
    total: int = 0

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        if self.total < 0:
            raise ValueError("total must not be negative")

    @property
    def max_page(self) -> int:
        return max_page_for(self.total, self.page_size)


@dataclass(frozen=True)
class SetQuery:
    query: str


@dataclass(frozen=True)
class SetCategory:
    category: str


@dataclass(frozen=True)
class SetGeneration:
    generation: str


@dataclass(frozen=True)
class SetPageSize:
    page_size: int


@dataclass(frozen=True)
class NextPage:
    pass


@dataclass(frozen=True)
class PreviousPage:
    pass


@dataclass(frozen=True)
class GoToPage:
    page: int


@dataclass(frozen=True)
class Resolved:
    """A render finished resolving; records the result count."""

    total: int


Action = Union[SetQuery, SetCategory, SetGeneration, SetPageSize, NextPage, PreviousPage, GoToPage, Resolved]


def transition(state: FilterState, action: Action) -> FilterState:
    if isinstance(action, SetQuery):
        return replace(state, query=action.query.strip().lower(), page=1)
    if isinstance(action, SetCategory):
        return replace(state, category=action.category.strip().lower(), page=1)
    if isinstance(action, SetGeneration):
        return replace(state, generation=action.generation.strip(), page=1)
    if isinstance(action, SetPageSize):
        return replace(state, page_size=action.page_size, page=1)
    if isinstance(action, NextPage):
        if state.page < state.max_page:
            return replace(state, page=state.page + 1)
        return state
    if isinstance(action, PreviousPage):
        if state.page > 1:
            return replace(state, page=state.page - 1)
        return state
    if isinstance(action, GoToPage):
        return replace(state, page=clamp_page(action.page, state.max_page))
    if isinstance(action, Resolved):
        max_page = max_page_for(action.total, state.page_size)
        return replace(state, total=action.total, page=clamp_page(state.page, max_page))
    raise TypeError(f"Unknown action: {action!r}")
