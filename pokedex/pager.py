import math
from typing import NamedTuple, Sequence


class Page(NamedTuple):
    ids: list[int]
    total: int
    max_page: int


def max_page_for(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int, max_page: int) -> int:
    return min(max(1, page), max(1, max_page))


def paginate(ids: Sequence[int], page: int, page_size: int) -> Page:
    """
    Slice one page out of a resolved id list.

    Pages are 1-based. A page past the end (or before the start) is empty;
    callers clamp with `clamp_page` first if they want the last page instead.
    """
    total = len(ids)
    max_page = max_page_for(total, page_size)
    if page < 1:
        return Page([], total, max_page)

    start = (page - 1) * page_size
    return Page(list(ids[start:start + page_size]), total, max_page)
