from pokedex.config import NATIONAL_DEX_MAX

# Inclusive national dex ranges introduced by each generation
GENERATION_RANGES: dict[str, tuple[int, int]] = {
    "1": (1, 151),
    "2": (152, 251),
    "3": (252, 386),
    "4": (387, 493),
    "5": (494, 649),
    "6": (650, 721),
    "7": (722, 809),
    "8": (810, 898),
    "9": (899, 1017),
}


def generation_range(token: str | None, universe: int = NATIONAL_DEX_MAX) -> tuple[int, int]:
    """
    Inclusive (start, end) id range for a generation token.

    An empty or unknown token means the whole catalog, (1, universe).
    """
    return GENERATION_RANGES.get((token or "").strip(), (1, universe))
