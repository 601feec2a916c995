import os

# Upstream data source
POKEAPI_BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2")

# Per-request timeout in seconds for upstream calls
HTTP_TIMEOUT = float(os.getenv("POKEDEX_HTTP_TIMEOUT", "10.0"))

# Connection string for the async DB engine holding favorites and preferences
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./pokedex.db")

# Highest national dex number considered part of the catalog.
# Type member lists also contain alternate forms (ids 10001+), these are dropped.
NATIONAL_DEX_MAX = int(os.getenv("POKEDEX_NATIONAL_DEX_MAX", "1017"))

DEFAULT_PAGE_SIZE = int(os.getenv("POKEDEX_PAGE_SIZE", "24"))
MAX_PAGE_SIZE = int(os.getenv("POKEDEX_MAX_PAGE_SIZE", "100"))

# Name search stops once this many matches are collected
TEXT_MATCH_CAP = int(os.getenv("POKEDEX_TEXT_MATCH_CAP", "200"))

# How many candidates the name search fetches at once (1 = strictly sequential)
TEXT_FETCH_BATCH = int(os.getenv("POKEDEX_TEXT_FETCH_BATCH", "8"))

# How many favorites the favorites panel shows
FAVORITES_DISPLAY_CAP = int(os.getenv("POKEDEX_FAVORITES_DISPLAY_CAP", "20"))

DARK_MODE_DEFAULT = os.getenv("POKEDEX_DARK_MODE_DEFAULT", "0").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("POKEDEX_LOG_LEVEL", "INFO")
