from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pokedex.config import DARK_MODE_DEFAULT
from pokedex.models import Setting

FAVORITES_KEY = "pokedex:favs"
DARK_MODE_KEY = "pokedex:dark"


class KeyValueStore:
    """String key/value pairs persisted in the 'settings' table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self.session_factory() as session:
            result = await session.execute(select(Setting.value).where(Setting.key == key))
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self.session_factory() as session:
            await session.merge(Setting(key=key, value=value))
            await session.commit()


async def load_dark_mode(store: KeyValueStore, default: bool = DARK_MODE_DEFAULT) -> bool:
    saved = await store.get(DARK_MODE_KEY)
    if saved is None:
        return default
    return saved == "1"


async def save_dark_mode(store: KeyValueStore, enabled: bool) -> None:
    await store.set(DARK_MODE_KEY, "1" if enabled else "0")
