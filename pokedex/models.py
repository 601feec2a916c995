from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, Text


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    SQLAlchemy uses this to keep track of tables and mappings.
    """
    pass


class Setting(Base):
    """
    ORM model for the 'settings' table.

    A plain key/value table for the little state the catalog keeps between
    sessions:
    - pokedex:favs (JSON array of favorite ids)
    - pokedex:dark ("1" or "0")
    """
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
