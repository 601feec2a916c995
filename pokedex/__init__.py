"""Pokédex catalog service: filtering, paging and favorites over PokeAPI."""

__version__ = "0.1.0"
