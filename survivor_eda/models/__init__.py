"""Table schemas shared across the pipeline."""

from .schema import ELO, GAMES, JOIN_KEYS, LOOKUP, PICKS, TableSchema

__all__ = ["ELO", "GAMES", "JOIN_KEYS", "LOOKUP", "PICKS", "TableSchema"]
