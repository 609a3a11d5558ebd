from __future__ import annotations

from typing import Dict

import pandas as pd

from layoffs.errors import PreconditionError
from layoffs.utils import get_logger

logger = get_logger(__name__)


class Catalog:
    """Named tables a cleaning run works against.

    Tables are plain DataFrames. ``create`` refuses to overwrite an existing
    name; ``replace`` is the only way to change a table once it exists.
    """

    def __init__(self) -> None:
        self._tables: Dict[str, pd.DataFrame] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def get(self, name: str) -> pd.DataFrame:
        try:
            return self._tables[name]
        except KeyError:
            raise PreconditionError(f"Table '{name}' does not exist") from None

    def create(self, name: str, df: pd.DataFrame) -> pd.DataFrame:
        if name in self._tables:
            raise PreconditionError(f"Table '{name}' already exists")
        self._tables[name] = df
        logger.debug("catalog.create: table=%s rows=%d", name, len(df))
        return df

    def replace(self, name: str, df: pd.DataFrame) -> pd.DataFrame:
        if name not in self._tables:
            raise PreconditionError(f"Table '{name}' does not exist")
        self._tables[name] = df
        return df
