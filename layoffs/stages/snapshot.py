from __future__ import annotations

import pandas as pd

from layoffs.catalog import Catalog
from layoffs.errors import PreconditionError
from layoffs.utils import get_logger

logger = get_logger(__name__)


def snapshot(catalog: Catalog, source: str, target: str) -> pd.DataFrame:
    """Copy table ``source`` verbatim into a new table ``target``.

    Raises ``PreconditionError`` when ``target`` is already taken or
    ``source`` is missing; nothing is written in either case.
    """
    src = catalog.get(source)
    if target in catalog:
        raise PreconditionError(f"Table '{target}' already exists; snapshot needs a fresh name")
    copy = src.copy(deep=True)
    catalog.create(target, copy)
    logger.info("snapshot: %s -> %s rows=%d", source, target, len(copy))
    return copy
