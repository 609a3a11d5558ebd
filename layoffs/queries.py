"""Read-only queries for looking at the table before and between fixes.

Nothing in here changes a frame; they are the checks an operator runs to
decide which collapse and strip rules the config needs.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from layoffs.schema import TEXT_COLUMNS
from layoffs.stages.dedup import find_duplicates
from layoffs.stages.prune import VALUE_COLUMNS, unusable_mask


def distinct_values(df: pd.DataFrame, column: str) -> List[Any]:
    """Sorted distinct values of ``column``, null last if present."""
    col = df[column]
    vals = sorted(col.dropna().unique())
    if col.isna().any():
        vals.append(None)
    return vals


def rows_matching(df: pd.DataFrame, column: str, pattern: str, *, prefix: bool = False) -> pd.DataFrame:
    if prefix:
        mask = df[column].str.startswith(pattern)
    else:
        mask = df[column] == pattern
    return df[mask.fillna(False).astype(bool)]


def missing_values(df: pd.DataFrame, column: str = "industry") -> pd.DataFrame:
    """Rows where ``column`` is null or an empty string."""
    col = df[column]
    return df[(col.isna() | (col == "").fillna(False)).astype(bool)]


def unusable_rows(df: pd.DataFrame, columns: Iterable[str] = VALUE_COLUMNS) -> pd.DataFrame:
    return df[unusable_mask(df, columns)]


def inspect_table(df: pd.DataFrame, columns: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    cols = list(columns) if columns else [c for c in TEXT_COLUMNS if c not in ("date", "percentage_laid_off")]
    return {
        "rows": int(len(df)),
        "duplicates": int(len(find_duplicates(df))),
        "missing_industry": int(len(missing_values(df, "industry"))),
        "unusable": int(len(unusable_rows(df))),
        "distinct": {c: distinct_values(df, c) for c in cols},
    }
