"""Column layout of the layoffs table."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import pandas as pd

BUSINESS_COLUMNS: List[str] = [
    "company",
    "location",
    "industry",
    "total_laid_off",
    "percentage_laid_off",
    "date",
    "stage",
    "country",
    "funds_raised_millions",
]

INT_COLUMNS: List[str] = ["total_laid_off", "funds_raised_millions"]
TEXT_COLUMNS: List[str] = [c for c in BUSINESS_COLUMNS if c not in INT_COLUMNS]

# transient rank within an equality group, lives from dedup until pruning
ROW_NUM = "row_num"


def ensure_columns(df: pd.DataFrame, columns: Iterable[str] = BUSINESS_COLUMNS) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns: {missing}")


def _to_int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    s = str(value).strip()
    if not s:
        return None
    return int(s)


def coerce_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    """Cast business columns to nullable ``string`` / ``Int64`` dtypes.

    Text columns keep empty strings as-is. Integer columns treat empty or
    whitespace-only cells as null; any other non-integer value raises
    ``ValueError``.
    """
    ensure_columns(df)
    out = df.copy()
    for col in TEXT_COLUMNS:
        out[col] = out[col].astype("string")
    for col in INT_COLUMNS:
        try:
            values = [_to_int(v) for v in out[col].tolist()]
        except ValueError as e:
            raise ValueError(f"Column '{col}' holds non-integer values: {e}") from e
        out[col] = pd.array(values, dtype="Int64")
    return out
