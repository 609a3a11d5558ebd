from __future__ import annotations

from typing import List, Optional

import numpy as np
import pandas as pd

from layoffs.schema import BUSINESS_COLUMNS, ROW_NUM
from layoffs.utils import get_logger

logger = get_logger(__name__)


# ---------- Fingerprint ----------

def fingerprint(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.Series:
    """64-bit content hash of each row over ``columns``.

    Nulls hash to the same value, so two rows that are null in the same
    column still fall into one equality group.
    """
    cols = columns or BUSINESS_COLUMNS
    return pd.util.hash_pandas_object(df[cols], index=False)


def assign_row_numbers(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Number rows 1..N within each full-column equality group.

    Ties are broken by position in the frame (ingestion order), so the
    first occurrence of a group always gets ``row_num == 1``.
    """
    out = df.copy()
    fp = fingerprint(out, columns)
    out[ROW_NUM] = fp.groupby(fp.to_numpy(), sort=False).cumcount().to_numpy(dtype=np.int64) + 1
    return out


def find_duplicates(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Rows that ``remove_duplicates`` would delete."""
    ranked = df if ROW_NUM in df.columns else assign_row_numbers(df, columns)
    return ranked[ranked[ROW_NUM] > 1]


def remove_duplicates(df: pd.DataFrame) -> pd.DataFrame:
    if ROW_NUM not in df.columns:
        raise ValueError(f"remove_duplicates requires the '{ROW_NUM}' column; call assign_row_numbers first")
    keep_mask = (df[ROW_NUM] <= 1).to_numpy()
    out = df[keep_mask]
    logger.info("dedup.fingerprint: kept=%d from=%d", int(keep_mask.sum()), len(df))
    return out


def dedup(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    return remove_duplicates(assign_row_numbers(df, columns))
