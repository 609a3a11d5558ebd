from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
import pandas as pd

from layoffs.schema import ROW_NUM
from layoffs.utils import get_logger

logger = get_logger(__name__)

VALUE_COLUMNS = ("total_laid_off", "percentage_laid_off")


def unusable_mask(df: pd.DataFrame, columns: Iterable[str] = VALUE_COLUMNS) -> np.ndarray:
    """Rows where every one of ``columns`` is null."""
    return df[list(columns)].isna().all(axis=1).to_numpy()


def drop_unusable_rows(df: pd.DataFrame, columns: Iterable[str] = VALUE_COLUMNS) -> Tuple[pd.DataFrame, int]:
    mask = unusable_mask(df, columns)
    deleted = int(np.count_nonzero(mask))
    out = df[~mask]
    logger.info("prune.rows: deleted=%d kept=%d columns=%s", deleted, len(out), list(columns))
    return out, deleted


def drop_helper_columns(df: pd.DataFrame, columns: Iterable[str] = (ROW_NUM,)) -> pd.DataFrame:
    present = [c for c in columns if c in df.columns]
    logger.info("prune.columns: dropped=%s", present)
    return df.drop(columns=present)
