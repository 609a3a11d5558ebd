from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from layoffs.schema import BUSINESS_COLUMNS, coerce_dtypes
from layoffs.utils import get_logger

logger = get_logger(__name__)

DEFAULT_NULL_TOKENS = ["NULL"]


def _load_csv(source_cfg: Dict[str, Any]) -> pd.DataFrame:
    null_tokens = source_cfg.get("null_tokens", DEFAULT_NULL_TOKENS)
    # everything as text: empty strings survive as the "unknown" sentinel
    df = pd.read_csv(
        source_cfg["path"],
        dtype=str,
        keep_default_na=False,
        na_values=null_tokens,
        encoding=source_cfg.get("encoding", "utf-8"),
    )
    return df


def load_source(source_cfg: Dict[str, Any]) -> pd.DataFrame:
    """Load the raw layoffs table described by ``source_cfg``."""
    t = source_cfg.get("type", "csv")
    if t == "csv":
        df = _load_csv(source_cfg)
    else:
        raise ValueError(f"Unknown source type: {t}")

    df = coerce_dtypes(df)
    extra = [c for c in df.columns if c not in BUSINESS_COLUMNS]
    if extra:
        logger.info("source: ignoring extra columns=%s", extra)
        df = df[BUSINESS_COLUMNS]
    logger.info("source: loaded rows=%d from=%s", len(df), source_cfg.get("path"))
    return df.reset_index(drop=True)
