from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from layoffs.errors import ParseError
from layoffs.utils import get_logger

logger = get_logger(__name__)

DATE_FORMAT = "%m/%d/%Y"

DEFAULT_TRIM_COLUMNS = ["company", "location", "industry", "stage", "country"]
DEFAULT_CATEGORIES = [
    {"column": "industry", "canonical": "Crypto", "match": "prefix", "patterns": ["Crypto"]},
]
DEFAULT_STRIP_TRAILING = [
    {"column": "country", "chars": ".", "prefix": "United States"},
]


# ---------- Whitespace ----------

def trim_whitespace(df: pd.DataFrame, columns: Iterable[str] = DEFAULT_TRIM_COLUMNS) -> pd.DataFrame:
    out = df.copy()
    for col in columns:
        before = out[col]
        out[col] = before.str.strip()
        changed = int((before != out[col]).fillna(False).sum())
        logger.info("normalize.trim: column=%s changed=%d", col, changed)
    return out


# ---------- Categorical collapse ----------

def _match_mask(values: pd.Series, patterns: List[str], match: str) -> pd.Series:
    mask = pd.Series(False, index=values.index)
    for p in patterns:
        if match == "prefix":
            hit = values.str.startswith(p)
        elif match == "exact":
            hit = values == p
        else:
            raise ValueError(f"Unknown match mode: {match}")
        mask |= hit.fillna(False).astype(bool)
    return mask


def collapse_categories(df: pd.DataFrame, rules: List[Dict[str, Any]]) -> pd.DataFrame:
    """Rewrite category variants to one canonical label.

    Each rule: ``{"column", "canonical", "match": "prefix"|"exact",
    "patterns": [...]}``. ``patterns`` defaults to ``[canonical]``, which
    with prefix matching mirrors ``LIKE 'Crypto%'``.
    """
    out = df.copy()
    for rule in rules:
        col = rule["column"]
        canonical = rule["canonical"]
        patterns = rule.get("patterns") or [canonical]
        mask = _match_mask(out[col], patterns, rule.get("match", "prefix"))
        rewritten = int((mask & (out[col] != canonical).fillna(False)).sum())
        out.loc[mask.to_numpy(), col] = canonical
        logger.info("normalize.collapse: column=%s canonical=%s rewritten=%d", col, canonical, rewritten)
    return out


# ---------- Trailing punctuation ----------

def strip_trailing(df: pd.DataFrame, rules: List[Dict[str, Any]]) -> pd.DataFrame:
    """Strip trailing characters from values starting with ``prefix``.

    Each rule: ``{"column", "chars": ".", "prefix": "United States"}``.
    Without a prefix every value of the column is touched.
    """
    out = df.copy()
    for rule in rules:
        col = rule["column"]
        chars = rule.get("chars", ".")
        prefix = rule.get("prefix")
        if prefix:
            mask = out[col].str.startswith(prefix).fillna(False).astype(bool).to_numpy()
        else:
            mask = out[col].notna().to_numpy()
        stripped = out.loc[mask, col].str.rstrip(chars)
        changed = int((stripped != out.loc[mask, col]).sum())
        out.loc[mask, col] = stripped.to_numpy()
        logger.info("normalize.strip_trailing: column=%s chars=%r changed=%d", col, chars, changed)
    return out


# ---------- Dates ----------

def parse_dates(df: pd.DataFrame, column: str = "date", fmt: str = DATE_FORMAT) -> pd.DataFrame:
    """Replace a text date column by a typed ``datetime64`` column.

    Nulls stay null. If any non-null value does not match ``fmt`` a
    ``ParseError`` is raised and the input frame is left as it was.
    """
    raw = df[column]
    text = raw.astype("string").str.strip()
    parsed = pd.to_datetime(text, format=fmt, errors="coerce")
    bad = text.notna() & parsed.isna()
    if bad.any():
        bad_mask = bad.to_numpy()
        offending = dict(zip(raw.index[bad_mask], raw[bad_mask].astype(str)))
        logger.error("normalize.dates: column=%s unparseable=%d", column, len(offending))
        raise ParseError(column, fmt, offending)
    out = df.copy()
    out[column] = parsed.astype("datetime64[ns]")
    logger.info("normalize.dates: column=%s parsed=%d nulls=%d", column, int(parsed.notna().sum()), int(parsed.isna().sum()))
    return out


def format_date(value: Optional[dt.date]) -> Optional[str]:
    """Render a date as ``M/D/YYYY`` (no zero padding), the source layout."""
    if value is None or pd.isna(value):
        return None
    return f"{value.month}/{value.day}/{value.year:04d}"


def normalize(df: pd.DataFrame, cfg: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    cfg = cfg or {}
    out = trim_whitespace(df, cfg.get("trim_columns", DEFAULT_TRIM_COLUMNS))
    out = collapse_categories(out, cfg.get("categories", DEFAULT_CATEGORIES))
    out = strip_trailing(out, cfg.get("strip_trailing", DEFAULT_STRIP_TRAILING))
    date_cfg = cfg.get("date") or {}
    # last touch on the date column: the text form is gone afterwards
    out = parse_dates(out, date_cfg.get("column", "date"), date_cfg.get("format", DATE_FORMAT))
    return out
