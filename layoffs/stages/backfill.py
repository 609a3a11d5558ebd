from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from layoffs.errors import AmbiguousBackfillWarning
from layoffs.utils import get_logger

logger = get_logger(__name__)

AMBIGUOUS_POLICIES = ("first", "skip")


@dataclass
class BackfillResult:
    filled: int = 0
    still_null: int = 0
    ambiguous: Dict[str, List[str]] = field(default_factory=dict)


def blank_to_null(df: pd.DataFrame, column: str = "industry", tokens: Iterable[str] = ("",)) -> pd.DataFrame:
    """Turn sentinel values into real nulls.

    Must run before ``backfill_from_siblings``: an empty string is a value,
    not a gap, and would never be filled.
    """
    out = df.copy()
    mask = out[column].isin(list(tokens)).fillna(False).astype(bool).to_numpy()
    out.loc[mask, column] = pd.NA
    logger.info("backfill.blank_to_null: column=%s converted=%d", column, int(mask.sum()))
    return out


def _candidates(df: pd.DataFrame, column: str, key: str) -> Dict[str, List[str]]:
    # distinct known values per key, in order of first appearance
    known = df.loc[(df[column].notna() & df[key].notna()).to_numpy(), [key, column]]
    out: Dict[str, List[str]] = {}
    for k, v in zip(known[key].tolist(), known[column].tolist()):
        vals = out.setdefault(k, [])
        if v not in vals:
            vals.append(v)
    return out


def backfill_from_siblings(
    df: pd.DataFrame,
    column: str = "industry",
    key: str = "company",
    *,
    on_ambiguous: str = "first",
) -> Tuple[pd.DataFrame, BackfillResult]:
    """Fill nulls in ``column`` from other rows with the same ``key``.

    One distinct known value for the key: it is copied. Several: an
    ``AmbiguousBackfillWarning`` is issued and the first one seen is used
    (``on_ambiguous="first"``) or the row is left null (``"skip"``). None:
    the row stays null.
    """
    if on_ambiguous not in AMBIGUOUS_POLICIES:
        raise ValueError(f"Unknown ambiguous backfill policy: {on_ambiguous}")

    out = df.copy()
    result = BackfillResult()
    cands = _candidates(out, column, key)
    # positional: index labels may repeat after a concat
    values = out[column].tolist()

    for pos, (k, v) in enumerate(zip(out[key].tolist(), out[column].tolist())):
        if not pd.isna(v):
            continue
        vals = [] if pd.isna(k) else cands.get(k, [])
        if not vals:
            continue
        if len(vals) > 1:
            result.ambiguous[k] = vals
            if on_ambiguous == "skip":
                continue
        values[pos] = vals[0]
        result.filled += 1

    out[column] = pd.array(values, dtype=out[column].dtype)

    for k, vals in result.ambiguous.items():
        msg = f"{key}={k!r} has {len(vals)} distinct {column} values {vals}; policy={on_ambiguous}"
        logger.warning("backfill.ambiguous: %s", msg)
        warnings.warn(msg, AmbiguousBackfillWarning, stacklevel=2)

    result.still_null = int(out[column].isna().sum())
    logger.info(
        "backfill.siblings: column=%s key=%s filled=%d still_null=%d ambiguous=%d",
        column,
        key,
        result.filled,
        result.still_null,
        len(result.ambiguous),
    )
    return out, result
