from __future__ import annotations

import time
from typing import Any, Dict, Optional

import pandas as pd

from layoffs.catalog import Catalog
from layoffs.report import CleaningReport, StageReport
from layoffs.schema import ROW_NUM
from layoffs.stages.backfill import backfill_from_siblings, blank_to_null
from layoffs.stages.dedup import assign_row_numbers, remove_duplicates
from layoffs.stages.normalize import normalize
from layoffs.stages.prune import VALUE_COLUMNS, drop_helper_columns, drop_unusable_rows
from layoffs.stages.snapshot import snapshot
from layoffs.utils import get_logger, now_utc

logger = get_logger(__name__)

DEFAULT_SOURCE_TABLE = "layoffs"
DEFAULT_WORKING_TABLE = "layoffs_staging"


def _ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


def run_cleaning_pipeline(
    catalog: Catalog,
    processing: Optional[Dict[str, Any]] = None,
    *,
    source_table: str = DEFAULT_SOURCE_TABLE,
    working_table: str = DEFAULT_WORKING_TABLE,
    run_id: Optional[str] = None,
) -> CleaningReport:
    """Run snapshot, dedup, normalize, backfill and prune in that order.

    The working table is created from ``source_table`` and replaced in the
    catalog after every stage; ``source_table`` itself is never written.
    Deduplication runs before normalization, so rows that only differ by
    untrimmed whitespace or category spelling both survive.
    """
    processing = processing or {}
    report = CleaningReport(
        run_id=run_id,
        source_table=source_table,
        working_table=working_table,
        started_at=now_utc(),
    )

    t0 = time.monotonic()
    df = snapshot(catalog, source_table, working_table)
    report.stages.append(StageReport(name="snapshot", rows_in=len(df), rows_out=len(df), took_ms=_ms(t0)))

    t0 = time.monotonic()
    ranked = assign_row_numbers(df)
    df = catalog.replace(working_table, remove_duplicates(ranked))
    report.stages.append(
        StageReport(
            name="dedup",
            rows_in=len(ranked),
            rows_out=len(df),
            took_ms=_ms(t0),
            details={"deleted": len(ranked) - len(df)},
        )
    )

    t0 = time.monotonic()
    rows_in = len(df)
    df = catalog.replace(working_table, normalize(df, processing.get("normalize")))
    report.stages.append(StageReport(name="normalize", rows_in=rows_in, rows_out=len(df), took_ms=_ms(t0)))

    t0 = time.monotonic()
    bf = processing.get("backfill") or {}
    column = bf.get("column", "industry")
    df = blank_to_null(df, column, bf.get("blank_tokens", [""]))
    df, result = backfill_from_siblings(
        df,
        column,
        bf.get("key", "company"),
        on_ambiguous=bf.get("on_ambiguous", "first"),
    )
    df = catalog.replace(working_table, df)
    report.stages.append(
        StageReport(
            name="backfill",
            rows_in=len(df),
            rows_out=len(df),
            took_ms=_ms(t0),
            details={
                "filled": result.filled,
                "still_null": result.still_null,
                "ambiguous": result.ambiguous,
            },
        )
    )

    t0 = time.monotonic()
    pr = processing.get("prune") or {}
    rows_in = len(df)
    df, deleted = drop_unusable_rows(df, pr.get("require_any_of", list(VALUE_COLUMNS)))
    df = drop_helper_columns(df, pr.get("drop_columns", [ROW_NUM]))
    df = catalog.replace(working_table, df.reset_index(drop=True))
    report.stages.append(
        StageReport(
            name="prune",
            rows_in=rows_in,
            rows_out=len(df),
            took_ms=_ms(t0),
            details={"deleted": deleted},
        )
    )

    report.final_rows = len(df)
    report.columns = [str(c) for c in df.columns]
    report.finished_at = now_utc()
    logger.info(
        "pipeline: %s -> %s rows=%d stages=%s",
        source_table,
        working_table,
        len(df),
        [f"{s.name}:{s.rows_in}->{s.rows_out}" for s in report.stages],
    )
    return report


def clean_frame(df: pd.DataFrame, processing: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    """Convenience wrapper: clean a single frame in a throwaway catalog."""
    catalog = Catalog()
    catalog.create(DEFAULT_SOURCE_TABLE, df)
    run_cleaning_pipeline(catalog, processing)
    return catalog.get(DEFAULT_WORKING_TABLE)
