import argparse
import json
import time
import uuid
from typing import Any, Dict, List, Optional

import yaml

from layoffs.catalog import Catalog
from layoffs.pipeline import DEFAULT_SOURCE_TABLE, DEFAULT_WORKING_TABLE, run_cleaning_pipeline
from layoffs.queries import inspect_table
from layoffs.report import CleaningReport
from layoffs.sources import load_source
from layoffs.utils import configure_logging, get_logger, validate_config, write_output

logger = get_logger(__name__)


def _load_config(config_path: str) -> Dict[str, Any]:
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    validate_config(cfg)
    return cfg


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    if overrides.get("working_table") is not None:
        cfg["working_table"] = overrides["working_table"]

    if overrides.get("output_dir") is not None or overrides.get("formats") is not None:
        out = cfg.setdefault("output", {})
        if overrides.get("output_dir") is not None:
            out["dir"] = overrides["output_dir"]
        if overrides.get("formats") is not None:
            out["formats"] = list(overrides["formats"])

    if overrides.get("on_ambiguous") is not None:
        processing = cfg.setdefault("processing", {})
        bf = processing.setdefault("backfill", {})
        bf["on_ambiguous"] = overrides["on_ambiguous"]


def _load_catalog(cfg: Dict[str, Any]) -> Catalog:
    source_cfg = cfg["source"]
    catalog = Catalog()
    t0 = time.monotonic()
    catalog.create(source_cfg.get("table", DEFAULT_SOURCE_TABLE), load_source(source_cfg))
    logger.info("source loaded took_ms=%d", int((time.monotonic() - t0) * 1000))
    return catalog


def _execute_pipeline(cfg: Dict[str, Any], run_id: str, overrides: Optional[Dict[str, Any]] = None) -> CleaningReport:
    """Load the source, run the cleaning stages and write the outputs."""
    _apply_overrides(cfg, overrides)
    source_table = cfg["source"].get("table", DEFAULT_SOURCE_TABLE)
    working_table = cfg.get("working_table", DEFAULT_WORKING_TABLE)
    logger.info("config loaded source=%s working_table=%s", cfg["source"].get("path"), working_table)

    catalog = _load_catalog(cfg)

    t1 = time.monotonic()
    report = run_cleaning_pipeline(
        catalog,
        cfg.get("processing", {}),
        source_table=source_table,
        working_table=working_table,
        run_id=run_id,
    )
    logger.info("cleaned rows=%d took_ms=%d", report.final_rows, int((time.monotonic() - t1) * 1000))

    out_cfg = cfg.get("output")
    if out_cfg:
        generated_files = write_output(catalog.get(working_table), report.model_dump(mode="json"), out_cfg)
        logger.info("output written dir=%s files=%s", out_cfg["dir"], generated_files)
    else:
        logger.info("no output configured -> skip writing")

    logger.info("OK: layoffs table cleaned.")
    return report


def _inspect(cfg: Dict[str, Any], columns: Optional[List[str]] = None) -> Dict[str, Any]:
    catalog = _load_catalog(cfg)
    summary = inspect_table(catalog.get(cfg["source"].get("table", DEFAULT_SOURCE_TABLE)), columns)
    print(json.dumps(summary, ensure_ascii=False, indent=2, default=str))
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clean the layoffs table.")
    parser.add_argument('--config', type=str, required=True, help="Path to the cleaning config YAML file.")
    parser.add_argument('--working-table', dest='working_table', type=str, help="Name of the table the cleaned copy is written to")
    parser.add_argument('--output-dir', dest='output_dir', type=str, help="Directory for the cleaned CSV and report")
    parser.add_argument('--format', dest='formats', action='append', choices=["csv", "json"], help="Output format (repeatable)")
    parser.add_argument('--on-ambiguous', dest='on_ambiguous', choices=["first", "skip"], help="What to do when a company has several known industries")
    parser.add_argument('--inspect', action='store_true', help="Print a summary of the source table and exit")
    parser.add_argument('--inspect-column', dest='inspect_columns', action='append', help="Column to list distinct values for (repeatable)")
    parser.add_argument('--log-level', dest='log_level', choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Root log level (default: $LAYOFFS_LOG_LEVEL or INFO)")
    parser.add_argument('--log-dir', dest='log_dir', type=str, help="Also write a daily rotated log file here")
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "working_table": args.working_table,
        "output_dir": args.output_dir,
        "formats": args.formats,
        "on_ambiguous": args.on_ambiguous,
    }


def main():
    """Main entry point for CLI usage."""
    args = build_parser().parse_args()
    configure_logging(level=args.log_level, log_dir=args.log_dir)
    if args.inspect:
        inspect_once(args.config, columns=args.inspect_columns)
    else:
        run_once(args.config, overrides=overrides_from_args(args))


def run_once(
    config_path: str,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> CleaningReport:
    """Execute pipeline once with given config file path."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = _load_config(config_path)
        return _execute_pipeline(cfg, run_id, overrides)

    except Exception as e:
        logger.error("Pipeline execution failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)


def inspect_once(config_path: str, *, columns: Optional[List[str]] = None) -> Dict[str, Any]:
    cfg = _load_config(config_path)
    return _inspect(cfg, columns)


if __name__ == "__main__":
    main()
