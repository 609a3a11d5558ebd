import os
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Dict, List, Optional

import pandas as pd
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError

# ---------- Time helpers ----------

def now_utc():
    return dt.datetime.now(dt.timezone.utc)

# ---------- Config validation ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e

# ---------- Output writer ----------

def write_output(df: pd.DataFrame, report: Optional[Dict[str, Any]], out_cfg: dict) -> List[str]:
    """Write the cleaned table and the run report into ``out_cfg["dir"]``.

    The date column is written as ISO ``YYYY-MM-DD``. Returns the list of
    written file paths.
    """
    out_dir = out_cfg["dir"]
    formats = out_cfg.get("formats", ["csv", "json"])
    os.makedirs(out_dir, exist_ok=True)
    now_local = dt.datetime.now().astimezone()
    ts = now_local.strftime("%Y%m%dT%H%M%S%z")
    base = os.path.join(out_dir, f"{out_cfg.get('basename', 'layoffs_clean')}_{ts}")

    generated_files = []

    if "csv" in formats:
        csv_path = base + ".csv"
        df.to_csv(csv_path, index=False, date_format="%Y-%m-%d")
        generated_files.append(csv_path)

    if "json" in formats and report is not None:
        json_path = base + ".report.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(report, f, ensure_ascii=False, indent=2)
        generated_files.append(json_path)

    return generated_files

# ---------- Logging ----------

# One line per stage step, e.g. "dedup.fingerprint: kept=2 from=3".
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = "layoffs-cleaning.log"

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None, json_mode: Optional[bool] = None):
    """(Re)configure the root logger for a cleaning run.

    Arguments left as ``None`` fall back to ``LAYOFFS_LOG_LEVEL``,
    ``LAYOFFS_LOG_DIR`` and ``LAYOFFS_LOG_JSON``. A log file is only written
    when a directory is given; it rotates daily and keeps a week.
    """
    global _LOGGER_INITIALIZED

    level = (level or os.getenv("LAYOFFS_LOG_LEVEL", "INFO")).upper()
    log_dir = log_dir or os.getenv("LAYOFFS_LOG_DIR")
    if json_mode is None:
        json_mode = os.getenv("LAYOFFS_LOG_JSON", "false").lower() == "true"

    root = logging.getLogger()
    for h in [h for h in root.handlers if getattr(h, "_layoffs", False)]:
        root.removeHandler(h)
        h.close()
    root.setLevel(getattr(logging, level, logging.INFO))

    fmt = JsonFormatter() if json_mode else logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(TimedRotatingFileHandler(os.path.join(log_dir, LOG_FILE), when="D", backupCount=7, encoding="utf-8"))
    for h in handlers:
        h.setLevel(root.level)
        h.setFormatter(fmt)
        h._layoffs = True
        root.addHandler(h)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    if not _LOGGER_INITIALIZED:
        configure_logging()
    return logging.getLogger(name if name else __name__)
