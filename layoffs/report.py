from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StageReport(BaseModel):
    name: str
    rows_in: int
    rows_out: int
    took_ms: int = 0
    details: Dict[str, Any] = Field(default_factory=dict)


class CleaningReport(BaseModel):
    run_id: Optional[str] = None
    source_table: str
    working_table: str
    started_at: dt.datetime
    finished_at: Optional[dt.datetime] = None
    stages: List[StageReport] = Field(default_factory=list)
    final_rows: int = 0
    columns: List[str] = Field(default_factory=list)

    def stage(self, name: str) -> StageReport:
        for s in self.stages:
            if s.name == name:
                return s
        raise KeyError(name)
