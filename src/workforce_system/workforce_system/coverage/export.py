from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from .model import CoverageDayAnalysis

EXPORT_COLUMNS = ["Date", "Day", "Assignments", "Coverage %", "Status", "Conflicts"]


def coverage_frame(days: Iterable[CoverageDayAnalysis]) -> pd.DataFrame:
    rows = [
        {
            "Date": d.date.isoformat(),
            "Day": d.day_of_week,
            "Assignments": d.assignment_count,
            "Coverage %": d.coverage_percentage,
            "Status": d.status.value,
            "Conflicts": d.conflict_count,
        }
        for d in days
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(days: Iterable[CoverageDayAnalysis]) -> str:
    return coverage_frame(days).to_csv(index=False, lineterminator="\n")


def export_xlsx(days: Iterable[CoverageDayAnalysis]) -> io.BytesIO:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        coverage_frame(days).to_excel(writer, index=False, sheet_name="Coverage")
    out.seek(0)
    return out
