"""Shared type definitions for the org chart pipeline."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


type RecordID = str | int
type ValidationOutcome = dict[str, bool | str | list[str]]


class DanglingPolicy(StrEnum):
    PROMOTE = "promote"
    DROP = "drop"


class SourceFormat(StrEnum):
    CSV = "csv"
    JSON = "json"
    EXCEL = "xlsx"
    PARQUET = "parquet"


@dataclass(frozen=True)
class RefreshContext:
    source: str
    token: int
    started_at: datetime


def detect_format(suffix: str) -> SourceFormat:
    match suffix.lower().lstrip("."):
        case "csv" | "txt":
            return SourceFormat.CSV
        case "json":
            return SourceFormat.JSON
        case "xlsx" | "xls":
            return SourceFormat.EXCEL
        case "parquet" | "pq":
            return SourceFormat.PARQUET
        case other:
            raise ValueError(f"Unsupported directory format: {other!r}")
