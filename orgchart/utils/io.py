"""File I/O utilities for reading directory exports and writing chart outputs."""

import json
import logging
from pathlib import Path

import pandas as pd
from rich.console import Console

from orgchart.utils.types import SourceFormat, detect_format

type FilePath = str | Path

logger = logging.getLogger(__name__)
console = Console()

CSV_ENCODINGS = ("utf-8", "latin-1", "cp1252")


def read_csv_with_fallback(path: FilePath) -> pd.DataFrame:
    """Read a CSV export, retrying the encodings HRIS tools tend to emit."""
    path = Path(path)
    for encoding in CSV_ENCODINGS:
        try:
            return pd.read_csv(path, encoding=encoding, dtype=str, keep_default_na=True)
        except UnicodeDecodeError:
            logger.debug("Decoding %s as %s failed, retrying", path.name, encoding)
            continue
    raise ValueError(f"Could not decode {path}")


def read_json_records(path: FilePath) -> pd.DataFrame:
    """Read a JSON array of objects, as returned by the employees endpoint."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    match payload:
        case list() as rows:
            return pd.json_normalize(rows, sep="_")
        case {"data": list() as rows}:
            return pd.json_normalize(rows, sep="_")
        case _:
            raise ValueError(f"Expected a JSON array of records in {path}")


def read_table(path: FilePath, fmt: SourceFormat | str | None = None) -> pd.DataFrame:
    """Read a directory export, dispatching on explicit format or file suffix."""
    path = Path(path)
    fmt = SourceFormat(fmt) if fmt else detect_format(path.suffix)

    match fmt:
        case SourceFormat.CSV:
            df = read_csv_with_fallback(path)
        case SourceFormat.JSON:
            df = read_json_records(path)
        case SourceFormat.EXCEL:
            df = pd.read_excel(path, engine="openpyxl")
        case SourceFormat.PARQUET:
            df = pd.read_parquet(path)

    logger.info("Read %d rows from %s", len(df), path.name)
    return df


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> None:
    """Write a DataFrame to the specified format."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "parquet":
            df.to_parquet(path, index=False)
        case "excel":
            df.to_excel(path, index=False)
        case "json":
            df.to_json(path, orient="records", indent=2)
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")


def write_json(payload: dict, path: FilePath) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, default=str))
    console.print(f"  Wrote report to {path}")
