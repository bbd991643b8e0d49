"""Locate and load directory exports from HRIS drops or API dumps."""

import logging
from pathlib import Path

import pandas as pd

from orgchart.utils.io import read_table
from orgchart.utils.types import SourceFormat

logger = logging.getLogger(__name__)

EXPORT_PATTERNS = ("employees_*.csv", "employees_*.json", "employees_*.xlsx", "employees_*.parquet")


def latest_export(directory: Path, patterns: tuple[str, ...] = EXPORT_PATTERNS) -> Path:
    """Return the newest export in a drop directory.

    Exports follow the ``employees_YYYY_MM.<ext>`` naming convention, so the
    lexicographically last name is the most recent snapshot.
    """
    candidates = sorted(p for pattern in patterns for p in directory.glob(pattern))
    if not candidates:
        raise FileNotFoundError(f"No directory exports found in {directory}")
    return candidates[-1]


def load_directory_export(
    source: str | Path,
    fmt: SourceFormat | str | None = None,
) -> pd.DataFrame:
    """Load one complete directory snapshot.

    ``source`` may be a file or a drop directory, in which case the newest
    export in it is used. The whole snapshot is returned in one frame.
    """
    path = Path(source)
    if path.is_dir():
        path = latest_export(path)
    elif not path.exists():
        raise FileNotFoundError(f"Directory export missing: {path}")

    logger.info("Reading directory export: %s", path.name)
    return read_table(path, fmt)
