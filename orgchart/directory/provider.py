"""Fetch-on-demand employee directory backed by an export file."""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from orgchart.directory.ingest import load_directory_export
from orgchart.directory.models import department_schema, employee_directory_schema
from orgchart.directory.transform import (
    normalize_departments,
    normalize_directory,
    records_from_departments,
    records_from_frame,
)
from orgchart.hierarchy.errors import DirectoryError
from orgchart.hierarchy.models import EmployeeRecord
from orgchart.utils.types import SourceFormat
from orgchart.utils.validators import (
    validate_dataframe,
    validate_referential_integrity,
    validate_unique,
)

logger = logging.getLogger(__name__)


@dataclass
class DirectoryProvider:
    """Yields the complete record set of a directory source in a single call.

    Nothing is cached between calls: every ``fetch()`` reads the source again
    so each refresh resolves a fresh snapshot.
    """

    source: str | Path
    fmt: SourceFormat | str | None = None
    departments: str | Path | None = None
    only_active: bool = False

    def _load(self, source: str | Path) -> pd.DataFrame:
        try:
            return load_directory_export(source, self.fmt if source == self.source else None)
        except (FileNotFoundError, ValueError) as exc:
            raise DirectoryError(str(source), [str(exc)]) from exc

    def load_frame(self) -> pd.DataFrame:
        """Load, normalize, and schema-check the employee export."""
        df = normalize_directory(self._load(self.source), only_active=self.only_active)
        match validate_dataframe(df, employee_directory_schema):
            case {"valid": True}:
                return df
            case {"errors": errors}:
                raise DirectoryError(str(self.source), errors)

    def fetch(self) -> list[EmployeeRecord]:
        return records_from_frame(self.load_frame())

    def fetch_departments(self) -> list[EmployeeRecord]:
        if self.departments is None:
            raise DirectoryError(str(self.source), ["no department export configured"])

        df = normalize_departments(self._load(self.departments))
        match validate_dataframe(df, department_schema):
            case {"valid": True}:
                return records_from_departments(df)
            case {"errors": errors}:
                raise DirectoryError(str(self.departments), errors)

    def validate(self) -> dict[str, str | int | list[str]]:
        """Check that the source is readable and well-formed without resolving it."""
        try:
            df = self.load_frame()
        except DirectoryError as exc:
            return {"status": "error", "message": str(exc), "errors": exc.errors}

        unique = validate_unique(df, ["employee_id"])
        if not unique["valid"]:
            return {"status": "error", "message": unique["errors"][0], "errors": unique["errors"]}

        integrity = validate_referential_integrity(df, df, "manager_id", "employee_id")
        match integrity:
            case {"status": "warning", "errors": warnings}:
                return {"status": "warning", "rows_available": len(df), "errors": warnings}
            case _:
                return {"status": "ok", "rows_available": len(df), "errors": []}
