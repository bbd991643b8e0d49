"""Pandera schemas for normalized directory frames."""

import pandas as pd
import pandera.pandas as pa
from pandera.pandas import Check, Column


def _non_blank(series: pd.Series) -> pd.Series:
    return series.astype(str).str.strip().str.len() > 0


# Identifiers are checked for presence only; their dtype depends on the export
# format and they are normalized to strings before records are built.
employee_directory_schema = pa.DataFrameSchema(
    {
        "employee_id": Column(nullable=False, checks=Check(_non_blank, error="blank employee_id")),
        "manager_id": Column(nullable=True),
        "name": Column(nullable=True, required=False),
        "job_title": Column(nullable=True, required=False),
        "department": Column(nullable=True, required=False),
        "email": Column(
            nullable=True,
            required=False,
            checks=Check(
                lambda s: s.isna() | s.astype(str).str.match(r"^[\w.+-]+@[\w-]+\.[\w.]+$"),
                error="malformed email",
            ),
        ),
    },
    strict=False,
)


department_schema = pa.DataFrameSchema(
    {
        "department_id": Column(nullable=False, checks=Check(_non_blank, error="blank department_id")),
        "name": Column(nullable=False),
        "parent_id": Column(nullable=True),
    },
    strict=False,
)
