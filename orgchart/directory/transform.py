"""Normalize raw directory frames and turn them into hierarchy records."""

import logging
import math
import re

import pandas as pd

from orgchart.hierarchy.models import EmployeeRecord
from orgchart.utils.types import RecordID

logger = logging.getLogger(__name__)

type ColumnMapping = dict[str, str]

DISPLAY_COLUMNS = ("name", "job_title", "department", "email")

EMPLOYEE_ALIASES: ColumnMapping = {
    "id": "employee_id",
    "emp_id": "employee_id",
    "parent_id": "manager_id",
    "reports_to": "manager_id",
    "supervisor_id": "manager_id",
    "full_name": "name",
    "display_name": "name",
    "title": "job_title",
    "department_name": "department",
    "dept": "department",
}

DEPARTMENT_ALIASES: ColumnMapping = {
    "id": "department_id",
    "dept_id": "department_id",
    "department_name": "name",
    "parent_department_id": "parent_id",
}

CANONICAL_DEPARTMENTS = {
    "eng": "Engineering",
    "engineering": "Engineering",
    "product": "Product",
    "prod": "Product",
    "sales": "Sales",
    "revenue": "Sales",
    "hr": "People",
    "people": "People",
    "people ops": "People",
    "finance": "Finance",
    "fin": "Finance",
    "marketing": "Marketing",
    "mktg": "Marketing",
    "legal": "Legal",
    "ops": "Operations",
    "operations": "Operations",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _snake_case(column: str) -> str:
    column = _CAMEL_BOUNDARY.sub("_", column.strip())
    return column.lower().replace(" ", "_").replace("-", "_").replace(".", "_")


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply an alias mapping.

    An alias is only applied when the canonical column is not already present.
    """
    df = df.rename(columns=_snake_case)
    if mapping:
        renames = {src: dst for src, dst in mapping.items() if src in df.columns and dst not in df.columns}
        df = df.rename(columns=renames)
    return df


def normalize_identifier(value: object) -> RecordID | None:
    """Canonicalize an identifier cell to a string, or None when it is blank."""
    match value:
        case None:
            return None
        case bool():
            return str(value)
        case float() if math.isnan(value):
            return None
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return str(value)
        case str() if value.strip().lower() in ("", "nan", "none", "null"):
            return None
        case str():
            return value.strip()
        case _ if pd.isna(value):
            return None
        case _:
            return str(value)


def _canonical_department(value: object) -> object:
    if not isinstance(value, str):
        return value
    return CANONICAL_DEPARTMENTS.get(value.strip().lower(), value.strip())


def _is_active(df: pd.DataFrame) -> pd.Series:
    """Derive an active flag from whatever status columns the export carries."""
    match df.columns.tolist():
        case cols if "is_active" in cols:
            return df["is_active"].astype(str).str.strip().str.lower().isin(["true", "1", "yes", "y"])
        case cols if "termination_date" in cols:
            return pd.to_datetime(df["termination_date"], errors="coerce").isna()
        case cols if "status" in cols:
            return df["status"].astype(str).str.strip().str.lower() == "active"
        case _:
            return pd.Series(True, index=df.index)


def normalize_directory(raw_df: pd.DataFrame, only_active: bool = False) -> pd.DataFrame:
    """Apply column aliasing, identifier cleanup, and department mapping to a raw export."""
    df = normalize_columns(raw_df.copy(), EMPLOYEE_ALIASES)

    if "name" not in df.columns and {"first_name", "last_name"} <= set(df.columns):
        df["name"] = (
            df["first_name"].fillna("").astype(str).str.strip()
            + " "
            + df["last_name"].fillna("").astype(str).str.strip()
        ).str.strip()

    # Nested department objects flatten to department_name; prefer it when both exist.
    if {"department", "department_name"} <= set(df.columns):
        df["department"] = df["department_name"].where(df["department_name"].notna(), df["department"])

    if "manager_id" not in df.columns:
        df["manager_id"] = None

    if only_active:
        active = _is_active(df)
        logger.info("Keeping %d of %d active employee records", int(active.sum()), len(df))
        df = df[active].copy()

    if "employee_id" in df.columns:
        df["employee_id"] = df["employee_id"].map(normalize_identifier).astype(object)
    df["manager_id"] = df["manager_id"].map(normalize_identifier).astype(object)

    if "department" in df.columns:
        df["department"] = df["department"].map(_canonical_department)

    logger.info("Normalized %d directory records", len(df))
    return df.reset_index(drop=True)


def normalize_departments(raw_df: pd.DataFrame) -> pd.DataFrame:
    df = normalize_columns(raw_df.copy(), DEPARTMENT_ALIASES)
    if "parent_id" not in df.columns:
        df["parent_id"] = None
    if "department_id" in df.columns:
        df["department_id"] = df["department_id"].map(normalize_identifier).astype(object)
    df["parent_id"] = df["parent_id"].map(normalize_identifier).astype(object)
    return df.reset_index(drop=True)


def _display_fields(row: dict, columns: tuple[str, ...]) -> dict:
    fields = {}
    for col in columns:
        value = row.get(col)
        if value is not None and not pd.isna(value):
            fields[col] = value
    return fields


def records_from_frame(df: pd.DataFrame) -> list[EmployeeRecord]:
    """Convert a normalized directory frame into records, preserving row order."""
    records = [
        EmployeeRecord(
            id=normalize_identifier(row["employee_id"]),
            parent_id=normalize_identifier(row["manager_id"]),
            display_fields=_display_fields(row, DISPLAY_COLUMNS),
        )
        for row in df.to_dict(orient="records")
    ]
    logger.info("Built %d employee records", len(records))
    return records


def records_from_departments(df: pd.DataFrame) -> list[EmployeeRecord]:
    """Map department rows onto records so the department tree resolves the same way."""
    return [
        EmployeeRecord(
            id=normalize_identifier(row["department_id"]),
            parent_id=normalize_identifier(row["parent_id"]),
            display_fields=_display_fields(row, ("name",)),
        )
        for row in df.to_dict(orient="records")
    ]
