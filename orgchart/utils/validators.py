"""Data validation utilities using pandera."""

import pandas as pd
from pandera.errors import SchemaErrors
from pandera.pandas import DataFrameSchema

from orgchart.utils.types import ValidationOutcome


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationOutcome:
    """Validate a DataFrame against a pandera schema, collecting every failure."""
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except SchemaErrors as e:
        errors = []
        for _, row in e.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val}:
                    errors.append(f"Column '{col}' failed check '{check}': {val}")
                case failure:
                    errors.append(f"Validation failure: {failure}")
        return {"valid": False, "status": "error", "errors": errors}


def validate_unique(df: pd.DataFrame, columns: list[str]) -> ValidationOutcome:
    """Check that specified columns form a unique key."""
    duplicates = df.duplicated(subset=columns, keep=False)
    dup_count = int(duplicates.sum())

    match dup_count:
        case 0:
            return {"valid": True, "status": "ok", "errors": []}
        case n:
            sample = df.loc[duplicates, columns[0]].drop_duplicates().head(5).tolist()
            return {
                "valid": False,
                "status": "error",
                "errors": [f"Found {n} duplicate rows on columns {columns}. Sample: {sample}"],
            }


def validate_referential_integrity(
    child: pd.DataFrame,
    parent: pd.DataFrame,
    child_key: str,
    parent_key: str,
) -> ValidationOutcome:
    """Validate that all non-null child keys exist in parent.

    Dangling keys are reported as a warning rather than an error: the
    hierarchy resolver surfaces them as orphan roots.
    """
    orphans = set(child[child_key].dropna().unique()) - set(parent[parent_key].dropna().unique())

    match len(orphans):
        case 0:
            return {"valid": True, "status": "ok", "errors": []}
        case n:
            sample = sorted(map(str, orphans))[:5]
            return {
                "valid": True,
                "status": "warning",
                "errors": [f"Found {n} dangling {child_key} keys. Sample: {sample}"],
            }
