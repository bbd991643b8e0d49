"""Shared utilities for the org chart pipeline."""

from orgchart.utils.io import read_table, write_output, write_json
from orgchart.utils.validators import validate_dataframe, validate_unique
from orgchart.utils.types import RecordID, DanglingPolicy, SourceFormat
