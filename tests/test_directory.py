import json

import pandas as pd
import pytest

from orgchart.directory.ingest import latest_export, load_directory_export
from orgchart.directory.provider import DirectoryProvider
from orgchart.directory.transform import normalize_columns, normalize_directory, normalize_identifier
from orgchart.hierarchy.errors import DirectoryError, InvalidInputError
from orgchart.hierarchy.resolver import resolve
from orgchart.utils.io import read_table, write_output


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        (float("nan"), None),
        (3.0, "3"),
        (7, "7"),
        ("  E-100 ", "E-100"),
        ("", None),
        ("null", None),
        (2.5, "2.5"),
    ],
)
def test_normalize_identifier(raw, expected):
    assert normalize_identifier(raw) == expected


def test_normalize_columns_handles_camel_case_and_aliases():
    df = pd.DataFrame(columns=["ID", "managerId", "Job Title", "Full Name"])

    out = normalize_columns(df, {"id": "employee_id", "full_name": "name"})

    assert list(out.columns) == ["employee_id", "manager_id", "job_title", "name"]


def test_normalize_directory_builds_names_and_departments():
    raw = pd.DataFrame({
        "employee_id": [1, 2],
        "first_name": ["ada", "Grace"],
        "last_name": ["Lovelace", "Hopper"],
        "department": ["eng", "Research"],
        "reports_to": [None, 1],
    })

    df = normalize_directory(raw)

    assert df["name"].tolist() == ["ada Lovelace", "Grace Hopper"]
    assert df["department"].tolist() == ["Engineering", "Research"]
    assert df["employee_id"].tolist() == ["1", "2"]
    assert df.loc[1, "manager_id"] == "1"


def test_csv_export_resolves(employees_csv):
    records = DirectoryProvider(employees_csv).fetch()
    report = resolve(records)

    assert [r.id for r in records] == ["1", "2", "3", "4"]
    assert records[0].parent_id is None
    assert records[1].display_fields["department"] == "Engineering"
    assert records[0].display_fields["department"] == "Operations"
    assert "email" not in records[2].display_fields
    assert [root.id for root in report.roots] == ["1"]
    assert report.find("4").parent.id == "2"


def test_json_api_dump_resolves_with_dangling_manager(employees_json):
    records = DirectoryProvider(employees_json).fetch()
    report = resolve(records)

    assert records[1].parent_id == "1"
    assert records[1].display_fields["department"] == "Engineering"
    assert [root.id for root in report.roots] == ["1", "3"]
    assert report.orphans == ["3"]


def test_drop_directory_uses_latest_export(tmp_path):
    (tmp_path / "employees_2024_01.csv").write_text("employee_id,manager_id\nA,\n")
    (tmp_path / "employees_2024_02.csv").write_text("employee_id,manager_id\nA,\nB,A\n")

    assert latest_export(tmp_path).name == "employees_2024_02.csv"
    assert [r.id for r in DirectoryProvider(tmp_path).fetch()] == ["A", "B"]


def test_empty_drop_directory_is_an_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_directory_export(tmp_path)

    with pytest.raises(DirectoryError):
        DirectoryProvider(tmp_path).fetch()


def test_missing_source_is_reported_by_validate(tmp_path):
    result = DirectoryProvider(tmp_path / "nope.csv").validate()

    assert result["status"] == "error"
    assert "nope.csv" in result["message"]


def test_unsupported_format_is_a_directory_error(tmp_path):
    path = tmp_path / "employees.yaml"
    path.write_text("- id: 1\n")

    with pytest.raises(DirectoryError, match="Unsupported directory format"):
        DirectoryProvider(path).fetch()


def test_blank_ids_fail_schema(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_text("employee_id,manager_id\n1,\n,1\n")

    with pytest.raises(DirectoryError) as excinfo:
        DirectoryProvider(path).fetch()

    assert excinfo.value.errors


def test_missing_id_column_fails_schema(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_text("name,manager_id\nAda,\n")

    with pytest.raises(DirectoryError):
        DirectoryProvider(path).fetch()


def test_duplicate_ids_pass_through_to_resolver(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_text("employee_id,manager_id\n5,\n5,\n")
    provider = DirectoryProvider(path)

    with pytest.raises(InvalidInputError):
        resolve(provider.fetch())
    assert provider.validate()["status"] == "error"


def test_validate_warns_on_dangling_managers(employees_json):
    result = DirectoryProvider(employees_json).validate()

    assert result["status"] == "warning"
    assert result["rows_available"] == 3
    assert "42" in result["errors"][0]


def test_only_active_filters_terminated_employees(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_text("employee_id,manager_id,is_active\n1,,true\n2,1,false\n3,2,True\n")

    records = DirectoryProvider(path, only_active=True).fetch()
    report = resolve(records)

    assert [r.id for r in records] == ["1", "3"]
    assert report.orphans == ["3"]


def test_department_tree_resolves(tmp_path, employees_csv):
    departments = tmp_path / "departments.csv"
    departments.write_text("id,name,parent_id\n1,Company,\n2,Engineering,1\n3,Platform,2\n4,Sales,1\n")

    records = DirectoryProvider(employees_csv, departments=departments).fetch_departments()
    report = resolve(records)

    assert [root.record.name for root in report.roots] == ["Company"]
    assert [c.record.name for c in report.roots[0].children] == ["Engineering", "Sales"]


def test_departments_require_configuration(employees_csv):
    with pytest.raises(DirectoryError):
        DirectoryProvider(employees_csv).fetch_departments()


def test_latin1_csv_falls_back_and_keeps_accents(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_bytes("employee_id,name,manager_id\n1,José Müller,\n2,Zoë Brontë,1\n".encode("latin-1"))

    records = DirectoryProvider(path).fetch()

    assert [r.name for r in records] == ["José Müller", "Zoë Brontë"]
    assert records[1].parent_id == "1"


def test_json_wrapped_in_data_envelope(tmp_path):
    path = tmp_path / "employees.json"
    path.write_text(json.dumps({"data": [{"id": "A", "manager_id": None}, {"id": "B", "manager_id": "A"}]}))

    report = resolve(DirectoryProvider(path).fetch())

    assert [root.id for root in report.roots] == ["A"]
    assert report.find("B").parent.id == "A"


@pytest.mark.parametrize("fmt, suffix", [("parquet", ".parquet"), ("excel", ".xlsx")])
def test_binary_exports_round_trip(tmp_path, fmt, suffix):
    path = tmp_path / f"employees{suffix}"
    frame = pd.DataFrame({"employee_id": ["E1", "E2"], "name": ["Ada", "Grace"], "manager_id": [None, "E1"]})
    write_output(frame, path, fmt)

    df = read_table(path)
    records = DirectoryProvider(path).fetch()

    assert df["employee_id"].tolist() == ["E1", "E2"]
    assert [(r.id, r.parent_id) for r in records] == [("E1", None), ("E2", "E1")]


def test_explicit_format_overrides_suffix(tmp_path):
    path = tmp_path / "employees.export"
    path.write_text("employee_id,manager_id\n1,\n")

    assert read_table(path, "csv")["employee_id"].tolist() == ["1"]
