import io
import json

import pytest
from rich.console import Console

from orgchart.hierarchy.models import EmployeeRecord


@pytest.fixture()
def small_org() -> list[EmployeeRecord]:
    return [
        EmployeeRecord(1, None, {"name": "Ada Lovelace", "job_title": "CEO", "department": "Executive"}),
        EmployeeRecord(2, 1, {"name": "Grace Hopper", "job_title": "CTO", "department": "Engineering"}),
        EmployeeRecord(3, 1, {"name": "Alan Turing", "job_title": "CFO", "department": "Finance"}),
        EmployeeRecord(4, 2, {"name": "Linus Torvalds", "job_title": "Engineer", "department": "Engineering"}),
    ]


@pytest.fixture()
def dirty_org() -> list[EmployeeRecord]:
    """One clean tree, one dangling manager, one two-person cycle, and a report of the cycle."""
    return [
        EmployeeRecord(1, None, {"name": "Ada Lovelace"}),
        EmployeeRecord(2, 1, {"name": "Grace Hopper"}),
        EmployeeRecord(3, 99, {"name": "Orphan Annie"}),
        EmployeeRecord(10, 11, {"name": "Cy Cle"}),
        EmployeeRecord(11, 10, {"name": "Re Cursion"}),
        EmployeeRecord(12, 10, {"name": "Hang Off"}),
    ]


@pytest.fixture()
def recording_console() -> Console:
    return Console(record=True, width=120, file=io.StringIO(), color_system=None)


@pytest.fixture()
def employees_csv(tmp_path):
    path = tmp_path / "employees_2024_05.csv"
    path.write_text(
        "ID,Name,Job Title,Department,managerId,Email\n"
        "1,Ada Lovelace,CEO,ops,,ada@example.com\n"
        "2,Grace Hopper,CTO,eng,1,grace@example.com\n"
        "3,Alan Turing,CFO,fin,1,\n"
        "4,Linus Torvalds,Engineer,Engineering,2,linus@example.com\n"
    )
    return path


@pytest.fixture()
def employees_json(tmp_path):
    path = tmp_path / "employees.json"
    payload = [
        {"id": 1, "name": "Ada Lovelace", "job_title": "CEO", "department": {"id": 7, "name": "ops"}, "manager_id": None},
        {"id": 2, "name": "Grace Hopper", "job_title": "CTO", "department": {"id": 8, "name": "eng"}, "manager_id": 1},
        {"id": 3, "name": "Alan Turing", "job_title": "CFO", "department": {"id": 9, "name": "fin"}, "manager_id": 42},
    ]
    path.write_text(json.dumps(payload))
    return path
