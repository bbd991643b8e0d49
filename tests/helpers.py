from orgchart.hierarchy.models import EmployeeRecord


def make_records(*pairs, **display) -> list[EmployeeRecord]:
    """Build records from (id, parent_id) pairs."""
    return [EmployeeRecord(id=rid, parent_id=parent, display_fields=display) for rid, parent in pairs]
