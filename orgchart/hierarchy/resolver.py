"""Org hierarchy resolution: rebuild reporting trees from flat manager back-references.

Resolution runs in two phases. Every record's ancestor chain is walked first
to classify cycle members, then trees are assembled top-down from the
remaining root candidates. Both phases are iterative, so very deep reporting
chains cannot exhaust the interpreter stack.
"""

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence

from orgchart.hierarchy.errors import AnomalyKind, ErrorKind, InvalidInputError
from orgchart.hierarchy.models import CycleGroup, EmployeeRecord, ResolutionReport, TreeNode
from orgchart.utils.types import DanglingPolicy, RecordID

logger = logging.getLogger(__name__)

_ON_PATH = 1
_SETTLED = 2


def _index_records(records: Sequence[EmployeeRecord]) -> dict[RecordID, EmployeeRecord]:
    """Index records by id, refusing ambiguous input."""
    index: dict[RecordID, EmployeeRecord] = {}
    for record in records:
        index.setdefault(record.id, record)

    if len(index) != len(records):
        counts = Counter(record.id for record in records)
        duplicates = [rid for rid, n in counts.items() if n > 1]
        raise InvalidInputError(ErrorKind.DUPLICATE_ID, duplicates)
    return index


def _build_adjacency(
    records: Sequence[EmployeeRecord],
    index: dict[RecordID, EmployeeRecord],
) -> tuple[dict[RecordID, list[RecordID]], list[RecordID]]:
    """Build a parent_id -> [child ids] map in input order, and collect dangling ids."""
    adjacency: dict[RecordID, list[RecordID]] = defaultdict(list)
    dangling: list[RecordID] = []
    for record in records:
        match record.parent_id:
            case None:
                pass
            case parent if parent in index:
                adjacency[parent].append(record.id)
            case _:
                dangling.append(record.id)
    return dict(adjacency), dangling


def _detect_cycles(
    records: Sequence[EmployeeRecord],
    index: dict[RecordID, EmployeeRecord],
) -> list[CycleGroup]:
    """Walk each ancestor chain once and return the closed chains, in discovery order."""
    state: dict[RecordID, int] = {}
    cycles: list[CycleGroup] = []

    for record in records:
        if record.id in state:
            continue

        path: list[RecordID] = []
        position: dict[RecordID, int] = {}
        current: RecordID | None = record.id
        while current is not None and current in index and current not in state:
            state[current] = _ON_PATH
            position[current] = len(path)
            path.append(current)
            current = index[current].parent_id

        # The walk stopped on a node of its own path: everything from there on is a loop.
        if current in position:
            cycles.append(frozenset(path[position[current]:]))

        for rid in path:
            state[rid] = _SETTLED

    return cycles


def _assemble(
    root_record: EmployeeRecord,
    index: dict[RecordID, EmployeeRecord],
    adjacency: dict[RecordID, list[RecordID]],
    cycle_members: set[RecordID],
) -> TreeNode:
    root = TreeNode(record=root_record)
    stack = [root]
    while stack:
        node = stack.pop()
        for child_id in adjacency.get(node.id, []):
            if child_id in cycle_members:
                continue
            stack.append(node.add_child(index[child_id]))
    return root


def resolve(
    records: Sequence[EmployeeRecord],
    dangling: DanglingPolicy | str = DanglingPolicy.PROMOTE,
) -> ResolutionReport:
    """Resolve a flat record set into a forest of reporting trees.

    Records whose manager is missing from the set become orphan roots (or are
    hidden, with ``dangling="drop"``). Records that are their own transitive
    manager are reported as cycle groups and never placed in a tree. Records
    managed by a cycle member are promoted to orphan roots. Raises
    ``InvalidInputError`` when an id occurs more than once.
    """
    policy = DanglingPolicy(dangling)
    records = list(records)
    index = _index_records(records)
    adjacency, dangling_ids = _build_adjacency(records, index)
    cycles = _detect_cycles(records, index)
    cycle_members: set[RecordID] = set().union(*cycles) if cycles else set()
    dangling_set = set(dangling_ids)

    report = ResolutionReport(cycles=cycles)
    for group in cycles:
        for rid in group:
            report.anomalies.append((AnomalyKind.CYCLE_DETECTED, rid))

    for record in records:
        if record.id in cycle_members:
            continue

        match record.parent_id:
            case None:
                pass
            case _ if record.id in dangling_set:
                report.orphans.append(record.id)
                report.anomalies.append((AnomalyKind.DANGLING_PARENT, record.id))
                if policy is DanglingPolicy.DROP:
                    continue
            case parent if parent in cycle_members:
                report.orphans.append(record.id)
                report.anomalies.append((AnomalyKind.DETACHED_FROM_CYCLE, record.id))
            case _:
                continue

        report.roots.append(_assemble(record, index, adjacency, cycle_members))

    if report.cycles:
        logger.warning(
            "Detected %d reporting cycle(s) covering %d record(s)",
            len(report.cycles),
            len(cycle_members),
        )
    if report.orphans:
        logger.warning("Found %d record(s) with an unresolvable manager", len(report.orphans))
    logger.info(
        "Resolved org hierarchy: %d records, %d root(s), %d cycle group(s)",
        len(records),
        len(report.roots),
        len(report.cycles),
    )
    return report
