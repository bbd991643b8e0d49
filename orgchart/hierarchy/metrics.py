"""Span-of-control and depth metrics over a resolved reporting forest."""

import logging

import numpy as np
import pandas as pd

from orgchart.hierarchy.models import ResolutionReport, TreeNode

logger = logging.getLogger(__name__)

FLAT_COLUMNS = [
    "employee_id",
    "manager_id",
    "root_id",
    "depth",
    "org_level",
    "direct_reports",
    "total_reports",
]


def classify_org_level(depth: int) -> str:
    """Classify the organizational level based on depth from the top of a tree."""
    match depth:
        case 0:
            return "CEO"
        case 1:
            return "C-Suite"
        case 2:
            return "VP"
        case 3:
            return "Director"
        case 4:
            return "Manager"
        case 5:
            return "Lead"
        case d if d <= 8:
            return "IC"
        case _:
            return "Deep IC"


def _total_reports(root: TreeNode) -> dict[int, int]:
    """Count every node's descendants with an iterative post-order pass, keyed by id()."""
    totals: dict[int, int] = {}
    stack: list[tuple[TreeNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            totals[id(node)] = sum(1 + totals[id(c)] for c in node.children)
            continue
        stack.append((node, True))
        stack.extend((c, False) for c in node.children)
    return totals


def flatten_forest(report: ResolutionReport) -> pd.DataFrame:
    """Flatten the placed nodes of a report into one row per employee."""
    rows = []
    for root in report.roots:
        totals = _total_reports(root)
        stack: list[tuple[TreeNode, int]] = [(root, 0)]
        while stack:
            node, depth = stack.pop()
            rows.append({
                "employee_id": str(node.id),
                "manager_id": None if node.parent is None else str(node.parent.id),
                "root_id": str(root.id),
                "depth": depth,
                "org_level": classify_org_level(depth),
                "direct_reports": len(node.children),
                "total_reports": totals[id(node)],
                **{k: v for k, v in node.record.display_fields.items() if k not in FLAT_COLUMNS},
            })
            stack.extend((c, depth + 1) for c in reversed(node.children))

    result = pd.DataFrame(rows)
    if result.empty:
        result = pd.DataFrame(columns=FLAT_COLUMNS)

    logger.info("Flattened org hierarchy: %d nodes, %d root(s)", len(result), len(report.roots))
    return result


def span_of_control(report: ResolutionReport) -> pd.DataFrame:
    """Summarize direct-report counts for every employee who manages someone."""
    flat = flatten_forest(report)
    managers = flat[flat["direct_reports"] > 0]
    if managers.empty:
        return pd.DataFrame(columns=["org_level", "managers", "mean_span", "median_span", "max_span"])

    spans = (
        managers.groupby("org_level", sort=False)["direct_reports"]
        .agg(
            managers="count",
            mean_span=lambda s: float(np.mean(s)),
            median_span=lambda s: float(np.median(s)),
            max_span="max",
        )
        .reset_index()
    )
    logger.info(
        "Span of control: %d managers, overall mean %.2f",
        len(managers),
        float(np.mean(managers["direct_reports"])),
    )
    return spans
