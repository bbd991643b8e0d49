"""Render a resolved forest as rich trees with a "needs attention" section."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from orgchart.hierarchy.errors import AnomalyKind
from orgchart.hierarchy.models import ResolutionReport, TreeNode

EMPTY_MESSAGE = (
    "No organization structure found. "
    "Please assign managers to employees to see the hierarchy."
)

_console = Console()


def initials(name: str) -> str:
    """Upper-cased first letters of each word of a display name."""
    return "".join(part[0] for part in name.split() if part).upper()


def node_label(node: TreeNode, show_departments: bool = True) -> Text:
    fields = node.record.display_fields
    name = node.record.name
    label = Text()
    label.append(f"[{initials(name) or '?'}] ", style="bold blue")
    label.append(name, style="bold")
    if title := fields.get("job_title"):
        label.append(f"  {title}", style="cyan")
    if show_departments and (department := fields.get("department")):
        label.append(f"  ({department})", style="dim")
    return label


def render_tree(root: TreeNode, show_departments: bool = True) -> Tree:
    """Build a top-down rich Tree for one root without recursing."""
    tree = Tree(node_label(root, show_departments), guide_style="bright_black")
    stack = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(node_label(child, show_departments))))
    return tree


def attention_panel(report: ResolutionReport) -> Panel | None:
    """Describe orphan roots and unresolved cycles, or None when the data is clean."""
    if not report.needs_attention:
        return None

    kinds = {rid: kind for kind, rid in report.anomalies}
    lines = Text()
    for rid in report.orphans:
        match kinds.get(rid):
            case AnomalyKind.DETACHED_FROM_CYCLE:
                reason = "manager is part of a reporting cycle"
            case _:
                reason = "manager not found in directory"
        lines.append(f"Orphan {rid}: {reason}\n", style="yellow")
    for group in report.cycles:
        members = ", ".join(sorted(map(str, group)))
        lines.append(f"Unresolved reporting cycle: {members}\n", style="red")

    return Panel(lines, title="Needs attention", border_style="yellow")


def render_report(
    report: ResolutionReport,
    target: Console | None = None,
    title: str = "Organization Chart",
    show_departments: bool = True,
) -> None:
    """Print one diagram per root, then the needs-attention section."""
    console = target or _console
    console.rule(f"[bold]{title}")
    if not report.roots:
        console.print(f"[dim]{EMPTY_MESSAGE}[/dim]")
    for root in report.roots:
        console.print(render_tree(root, show_departments))
        console.print()

    if (panel := attention_panel(report)) is not None:
        console.print(panel)


def report_to_dict(report: ResolutionReport) -> dict:
    """Nested, JSON-serializable view of a report."""

    def _node(root: TreeNode) -> dict:
        out = {"id": root.id, **root.record.display_fields, "children": []}
        stack = [(root, out)]
        while stack:
            node, payload = stack.pop()
            for child in node.children:
                child_payload = {"id": child.id, **child.record.display_fields, "children": []}
                payload["children"].append(child_payload)
                stack.append((child, child_payload))
        return out

    return {
        "roots": [_node(root) for root in report.roots],
        "cycles": [sorted(group, key=str) for group in report.cycles],
        "orphans": list(report.orphans),
    }

