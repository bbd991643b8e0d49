"""Record and forest types produced and consumed by the hierarchy resolver."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from orgchart.hierarchy.errors import AnomalyKind
from orgchart.utils.types import RecordID

type CycleGroup = frozenset[RecordID]
type Anomaly = tuple[AnomalyKind, RecordID]


@dataclass(frozen=True)
class EmployeeRecord:
    """A flat directory entry: an id, an optional manager back-reference, and display payload."""

    id: RecordID
    parent_id: RecordID | None = None
    display_fields: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.id is None:
            raise ValueError("EmployeeRecord.id must not be None")
        # Freeze the payload so the resolver can share it without copying.
        object.__setattr__(self, "display_fields", MappingProxyType(dict(self.display_fields)))

    @property
    def name(self) -> str:
        return str(self.display_fields.get("name") or self.id)


@dataclass(eq=False)
class TreeNode:
    record: EmployeeRecord
    children: list["TreeNode"] = field(default_factory=list)
    parent: "TreeNode | None" = field(default=None, repr=False)

    @property
    def id(self) -> RecordID:
        return self.record.id

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        depth, node = 0, self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def add_child(self, record: EmployeeRecord) -> "TreeNode":
        child = TreeNode(record=record, parent=self)
        self.children.append(child)
        return child

    def walk(self) -> Iterator["TreeNode"]:
        """Pre-order traversal using an explicit stack."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def descendant_count(self) -> int:
        return sum(1 for _ in self.walk()) - 1


@dataclass
class ResolutionReport:
    roots: list[TreeNode] = field(default_factory=list)
    cycles: list[CycleGroup] = field(default_factory=list)
    orphans: list[RecordID] = field(default_factory=list)
    anomalies: list[Anomaly] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.roots and not self.cycles

    @property
    def needs_attention(self) -> bool:
        return bool(self.orphans or self.cycles)

    def nodes(self) -> Iterator[TreeNode]:
        for root in self.roots:
            yield from root.walk()

    def node_ids(self) -> list[RecordID]:
        return [node.id for node in self.nodes()]

    def cycle_members(self) -> set[RecordID]:
        return set().union(*self.cycles) if self.cycles else set()

    def find(self, record_id: RecordID) -> TreeNode | None:
        for node in self.nodes():
            if node.id == record_id:
                return node
        return None
