"""Error and anomaly taxonomy for hierarchy resolution."""

from enum import StrEnum

from orgchart.utils.types import RecordID


class ErrorKind(StrEnum):
    DUPLICATE_ID = "DuplicateId"


class AnomalyKind(StrEnum):
    """Recoverable data problems, reported as part of a successful resolution."""

    DANGLING_PARENT = "DanglingParentReference"
    CYCLE_DETECTED = "CycleDetected"
    DETACHED_FROM_CYCLE = "DetachedFromCycle"


class InvalidInputError(ValueError):
    """Raised when the record set cannot be resolved at all."""

    def __init__(self, kind: ErrorKind, ids: list[RecordID]):
        self.kind = kind
        self.ids = ids
        sample = ", ".join(map(repr, ids[:5]))
        super().__init__(f"{kind}: {len(ids)} identifier(s) occur more than once ({sample})")


class DirectoryError(RuntimeError):
    """Raised when a directory source is missing, unreadable, or fails its schema."""

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        detail = "; ".join(errors[:3])
        super().__init__(f"Directory source {source!r} is invalid: {detail}")
