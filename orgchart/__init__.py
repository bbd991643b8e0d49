"""Organization chart pipeline.

Resolves the reporting forest of an employee directory snapshot and renders
it, keeping orphaned and cyclic records visible for follow-up.
"""

from orgchart.hierarchy import EmployeeRecord, ResolutionReport, TreeNode, resolve
from orgchart.hierarchy.errors import InvalidInputError, ErrorKind

__version__ = "0.3.0"
