"""Organization hierarchy resolution.

Rebuilds the reporting forest from a flat directory snapshot, classifies
orphaned and cyclic records, and renders or flattens the result.
"""

from orgchart.hierarchy.errors import AnomalyKind, DirectoryError, ErrorKind, InvalidInputError
from orgchart.hierarchy.models import EmployeeRecord, ResolutionReport, TreeNode
from orgchart.hierarchy.resolver import resolve
from orgchart.hierarchy.metrics import classify_org_level, flatten_forest, span_of_control
from orgchart.hierarchy.render import render_report, render_tree, report_to_dict
from orgchart.hierarchy.refresh import RefreshCoordinator
