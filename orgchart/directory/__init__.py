"""Employee directory sources.

Loads HRIS exports and API dumps, normalizes them, and hands the complete
record set to the hierarchy resolver.
"""

from orgchart.directory.ingest import load_directory_export
from orgchart.directory.transform import normalize_directory, records_from_frame, records_from_departments
from orgchart.directory.provider import DirectoryProvider
