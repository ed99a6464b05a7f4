"""
I/O package for IGC Inspector.
Contains modules for reading logs and writing IGC files.
"""

from .igc import IGCExporter, create_igc_exporter
from .files import (
    read_igc_file,
    list_igc_files,
    get_file_info,
    group_records,
    write_record_groups,
    split_to_directory,
    get_available_filename
)

__all__ = [
    'IGCExporter',
    'create_igc_exporter',
    'read_igc_file',
    'list_igc_files',
    'get_file_info',
    'group_records',
    'write_record_groups',
    'split_to_directory',
    'get_available_filename'
]
