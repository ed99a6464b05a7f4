"""
IGC Inspector
Parses IGC flight recorder logs into a structured flight.

Features:
- Validating every record of an IGC log
- Building the track, task, events and statistics of a flight
- Checking turnpoints and points of interest against the track
- Exporting JSON or a cleaned IGC file
"""

__version__ = '1.0.0'

# Initialize logging when the package is imported
import logging
import sys

from .config.constants import APP_NAME, APP_VERSION, APP_AUTHOR, APP_LICENSE

__author__ = APP_AUTHOR
__license__ = APP_LICENSE

# Configure root logger
root_logger = logging.getLogger("igc_inspector")
root_logger.setLevel(logging.INFO)

if not root_logger.handlers:
    # Results go to stdout, so log records go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

root_logger.debug(f"Initializing {APP_NAME} v{APP_VERSION}")

from . import config
from . import data
from . import utils
from .exceptions import (
    IGCError,
    StructuralError,
    UnsupportedRecordError,
    DuplicateRecordError,
    FieldValidationError,
    EmptyInputError,
    MissingTrackError,
)
from .data.parser import IGCParser, parse
from .core.flight import IGCInspector, validate_points_proximity

__all__ = [
    'IGCParser',
    'parse',
    'IGCInspector',
    'validate_points_proximity',
    'IGCError',
    'StructuralError',
    'UnsupportedRecordError',
    'DuplicateRecordError',
    'FieldValidationError',
    'EmptyInputError',
    'MissingTrackError',
]
