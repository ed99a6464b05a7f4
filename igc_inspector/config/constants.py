"""
Constants for IGC Inspector.
These are fixed values that don't change during application execution.
"""

# Geodesy
EARTH_RADIUS_METERS = 6378137.0
MPS_TO_KMH = 3.6

# Fix admission
MAX_VALID_SPEED_KMH = 400.0     # Fixes implying a faster ground speed are dropped
MIDNIGHT_ROLLOVER_WINDOW = 200  # Seconds after UTC midnight accepted as a day change

# Turnpoint validation
DEFAULT_PROXIMITY_RADIUS_METERS = 500.0

# IGC file related constants
IGC_EXTENSION = '.igc'
DEFAULT_ENCODING = 'utf-8'
EXPERIMENTAL_MANUFACTURER_PREFIX = 'X'
EXPORT_MANUFACTURER_CODE = 'XXX'
EXPORT_LOGGER_ID = 'INS'

# B record extensions understood by name (code -> PositionFix attribute)
KNOWN_FIX_EXTENSIONS = {
    'FXA': 'fix_accuracy',
    'SIU': 'satellites',
    'ENL': 'engine_noise',
}

# Application information
APP_NAME = "IGC Inspector"
APP_VERSION = "1.0.0"
APP_AUTHOR = "Juan Luis Gabriel"
APP_LICENSE = "MIT License"
APP_DESCRIPTION = "Parse, validate and summarise IGC flight recorder logs"
