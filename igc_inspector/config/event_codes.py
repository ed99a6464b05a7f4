# igc_inspector/config/event_codes.py

"""
This module maps the three-letter codes (TLC) found in IGC E records
to event categories, following chapter 7 of the IGC file format
reference.
"""

import re

# Code -> category. Order matters for prefix matching.
EVENT_CATEGORIES = {
    "STA": "start",
    "FIN": "finish",
    "TPC": "turnpoint",
    "EON": "motor",
    "EOF": "motor",
    "EUP": "motor",
    "EDN": "motor",
    "BFION": "function_on",
    "BFIOFF": "function_off",
    "BFIUN": "function_unknown",
    "CCN": "camera_connect",
    "CDC": "camera_disconnect",
    "GCN": "gnss_connect",
    "GDC": "gnss_disconnect",
    "PHO": "photo",
    "ATS": "altimeter_setting",
    "CGD": "datum_change",
    "ONT": "on_task",
    "LOV": "low_voltage",
    "MAC": "maccready",
    "FLP": "flap_position",
    "UNDUP": "gear_up",
    "UNDDN": "gear_down",
    "OA1": "other_aircraft",
    "OA2": "other_aircraft",
    "OA3": "other_aircraft",
    "PEV": "pilot_event",
}

# Category descriptions
CATEGORY_DESCRIPTIONS = {
    "start": "Task start (STA)",
    "finish": "Task finish (FIN)",
    "turnpoint": "Turnpoint confirmation (TPC)",
    "motor": "Engine on/off or up/down (EON/EOF/EUP/EDN)",
    "function_on": "Function switched on (BFION)",
    "function_off": "Function switched off (BFIOFF)",
    "function_unknown": "Function state unknown (BFIUN)",
    "camera_connect": "Camera connected (CCN)",
    "camera_disconnect": "Camera disconnected (CDC)",
    "gnss_connect": "GNSS module connected (GCN)",
    "gnss_disconnect": "GNSS module disconnected (GDC)",
    "photo": "Photo taken (PHO)",
    "altimeter_setting": "Altimeter pressure setting (ATS)",
    "datum_change": "Change of geodetic datum (CGD)",
    "on_task": "On task, attempting the task (ONT)",
    "low_voltage": "Low voltage (LOV)",
    "maccready": "MacCready setting (MAC)",
    "flap_position": "Flap position (FLP)",
    "gear_up": "Undercarriage up (UNDUP)",
    "gear_down": "Undercarriage down (UNDDN)",
    "other_aircraft": "Position of another aircraft (OA1/OA2/OA3)",
    "pilot_event": "Pilot event (PEV)",
    "takeoff": "Takeoff",
    "landing": "Landing",
    "other": "Other event",
}

UNKNOWN_CATEGORY = "other"
UNKNOWN_DESCRIPTION = "Unknown event"

_OTHER_AIRCRAFT_PATTERN = re.compile(r'^OA[1-9]')


def classify_event(code):
    """
    Detects the event category of a code.

    Exact codes are tried first, then codes carrying a suffix
    (FLP060, UNDUP...) are matched by prefix.

    Args:
        code (str): Event code

    Returns:
        str: Event category, 'other' when the code is not recognized
    """
    if not code:
        return UNKNOWN_CATEGORY

    code = code.strip().upper()
    if code in EVENT_CATEGORIES:
        return EVENT_CATEGORIES[code]

    for prefix, category in EVENT_CATEGORIES.items():
        if code.startswith(prefix):
            return category

    if _OTHER_AIRCRAFT_PATTERN.match(code):
        return "other_aircraft"

    return UNKNOWN_CATEGORY


def describe_category(category):
    """
    Gets the human readable description of a category.

    Args:
        category (str): Event category

    Returns:
        str: Description, or a generic text for unknown categories
    """
    return CATEGORY_DESCRIPTIONS.get(category, UNKNOWN_DESCRIPTION)


def is_recognized(category):
    """Tells whether a category is something other than the 'other' fallback."""
    return category != UNKNOWN_CATEGORY
