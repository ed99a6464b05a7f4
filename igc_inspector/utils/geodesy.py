"""
Geodesy and formatting helpers for IGC Inspector.
Distances on a spherical earth, sexagesimal coordinate conversion
and the clock/number formats used in reports.
"""

import math
from typing import Dict, Union

from ..config.constants import EARTH_RADIUS_METERS, MPS_TO_KMH

Number = Union[int, float]


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points using the Haversine formula.

    Args:
        lat1: Latitude of the first point in decimal degrees
        lon1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lon2: Longitude of the second point in decimal degrees

    Returns:
        float: Distance in meters, 0.0 for coincident points or a non-finite result
    """
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    # Rounding can push a just above 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    result = EARTH_RADIUS_METERS * c

    if not math.isfinite(result):
        return 0.0
    return result


def sexagesimal_to_decimal(degrees: Number, minutes: Number, thousandths: Number = 0) -> float:
    """
    Convert an IGC degrees / minutes / thousandths-of-minute triple to decimal degrees.

    Args:
        degrees: Whole degrees
        minutes: Whole minutes
        thousandths: Thousandths of a minute

    Returns:
        float: Unsigned decimal degrees
    """
    return float(degrees) + (float(minutes) + float(thousandths) / 1000.0) / 60.0


def decimal_to_sexagesimal(value: float, is_longitude: bool = False) -> Dict[str, int]:
    """
    Convert decimal degrees to the IGC degrees / minutes / thousandths triple.

    The sign is dropped; hemisphere letters are the caller's business.
    Rounded thousandths of 1000 carry into the minutes and 60 minutes
    carry into the degrees.

    Args:
        value: Decimal degrees
        is_longitude: Longitudes use three degree digits (DDDMMmmm, up to 180),
            latitudes two (DDMMmmm, up to 90)

    Returns:
        Dict[str, int]: 'degrees', 'minutes' and 'thousandths'

    Raises:
        ValueError: The value does not fit the degree width
    """
    limit, kind = (180, 'longitude') if is_longitude else (90, 'latitude')
    value = abs(value)
    if not value <= limit:
        raise ValueError(f"{value} degrees is out of range for a {kind}")
    degrees = int(value)
    total_minutes = (value - degrees) * 60.0
    minutes = int(total_minutes)
    thousandths = int(round((total_minutes - minutes) * 1000.0))

    if thousandths >= 1000:
        thousandths -= 1000
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1

    return {'degrees': degrees, 'minutes': minutes, 'thousandths': thousandths}


def seconds_to_clock(seconds: Number) -> str:
    """Format a number of seconds as HH:MM:SS."""
    seconds = int(seconds)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def clock_to_seconds(text: str) -> int:
    """
    Convert an HH:MM:SS or HHMMSS clock string to seconds since midnight.

    Returns:
        int: Seconds, or 0 when the text is in neither format
    """
    if not text:
        return 0
    text = text.strip()
    if len(text) == 8 and text[2] == ':' and text[5] == ':':
        parts = text.split(':')
    elif len(text) == 6:
        parts = [text[0:2], text[2:4], text[4:6]]
    else:
        return 0
    if not all(part.isdigit() for part in parts):
        return 0
    hours, minutes, seconds = (int(part) for part in parts)
    return hours * 3600 + minutes * 60 + seconds


def compact_to_clock(text: str) -> str:
    """Turn an IGC HHMMSS time into HH:MM:SS."""
    return f"{text[0:2]}:{text[2:4]}:{text[4:6]}"


def speed_kmh(distance_m: float, elapsed_s: float) -> float:
    """
    Ground speed between two fixes.

    Args:
        distance_m: Distance covered in meters
        elapsed_s: Time taken in seconds

    Returns:
        float: Speed in km/h rounded to 2 decimals; 0.0 without movement,
        infinity when the distance was covered in no time
    """
    if distance_m == 0:
        return 0.0
    if elapsed_s <= 0:
        return math.inf
    return round(distance_m / elapsed_s * MPS_TO_KMH, 2)


def _group_thousands(value: float) -> str:
    return f"{value:,.2f}".replace(",", " ")


def format_distance(meters: float) -> str:
    """
    Format a distance for display.

    Args:
        meters: Distance in meters

    Returns:
        str: e.g. "1 234.57 km" from 1000 m upward, "450.00 m" below
    """
    if meters >= 1000:
        return f"{_group_thousands(meters / 1000.0)} km"
    return f"{_group_thousands(meters)} m"


def format_speed(kmh: float) -> str:
    """Format a speed in km/h for display."""
    return f"{kmh:.2f} km/h"
