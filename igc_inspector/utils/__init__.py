"""
Utilities package for IGC Inspector.
Contains geodesy and formatting helpers used across the application.
"""

from .geodesy import (
    distance,
    sexagesimal_to_decimal,
    decimal_to_sexagesimal,
    seconds_to_clock,
    clock_to_seconds,
    speed_kmh,
    format_distance,
    format_speed,
)

__all__ = [
    'distance',
    'sexagesimal_to_decimal',
    'decimal_to_sexagesimal',
    'seconds_to_clock',
    'clock_to_seconds',
    'speed_kmh',
    'format_distance',
    'format_speed',
]
