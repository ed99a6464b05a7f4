"""
Core package for IGC Inspector.
Contains the flight building and analysis logic.
"""

from .builder import FlightBuilder
from .finalize import finalize_flight, validate_turnpoints, compute_statistics
from .flight import IGCInspector, validate_points_proximity

__all__ = [
    'FlightBuilder',
    'finalize_flight',
    'validate_turnpoints',
    'compute_statistics',
    'IGCInspector',
    'validate_points_proximity',
]
