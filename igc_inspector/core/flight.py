"""
Flight inspection for IGC Inspector.
Entry point used by the CLI and library callers: parse a log, query
its metadata, serialise it and validate it against points of interest.
"""

import json
import logging
import math
import os
from typing import Any, Dict, Iterable, Optional

from ..data.models import (
    FlightAggregate, PointProximity, ProximityReport, TurnpointValidation,
)
from ..data.parser import IGCParser
from ..config.constants import DEFAULT_ENCODING
from ..config.settings import settings
from ..exceptions import MissingTrackError
from ..utils.geodesy import distance
from .finalize import validate_turnpoints

# Configure logger
logger = logging.getLogger("igc_inspector.core.flight")


class IGCInspector:
    """
    Wraps the text of one IGC log.
    Call validate() to parse it; the parsed flight is kept for the query methods.
    """

    def __init__(self,
                 content: str,
                 with_raw: Optional[bool] = None,
                 max_speed_kmh: Optional[float] = None,
                 proximity_radius_m: Optional[float] = None,
                 filename: Optional[str] = None):
        """
        Initialize an inspector.

        Args:
            content: Text of the IGC log
            with_raw: Keep the raw text of every record
            max_speed_kmh: Speed ceiling for accepting fixes
            proximity_radius_m: Radius for turnpoint validation
            filename: Path the content was read from, if any
        """
        self.content = content
        self.filename = filename
        self.parser = IGCParser(
            with_raw=with_raw,
            max_speed_kmh=max_speed_kmh,
            proximity_radius_m=proximity_radius_m,
        )
        self._flight: Optional[FlightAggregate] = None

    @classmethod
    def from_file(cls, path: str, **kwargs) -> 'IGCInspector':
        """
        Create an inspector from an IGC file.

        Raises:
            FileNotFoundError: The file does not exist
        """
        if not os.path.isfile(path):
            raise FileNotFoundError(f"IGC file not found: {path}")
        with open(path, 'r', encoding=DEFAULT_ENCODING, errors='replace') as f:
            content = f.read()
        logger.debug(f"Read {len(content)} characters from {path}")
        return cls(content, filename=path, **kwargs)

    def validate(self) -> bool:
        """
        Parse the log.

        Returns:
            bool: True once the log is parsed

        Raises:
            IGCError: The log is empty or malformed
        """
        self._flight = self.parser.parse(self.content)
        return True

    @property
    def flight(self) -> Optional[FlightAggregate]:
        """The parsed flight, or None before a successful validate()"""
        return self._flight

    def get_metadata(self) -> Optional[Dict[str, Any]]:
        """Manufacturer, header and totals of the parsed flight"""
        if self._flight is None:
            return None
        return self._flight.metadata()

    def to_dict(self) -> Optional[Dict[str, Any]]:
        if self._flight is None:
            return None
        return self._flight.to_dict()

    def to_json(self, indent: Optional[int] = None) -> Optional[str]:
        """
        Serialise the parsed flight to JSON.

        Args:
            indent: JSON indentation (default: from settings)

        Returns:
            Optional[str]: JSON text, or None before a successful validate()
        """
        if self._flight is None:
            return None
        if indent is None:
            indent = settings.get('json_indent', 2)
        return json.dumps(self._flight.to_dict(), indent=indent, ensure_ascii=False)

    def validate_turnpoints(self, radius: Optional[float] = None) -> Optional[TurnpointValidation]:
        """
        Validate the task turnpoints again with another radius.
        The result replaces the one stored on the flight.

        Returns:
            Optional[TurnpointValidation]: None when the flight has no task waypoint or no fix
        """
        if self._flight is None:
            self.validate()
        flight = self._flight
        if radius is None:
            radius = self.parser.proximity_radius_m
        if flight.task is None or not flight.task.waypoints or not flight.fixes:
            logger.info("Nothing to validate: no task waypoints or no fixes")
            flight.turnpoint_validation = None
            return None
        flight.turnpoint_validation = validate_turnpoints(flight.task.waypoints, flight.fixes, radius)
        return flight.turnpoint_validation


def _coordinates(point: Any) -> Optional[tuple]:
    if isinstance(point, dict):
        latitude, longitude = point.get('latitude'), point.get('longitude')
    else:
        latitude, longitude = getattr(point, 'latitude', None), getattr(point, 'longitude', None)
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return None
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    return float(latitude), float(longitude)


def validate_points_proximity(points: Iterable[Any], radius: float, content: str,
                              **kwargs) -> ProximityReport:
    """
    Find how close the track of a log came to each of a list of points.

    Args:
        points: Dicts or objects with 'latitude' and 'longitude' in decimal degrees
        radius: Maximum distance in meters for a point to count as reached
        content: Text of the IGC log
        **kwargs: Passed to IGCParser

    Returns:
        ProximityReport: One entry per point, in the given order

    Raises:
        MissingTrackError: The log has no fix
        IGCError: The log is empty or malformed
    """
    flight = IGCParser(**kwargs).parse(content)
    if not flight.fixes:
        raise MissingTrackError("The log contains no position fix")

    report = ProximityReport(radius=radius)
    for index, point in enumerate(points):
        coordinates = _coordinates(point)
        if coordinates is None:
            report.points.append(PointProximity(
                index=index, latitude=None, longitude=None, validated=False,
                reason="missing or non-numeric coordinates",
            ))
            continue

        latitude, longitude = coordinates
        best_index, best_distance = min(
            ((fix_index, distance(fix.latitude, fix.longitude, latitude, longitude))
             for fix_index, fix in enumerate(flight.fixes)),
            key=lambda item: item[1],
        )
        validated = best_distance <= radius
        report.points.append(PointProximity(
            index=index,
            latitude=latitude,
            longitude=longitude,
            validated=validated,
            min_distance=round(best_distance, 2),
            closest_fix_index=best_index,
            closest_fix=flight.fixes[best_index],
            reason=None if validated else f"closest fix is {best_distance:.0f} m away",
        ))

    logger.info(f"{len(report.validated_points)}/{len(report.points)} points within {radius} m")
    return report
