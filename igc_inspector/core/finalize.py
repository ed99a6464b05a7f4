"""
Finalizers run once a log has been read completely.
Each one fills a derived section of the flight and copes with the
sections it depends on being absent.
"""

import datetime
import logging
from typing import List, Optional

from ..data.models import (
    FlightAggregate, Task, Waypoint, PositionFix, TurnpointMatch,
    TurnpointValidation, Event, EventSummary, DerivedStatistics,
)
from ..config.constants import DEFAULT_PROXIMITY_RADIUS_METERS, MPS_TO_KMH
from ..utils.geodesy import (
    distance, clock_to_seconds, seconds_to_clock, format_distance, format_speed,
)

# Configure logger
logger = logging.getLogger("igc_inspector.finalize")


def task_distance(waypoints: List[Waypoint]) -> Optional[float]:
    """
    Sum of the legs between consecutive waypoints.

    Returns:
        Optional[float]: Distance in meters, None with fewer than two waypoints
    """
    if len(waypoints) < 2:
        return None
    return sum(
        distance(a.latitude, a.longitude, b.latitude, b.longitude)
        for a, b in zip(waypoints, waypoints[1:])
    )


def finalize_task(task: Optional[Task]) -> None:
    """
    Name the start, finish and turnpoints of a task and measure it.

    The first declared point is the start and the last one the finish,
    even when they are 0/0 placeholders; turnpoints are the usable
    waypoints in between.
    """
    if task is None:
        return

    declared = task.declared_points
    if declared:
        task.start = declared[0]
        task.finish = declared[-1] if len(declared) > 1 else None
    task.turnpoints = [
        point for point in task.waypoints
        if point is not task.start and point is not task.finish
    ]

    task.distance = task_distance(task.waypoints)
    if task.distance is None:
        task.distance_km = None
        task.distance_formatted = None
    else:
        task.distance_km = round(task.distance / 1000.0, 2)
        task.distance_formatted = format_distance(task.distance)


def validate_turnpoints(waypoints: List[Waypoint], fixes: List[PositionFix],
                        radius: float = DEFAULT_PROXIMITY_RADIUS_METERS) -> TurnpointValidation:
    """
    Check that the track reached every waypoint, in declared order.

    Fixes are walked in time order; a fix within the radius of the next
    required waypoint validates it and the search moves on to the
    following waypoint with the following fix.

    Args:
        waypoints: Usable task waypoints in declared order
        fixes: Accepted fixes in time order
        radius: Proximity radius in meters

    Returns:
        TurnpointValidation: Validated and missed waypoints
    """
    result = TurnpointValidation(radius=radius)
    next_index = 0

    for fix_index, fix in enumerate(fixes):
        if next_index >= len(waypoints):
            break
        waypoint = waypoints[next_index]
        gap = distance(fix.latitude, fix.longitude, waypoint.latitude, waypoint.longitude)
        if gap <= radius:
            result.validated.append(TurnpointMatch(
                waypoint=waypoint, fix_index=fix_index, fix=fix, distance=gap,
            ))
            next_index += 1

    result.missed = list(waypoints[next_index:])
    return result


def _event_date(flight: FlightAggregate) -> Optional[datetime.date]:
    date = flight.flight_date
    if date is None and flight.fixes:
        date = flight.fixes[0].timestamp.date()
    return date


def finalize_events(flight: FlightAggregate) -> None:
    """Timestamp, sort and summarise the events of a flight"""
    date = _event_date(flight)
    if date is not None:
        midnight = datetime.datetime.combine(date, datetime.time(0), tzinfo=datetime.timezone.utc)
        for event in flight.events:
            event.timestamp = midnight + datetime.timedelta(seconds=clock_to_seconds(event.time))

    # Events without a timestamp sort first; sort is stable
    flight.events.sort(key=lambda event: (event.timestamp is not None,
                                          event.timestamp or datetime.datetime.min))

    summary = EventSummary()
    for event in flight.events:
        summary.by_category.setdefault(event.category, []).append(event)
        if event.category == 'start' and summary.first_start is None:
            summary.first_start = event
        if event.category == 'takeoff' and summary.first_takeoff is None:
            summary.first_takeoff = event
        if event.category in ('finish', 'landing'):
            summary.last_finish = event
    flight.event_summary = summary


def compute_statistics(flight: FlightAggregate) -> Optional[DerivedStatistics]:
    """
    Compute whole-flight statistics.

    Returns:
        Optional[DerivedStatistics]: None when the flight has no fix
    """
    fixes = flight.fixes
    if not fixes:
        logger.debug("No fixes, statistics skipped")
        return None

    totals = flight.totals
    first, last = fixes[0], fixes[-1]
    duration = (last.timestamp - first.timestamp).total_seconds()
    average = round(totals.total_distance / totals.total_time * MPS_TO_KMH, 2) if totals.total_time > 0 else 0.0

    qnh = [fix.pressure_altitude for fix in fixes]
    qfe = [fix.qfe for fix in fixes]
    gnss = [fix.gnss_altitude for fix in fixes]

    return DerivedStatistics(
        fix_count=len(fixes),
        flight_start=first.timestamp,
        flight_end=last.timestamp,
        duration_seconds=duration,
        duration=seconds_to_clock(duration),
        total_distance=totals.total_distance,
        total_distance_km=round(totals.total_distance / 1000.0, 2),
        total_distance_formatted=format_distance(totals.total_distance),
        total_time=totals.total_time,
        average_speed=average,
        average_speed_formatted=format_speed(average),
        max_speed=totals.max_speed,
        max_speed_formatted=format_speed(totals.max_speed),
        min_altitude=min(qnh),
        max_altitude=max(qnh),
        min_qfe=min(qfe),
        max_qfe=max(qfe),
        min_gnss_altitude=min(gnss),
        max_gnss_altitude=max(gnss),
    )


def finalize_flight(flight: FlightAggregate, radius: Optional[float] = None) -> FlightAggregate:
    """
    Run every finalizer on a freshly read flight.

    Args:
        flight: Flight built from a log
        radius: Turnpoint proximity radius in meters

    Returns:
        FlightAggregate: The same flight, completed
    """
    if radius is None:
        radius = DEFAULT_PROXIMITY_RADIUS_METERS

    finalize_task(flight.task)
    if flight.task is not None and flight.task.waypoints and flight.fixes:
        flight.turnpoint_validation = validate_turnpoints(flight.task.waypoints, flight.fixes, radius)
    finalize_events(flight)
    flight.statistics = compute_statistics(flight)
    return flight
