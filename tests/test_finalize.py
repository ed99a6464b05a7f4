"""
Tests for the flight finalizers.
"""

import datetime
import pytest
from igc_inspector.core.finalize import (
    finalize_task, validate_turnpoints, finalize_events, compute_statistics, task_distance,
)
from igc_inspector.data.models import (
    Task, Waypoint, PositionFix, Event, FlightAggregate, RunningTotals,
)
from igc_inspector.data.parser import IGCParser
from igc_inspector.utils.geodesy import distance

UTC = datetime.timezone.utc


def waypoint(index, latitude, longitude, name=""):
    return Waypoint(line_number=index + 10, index=index, latitude=latitude, longitude=longitude,
                    name=name, is_start_finish=(latitude == 0 and longitude == 0))


def fix(seconds, latitude, longitude, pressure=1000, gnss=1100):
    timestamp = datetime.datetime(2022, 7, 15, 10, 0, 0, tzinfo=UTC) + datetime.timedelta(seconds=seconds)
    return PositionFix(line_number=seconds, time=timestamp.strftime("%H:%M:%S"), timestamp=timestamp,
                       latitude=latitude, longitude=longitude, validity='A',
                       pressure_altitude=pressure, gnss_altitude=gnss)


def event(time, code, category):
    return Event(line_number=1, time=time, code=code, category=category,
                 category_description="", is_recognized=category != 'other')


class TestTaskFinalizer:
    """Test cases for task start, finish, turnpoints and distance."""

    def test_sentinels_frame_the_task(self):
        """Test [0/0, W2, W3, 0/0]: two turnpoints, distance W2 to W3."""
        w2, w3 = waypoint(1, 46.0, 6.0, "W2"), waypoint(2, 46.5, 6.5, "W3")
        task = Task(waypoints=[w2, w3], markers=[waypoint(0, 0.0, 0.0), waypoint(3, 0.0, 0.0)])

        finalize_task(task)

        assert [point.name for point in task.turnpoints] == ["W2", "W3"]
        assert task.start.is_start_finish
        assert task.finish.is_start_finish
        assert abs(task.distance - distance(46.0, 6.0, 46.5, 6.5)) < 1e-6
        assert task.distance_km == round(task.distance / 1000, 2)
        assert task.distance_formatted.endswith(" km")

    def test_plain_waypoints(self):
        points = [waypoint(i, 46.0 + i * 0.1, 6.0, f"W{i}") for i in range(4)]
        task = Task(waypoints=list(points))

        finalize_task(task)

        assert task.start is points[0]
        assert task.finish is points[3]
        assert task.turnpoints == points[1:3]
        legs = sum(distance(a.latitude, a.longitude, b.latitude, b.longitude)
                   for a, b in zip(points, points[1:]))
        assert abs(task.distance - legs) < 1e-6

    def test_single_waypoint_has_no_distance(self):
        task = Task(waypoints=[waypoint(0, 46.0, 6.0)])
        finalize_task(task)
        assert task.distance is None
        assert task.distance_km is None
        assert task_distance([]) is None

    def test_no_task(self):
        finalize_task(None)


class TestTurnpointValidation:
    """Test cases for the greedy in-order turnpoint check."""

    def test_all_reached_in_order(self):
        points = [waypoint(0, 46.0, 6.0), waypoint(1, 46.1, 6.0)]
        fixes = [fix(0, 46.0, 6.0), fix(60, 46.05, 6.0), fix(120, 46.1001, 6.0)]

        result = validate_turnpoints(points, fixes, 500)

        assert result.all_validated
        assert result.validated_count == 2
        assert result.total == 2
        assert [match.fix_index for match in result.validated] == [0, 2]

    def test_order_is_enforced(self):
        """Test that reaching the second waypoint first does not count."""
        points = [waypoint(0, 46.0, 6.0), waypoint(1, 46.1, 6.0)]
        fixes = [fix(0, 46.1, 6.0), fix(60, 46.0, 6.0)]

        result = validate_turnpoints(points, fixes, 500)

        assert result.validated_count == 1
        assert result.validated[0].waypoint is points[0]
        assert result.missed == [points[1]]
        assert not result.all_validated

    def test_one_fix_validates_one_waypoint(self):
        points = [waypoint(0, 46.0, 6.0), waypoint(1, 46.0, 6.0)]
        result = validate_turnpoints(points, [fix(0, 46.0, 6.0)], 500)
        assert result.validated_count == 1

    def test_radius(self):
        points = [waypoint(0, 46.0, 6.0)]
        fixes = [fix(0, 46.0 + 1 / 60, 6.0)]
        assert not validate_turnpoints(points, fixes, 1000).all_validated
        assert validate_turnpoints(points, fixes, 2000).all_validated


class TestEventFinalizer:
    """Test cases for event timestamps, order and summary."""

    def test_sorted_and_summarised(self):
        flight = FlightAggregate(header={'date': "2022-07-15"}, events=[
            event("12:00:00", "FIN", "finish"),
            event("10:00:00", "STA", "start"),
            event("11:00:00", "PEV", "pilot_event"),
            event("10:30:00", "STA", "start"),
        ])

        finalize_events(flight)

        assert [e.time for e in flight.events] == ["10:00:00", "10:30:00", "11:00:00", "12:00:00"]
        assert flight.events[0].timestamp == datetime.datetime(2022, 7, 15, 10, 0, tzinfo=UTC)
        summary = flight.event_summary
        assert summary.first_start.time == "10:00:00"
        assert summary.last_finish.time == "12:00:00"
        assert summary.first_takeoff is None
        assert summary.counts == {'start': 2, 'pilot_event': 1, 'finish': 1}

    def test_date_from_first_fix(self):
        flight = FlightAggregate(fixes=[fix(0, 46.0, 6.0)], events=[event("10:05:00", "PEV", "pilot_event")])
        finalize_events(flight)
        assert flight.events[0].timestamp.date() == datetime.date(2022, 7, 15)

    def test_without_any_date(self):
        flight = FlightAggregate(events=[event("10:05:00", "PEV", "pilot_event")])
        finalize_events(flight)
        assert flight.events[0].timestamp is None
        assert flight.event_summary.counts == {'pilot_event': 1}


class TestStatistics:
    """Test cases for derived statistics."""

    def test_no_fixes(self):
        assert compute_statistics(FlightAggregate()) is None

    def test_from_sample(self, sample_igc):
        flight = IGCParser(max_speed_kmh=400).parse(sample_igc)
        stats = flight.statistics

        assert stats.fix_count == 3
        assert stats.duration_seconds == 1200
        assert stats.duration == "00:20:00"
        assert abs(stats.total_distance - 1855.32) < 0.05
        assert stats.total_distance_km == 1.86
        assert stats.total_distance_formatted == "1.86 km"
        assert abs(stats.average_speed - 5.57) < 0.01
        assert abs(stats.max_speed - 6.0) < 0.01
        assert stats.min_altitude == 1000
        assert stats.max_altitude == 1100
        assert stats.min_qfe == 0
        assert stats.max_qfe == 100
        assert stats.max_gnss_altitude == 1200

    def test_average_speed_without_time(self):
        flight = FlightAggregate(fixes=[fix(0, 46.0, 6.0)], totals=RunningTotals(fix_record_count=1))
        stats = compute_statistics(flight)
        assert stats.average_speed == 0.0
        assert stats.duration == "00:00:00"


class TestSampleFlight:
    """Test the finalizers together on the sample log."""

    @pytest.fixture
    def flight(self, sample_igc):
        return IGCParser(max_speed_kmh=400, proximity_radius_m=500).parse(sample_igc)

    def test_task(self, flight):
        task = flight.task
        assert task.declaration.turnpoint_count == 2
        assert [point.name for point in task.turnpoints] == ["START", "TP1"]
        assert task.start.name == "TAKEOFF"
        assert task.finish.name == "LANDING"
        assert abs(task.distance - 1855.32) < 0.05

    def test_turnpoints_validated(self, flight):
        validation = flight.turnpoint_validation
        assert validation.radius == 500
        assert validation.all_validated
        assert [match.waypoint.name for match in validation.validated] == ["START", "TP1"]

    def test_events(self, flight):
        assert [e.code for e in flight.events] == ["STA", "PEV", "FIN"]
        assert flight.event_summary.first_start.code == "STA"
        assert flight.event_summary.last_finish.code == "FIN"
