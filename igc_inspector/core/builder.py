"""
Aggregate builder for IGC Inspector.
Receives parsed records in line order and folds them into a FlightAggregate,
keeping running totals and dropping implausible fixes as they arrive.
"""

import datetime
import logging
import math
from typing import Any, Dict, Optional

from ..data.models import (
    RecordKind, SlotPolicy, FlightAggregate, Manufacturer, PositionFix,
    Task, TaskDeclaration, Waypoint, Event,
)
from ..config.constants import (
    MAX_VALID_SPEED_KMH, MIDNIGHT_ROLLOVER_WINDOW,
)
from ..exceptions import RecordRejected
from ..utils.geodesy import distance, speed_kmh, clock_to_seconds

# Configure logger
logger = logging.getLogger("igc_inspector.builder")


class FlightBuilder:
    """
    Builds one FlightAggregate.
    Records are routed by the slot policy of their kind; sequence kinds
    go through a hook that may veto or transform them.
    """

    def __init__(self, max_speed_kmh: float = MAX_VALID_SPEED_KMH, with_raw: bool = False):
        self.flight = FlightAggregate()
        self.max_speed_kmh = max_speed_kmh
        self.with_raw = with_raw

        self._track_date: Optional[datetime.date] = None
        self._waypoint_index = 0

        self._sequence_hooks = {
            RecordKind.FIX: self._add_fix,
            RecordKind.TASK: self._add_task_record,
            RecordKind.EVENT: self._add_event,
            RecordKind.FIX_EXTENSIONS: self._add_fix_extensions,
            RecordKind.EXTENSION_DATA: self._add_extension_data,
        }

    def add(self, kind: RecordKind, record: Dict[str, Any], line_number: int) -> None:
        """
        Fold one parsed record into the flight.

        Args:
            kind: Record kind
            record: Fields produced by the kind's grammar
            line_number: Line the record was read from
        """
        policy = kind.policy
        if policy == SlotPolicy.UNIQUE:
            self._set_manufacturer(record, line_number)
        elif policy == SlotPolicy.MERGED_OBJECT:
            self._merge_header(record)
        elif policy == SlotPolicy.SEQUENCE:
            self._sequence_hooks[kind](record, line_number)

    def _set_manufacturer(self, record: Dict[str, Any], line_number: int) -> None:
        self.flight.manufacturer = Manufacturer(
            manufacturer_id=record.get('manufacturer_id'),
            serial_number=record.get('serial_number'),
            additional_data=record.get('additional_data'),
            manufacturer_name=record.get('manufacturer_name'),
            approved_manufacturer=record.get('approved_manufacturer', False),
            line_number=line_number,
            raw=record.get('raw'),
        )

    def _merge_header(self, record: Dict[str, Any]) -> None:
        header = self.flight.header
        for key, value in record.items():
            if key == 'raw':
                header.setdefault('raw', []).append(value)
            elif value is not None:
                header[key] = value
        if record.get('date') is not None:
            self._rebase_track_date(self.flight.flight_date)

    def _resolve_track_date(self) -> datetime.date:
        if self._track_date is None:
            self._track_date = self.flight.flight_date
            if self._track_date is None:
                self._track_date = datetime.datetime.now(datetime.timezone.utc).date()
                logger.warning(f"No flight date before the first fix, using {self._track_date}")
        return self._track_date

    def _rebase_track_date(self, date: datetime.date) -> None:
        """Move the fixes already accepted onto the date given by the header"""
        if self._track_date is None or self._track_date == date:
            return
        shift = date - self._track_date
        for fix in self.flight.fixes:
            fix.timestamp += shift
        logger.info(f"Flight date {date} replaces {self._track_date} "
                    f"for {len(self.flight.fixes)} fixes")
        self._track_date = date

    def _follow(self, previous: PositionFix, seconds: int) -> Optional[datetime.datetime]:
        """
        Timestamp of a clock time read after a given fix.

        Returns:
            Optional[datetime.datetime]: None when the time goes back and is not
                just after midnight
        """
        day_offset = (previous.timestamp.date() - self._resolve_track_date()).days
        if seconds < clock_to_seconds(previous.time):
            if seconds >= MIDNIGHT_ROLLOVER_WINDOW:
                return None
            day_offset += 1
        midnight = datetime.datetime.combine(self._resolve_track_date(), datetime.time(0),
                                             tzinfo=datetime.timezone.utc)
        return midnight + datetime.timedelta(days=day_offset, seconds=seconds)

    def _check_speed(self, previous: PositionFix, fix: PositionFix, line_number: int) -> None:
        leg = distance(previous.latitude, previous.longitude, fix.latitude, fix.longitude)
        elapsed = (fix.timestamp - previous.timestamp).total_seconds()
        speed = speed_kmh(leg, elapsed)
        if not math.isfinite(speed) or speed > self.max_speed_kmh:
            raise RecordRejected(f"speed {speed} km/h over {leg:.1f} m in {elapsed:.0f} s",
                                 line_number)
        fix.distance_from_last = leg
        fix.speed = speed

    def _admit_fix(self, record: Dict[str, Any], line_number: int) -> PositionFix:
        """
        Build a PositionFix from a B record and check it against the last accepted fix.

        A fix whose time goes back is checked against the fix before the last
        one instead. When it fits there, the last fix is taken as the outlier
        and retracted, so a single bad time cannot shut out the rest of the track.

        Raises:
            RecordRejected: The fix goes back in time or implies an impossible speed
        """
        fixes = self.flight.fixes
        seconds = clock_to_seconds(record['time'])
        fix = PositionFix(
            line_number=line_number,
            time=record['time'],
            timestamp=None,
            latitude=record['latitude'],
            longitude=record['longitude'],
            validity=record['validity'],
            pressure_altitude=record['pressure_altitude'],
            gnss_altitude=record['gnss_altitude'],
            fix_accuracy=record.get('fix_accuracy'),
            satellites=record.get('satellites'),
            engine_noise=record.get('engine_noise'),
            extensions=record.get('extensions', {}),
            raw=record.get('raw'),
        )

        if not fixes:
            midnight = datetime.datetime.combine(self._resolve_track_date(), datetime.time(0),
                                                 tzinfo=datetime.timezone.utc)
            fix.timestamp = midnight + datetime.timedelta(seconds=seconds)
            return fix

        last = fixes[-1]
        fix.timestamp = self._follow(last, seconds)
        if fix.timestamp is not None:
            self._check_speed(last, fix, line_number)
            return fix

        if len(fixes) == 1:
            # Nothing to weigh the first fix against: the earlier time wins
            fix.timestamp = last.timestamp - datetime.timedelta(
                seconds=clock_to_seconds(last.time) - seconds)
            self._retract_last_fix(line_number)
            return fix

        earlier = fixes[-2]
        fix.timestamp = self._follow(earlier, seconds)
        if fix.timestamp is None:
            raise RecordRejected(f"time goes back from {last.time} to {record['time']}",
                                 line_number)
        self._check_speed(earlier, fix, line_number)
        self._retract_last_fix(line_number)
        return fix

    def _retract_last_fix(self, line_number: int) -> None:
        """Drop the last accepted fix and take it out of the running totals"""
        fixes = self.flight.fixes
        totals = self.flight.totals
        dropped = fixes.pop()
        totals.rejected_fix_count += 1
        if fixes:
            totals.total_distance -= dropped.distance_from_last
            totals.total_time -= (dropped.timestamp - fixes[-1].timestamp).total_seconds()
            totals.max_speed = max(fix.speed for fix in fixes)
        logger.debug(f"Line {line_number}: fix of line {dropped.line_number} retracted, "
                     f"its time {dropped.time} is out of sequence")

    def _add_fix(self, record: Dict[str, Any], line_number: int) -> None:
        totals = self.flight.totals
        totals.fix_record_count += 1
        try:
            fix = self._admit_fix(record, line_number)
        except RecordRejected as e:
            totals.rejected_fix_count += 1
            logger.debug(f"Line {line_number}: fix rejected, {e.reason}")
            return

        fixes = self.flight.fixes
        if fixes:
            totals.total_distance += fix.distance_from_last
            totals.total_time += (fix.timestamp - fixes[-1].timestamp).total_seconds()
            totals.max_speed = max(totals.max_speed, fix.speed)
            fix.qfe = fix.pressure_altitude - fixes[0].pressure_altitude
        else:
            fix.distance_from_last = 0.0
            fix.speed = 0.0
        fixes.append(fix)

    def _task(self) -> Task:
        if self.flight.task is None:
            self.flight.task = Task()
        return self.flight.task

    def _add_task_record(self, record: Dict[str, Any], line_number: int) -> None:
        task = self._task()
        if record['record_type'] == 'declaration':
            if task.declaration is not None:
                logger.warning(f"Line {line_number}: second task declaration replaces "
                               f"the one at line {task.declaration.line_number}")
            task.declaration = TaskDeclaration(
                line_number=line_number,
                date=record.get('date'),
                time=record.get('time'),
                flight_date=record.get('flight_date'),
                task_number=record.get('task_number'),
                turnpoint_count=record.get('turnpoint_count'),
                text=record.get('text'),
                data=record.get('data'),
                raw=record.get('raw'),
            )
            return

        waypoint = Waypoint(
            line_number=line_number,
            index=self._waypoint_index,
            latitude=record['latitude'],
            longitude=record['longitude'],
            name=record.get('name', ''),
            is_start_finish=record['is_start_finish'],
            raw=record.get('raw'),
        )
        self._waypoint_index += 1
        # 0/0 placeholders never take part in distances or turnpoint checks
        if waypoint.is_start_finish:
            task.markers.append(waypoint)
        else:
            task.waypoints.append(waypoint)

    def _add_event(self, record: Dict[str, Any], line_number: int) -> None:
        self.flight.events.append(Event(
            line_number=line_number,
            time=record['time'],
            code=record.get('code'),
            category=record['category'],
            category_description=record['category_description'],
            is_recognized=record['is_recognized'],
            description=record.get('description'),
            raw=record.get('raw'),
        ))

    def _add_fix_extensions(self, record: Dict[str, Any], line_number: int) -> None:
        if self.flight.fix_extensions:
            logger.warning(f"Line {line_number}: fix extensions redefined")
        self.flight.fix_extensions = list(record['extensions'])

    def _add_extension_data(self, record: Dict[str, Any], line_number: int) -> None:
        item = {'line_number': line_number, 'time': record.get('time'), 'data': record.get('data')}
        if record.get('raw') is not None:
            item['raw'] = record['raw']
        self.flight.extension_data.append(item)
