"""
Data models for IGC Inspector.
Contains classes representing the records of an IGC log and the flight built from them.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
import datetime
from enum import Enum


class SlotPolicy(Enum):
    """How records of one kind are stored in the flight"""
    UNIQUE = "unique"                # At most one record, stored as is
    MERGED_OBJECT = "merged_object"  # Fields of every record merged into one mapping
    SEQUENCE = "sequence"            # Records appended in line order
    IGNORED = "ignored"              # Read, never stored


class RecordKind(Enum):
    """Enum for the record kinds of an IGC log, keyed by their leading character"""
    MANUFACTURER = "A"
    FIX = "B"
    TASK = "C"
    EVENT = "E"
    HEADER = "H"
    FIX_EXTENSIONS = "I"
    EXTENSION_DATA = "K"
    LOGBOOK = "L"

    @classmethod
    def from_line(cls, line: str) -> Optional['RecordKind']:
        """Return the kind named by the first character of a line, or None"""
        if not line:
            return None
        try:
            return cls(line[0])
        except ValueError:
            return None

    @property
    def policy(self) -> SlotPolicy:
        return SLOT_POLICIES[self]


SLOT_POLICIES = {
    RecordKind.MANUFACTURER: SlotPolicy.UNIQUE,
    RecordKind.FIX: SlotPolicy.SEQUENCE,
    RecordKind.TASK: SlotPolicy.SEQUENCE,
    RecordKind.EVENT: SlotPolicy.SEQUENCE,
    RecordKind.HEADER: SlotPolicy.MERGED_OBJECT,
    RecordKind.FIX_EXTENSIONS: SlotPolicy.SEQUENCE,
    RecordKind.EXTENSION_DATA: SlotPolicy.SEQUENCE,
    RecordKind.LOGBOOK: SlotPolicy.IGNORED,
}


def _iso(value: Optional[datetime.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Manufacturer:
    """
    Represents the A record: flight recorder manufacturer and serial number.
    Format: A<manufacturer:3><serial>[-<additional data>]
    """
    manufacturer_id: Optional[str]
    serial_number: Optional[str]
    additional_data: Optional[str] = None
    manufacturer_name: Optional[str] = None
    approved_manufacturer: bool = False
    line_number: int = 1
    raw: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the object to a dictionary"""
        result = {
            "manufacturer_id": self.manufacturer_id,
            "serial_number": self.serial_number,
            "additional_data": self.additional_data,
            "manufacturer_name": self.manufacturer_name,
            "approved_manufacturer": self.approved_manufacturer,
        }
        if self.raw is not None:
            result["raw"] = self.raw
        return result


@dataclass
class FixExtension:
    """
    One extension declared by an I record.
    Start and end are 1-based inclusive byte positions in the B record.
    """
    code: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def slice(self, line: str) -> Optional[str]:
        """Return the extension value carried by a B line, or None if the line is too short"""
        if len(line) < self.end:
            return None
        return line[self.start - 1:self.end]

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "start": self.start, "end": self.end}


@dataclass
class PositionFix:
    """
    Represents a B record accepted into the track.
    Altitudes are in meters, speed in km/h, distances in meters.
    """
    line_number: int
    time: str
    timestamp: datetime.datetime
    latitude: float
    longitude: float
    validity: str
    pressure_altitude: int
    gnss_altitude: int
    fix_accuracy: Optional[int] = None
    satellites: Optional[int] = None
    engine_noise: Optional[int] = None
    extensions: Dict[str, str] = field(default_factory=dict)
    distance_from_last: float = 0.0
    speed: float = 0.0
    qfe: int = 0
    raw: Optional[str] = None

    @property
    def valid(self) -> bool:
        """True for a 3D fix ('A'), False for a 2D or no-GNSS fix ('V')"""
        return self.validity == 'A'

    @property
    def qnh(self) -> int:
        return self.pressure_altitude

    def to_dict(self) -> Dict[str, Any]:
        """Convert the object to a dictionary"""
        result = {
            "line_number": self.line_number,
            "time": self.time,
            "timestamp": _iso(self.timestamp),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "validity": self.validity,
            "valid": self.valid,
            "pressure_altitude": self.pressure_altitude,
            "gnss_altitude": self.gnss_altitude,
            "qnh": self.qnh,
            "qfe": self.qfe,
            "fix_accuracy": self.fix_accuracy,
            "satellites": self.satellites,
            "engine_noise": self.engine_noise,
            "extensions": dict(self.extensions),
            "distance_from_last": self.distance_from_last,
            "speed": self.speed,
        }
        if self.raw is not None:
            result["raw"] = self.raw
        return result


@dataclass
class TaskDeclaration:
    """
    The first C record of a task.
    Format: C<DDMMYY><HHMMSS><flight date DDMMYY><task number:4><turnpoints:2><text>
    """
    line_number: int
    date: Optional[str]
    time: Optional[str]
    flight_date: Optional[str] = None
    task_number: Optional[int] = None
    turnpoint_count: Optional[int] = None
    text: Optional[str] = None
    data: Optional[str] = None
    raw: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "line_number": self.line_number,
            "date": self.date,
            "time": self.time,
            "flight_date": self.flight_date,
            "task_number": self.task_number,
            "turnpoint_count": self.turnpoint_count,
            "text": self.text,
            "data": self.data,
        }
        if self.raw is not None:
            result["raw"] = self.raw
        return result


@dataclass
class Waypoint:
    """
    A task point from a C record.
    The 0/0 position is used by recorders as a placeholder for takeoff and landing.
    """
    line_number: int
    index: int
    latitude: float
    longitude: float
    name: str = ""
    is_start_finish: bool = False
    raw: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "line_number": self.line_number,
            "index": self.index,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "name": self.name,
            "is_start_finish": self.is_start_finish,
        }
        if self.raw is not None:
            result["raw"] = self.raw
        return result


@dataclass
class Task:
    """
    The declared task: declaration, usable waypoints, and the 0/0 markers
    that were kept out of the waypoint list.
    """
    declaration: Optional[TaskDeclaration] = None
    waypoints: List[Waypoint] = field(default_factory=list)
    markers: List[Waypoint] = field(default_factory=list)
    start: Optional[Waypoint] = None
    finish: Optional[Waypoint] = None
    turnpoints: List[Waypoint] = field(default_factory=list)
    distance: Optional[float] = None
    distance_km: Optional[float] = None
    distance_formatted: Optional[str] = None

    @property
    def declared_points(self) -> List[Waypoint]:
        """Every C waypoint line, markers included, in declaration order"""
        return sorted(self.waypoints + self.markers, key=lambda point: point.index)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the object to a dictionary"""
        return {
            "declaration": self.declaration.to_dict() if self.declaration else None,
            "waypoints": [point.to_dict() for point in self.waypoints],
            "markers": [point.to_dict() for point in self.markers],
            "start": self.start.to_dict() if self.start else None,
            "finish": self.finish.to_dict() if self.finish else None,
            "turnpoints": [point.to_dict() for point in self.turnpoints],
            "turnpoint_count": len(self.turnpoints),
            "distance": self.distance,
            "distance_km": self.distance_km,
            "distance_formatted": self.distance_formatted,
        }


@dataclass
class Event:
    """
    Represents an E record.
    Format: E<HHMMSS><code><text>
    """
    line_number: int
    time: str
    code: Optional[str]
    category: str
    category_description: str
    is_recognized: bool
    description: Optional[str] = None
    timestamp: Optional[datetime.datetime] = None
    raw: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the object to a dictionary"""
        result = {
            "line_number": self.line_number,
            "time": self.time,
            "code": self.code,
            "category": self.category,
            "category_description": self.category_description,
            "is_recognized": self.is_recognized,
            "description": self.description,
            "timestamp": _iso(self.timestamp),
        }
        if self.raw is not None:
            result["raw"] = self.raw
        return result


@dataclass
class RunningTotals:
    """Totals kept while fixes stream in"""
    fix_record_count: int = 0
    rejected_fix_count: int = 0
    total_distance: float = 0.0
    total_time: float = 0.0
    max_speed: float = 0.0

    @property
    def accepted_fix_count(self) -> int:
        return self.fix_record_count - self.rejected_fix_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fix_record_count": self.fix_record_count,
            "accepted_fix_count": self.accepted_fix_count,
            "rejected_fix_count": self.rejected_fix_count,
            "total_distance": self.total_distance,
            "total_time": self.total_time,
            "max_speed": self.max_speed,
        }


@dataclass
class TurnpointMatch:
    """A waypoint reached by a fix of the track"""
    waypoint: Waypoint
    fix_index: int
    fix: PositionFix
    distance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "waypoint": self.waypoint.to_dict(),
            "fix_index": self.fix_index,
            "fix_time": self.fix.time,
            "fix_timestamp": _iso(self.fix.timestamp),
            "distance": self.distance,
        }


@dataclass
class TurnpointValidation:
    """Outcome of checking that the track reached the task waypoints in order"""
    radius: float
    validated: List[TurnpointMatch] = field(default_factory=list)
    missed: List[Waypoint] = field(default_factory=list)

    @property
    def validated_count(self) -> int:
        return len(self.validated)

    @property
    def total(self) -> int:
        return len(self.validated) + len(self.missed)

    @property
    def all_validated(self) -> bool:
        return not self.missed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "radius": self.radius,
            "validated": [match.to_dict() for match in self.validated],
            "missed": [point.to_dict() for point in self.missed],
            "validated_count": self.validated_count,
            "total": self.total,
            "all_validated": self.all_validated,
        }


@dataclass
class EventSummary:
    """Notable events and events grouped by category"""
    first_start: Optional[Event] = None
    last_finish: Optional[Event] = None
    first_takeoff: Optional[Event] = None
    by_category: Dict[str, List[Event]] = field(default_factory=dict)

    @property
    def counts(self) -> Dict[str, int]:
        return {category: len(events) for category, events in self.by_category.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "first_start": self.first_start.to_dict() if self.first_start else None,
            "last_finish": self.last_finish.to_dict() if self.last_finish else None,
            "first_takeoff": self.first_takeoff.to_dict() if self.first_takeoff else None,
            "by_category": {
                category: [event.to_dict() for event in events]
                for category, events in self.by_category.items()
            },
            "counts": self.counts,
        }


@dataclass
class DerivedStatistics:
    """Whole-flight figures computed once the track is complete"""
    fix_count: int
    flight_start: datetime.datetime
    flight_end: datetime.datetime
    duration_seconds: float
    duration: str
    total_distance: float
    total_distance_km: float
    total_distance_formatted: str
    total_time: float
    average_speed: float
    average_speed_formatted: str
    max_speed: float
    max_speed_formatted: str
    min_altitude: int
    max_altitude: int
    min_qfe: int
    max_qfe: int
    min_gnss_altitude: int
    max_gnss_altitude: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert the object to a dictionary"""
        return {
            "fix_count": self.fix_count,
            "flight_start": _iso(self.flight_start),
            "flight_end": _iso(self.flight_end),
            "duration_seconds": self.duration_seconds,
            "duration": self.duration,
            "total_distance": self.total_distance,
            "total_distance_km": self.total_distance_km,
            "total_distance_formatted": self.total_distance_formatted,
            "total_time": self.total_time,
            "average_speed": self.average_speed,
            "average_speed_formatted": self.average_speed_formatted,
            "max_speed": self.max_speed,
            "max_speed_formatted": self.max_speed_formatted,
            "altitude": {
                "min_qnh": self.min_altitude,
                "max_qnh": self.max_altitude,
                "min_qfe": self.min_qfe,
                "max_qfe": self.max_qfe,
                "min_gnss": self.min_gnss_altitude,
                "max_gnss": self.max_gnss_altitude,
            },
        }


@dataclass
class PointProximity:
    """Nearest approach of the track to a caller supplied point"""
    index: int
    latitude: Optional[float]
    longitude: Optional[float]
    validated: bool
    min_distance: Optional[float] = None
    closest_fix_index: Optional[int] = None
    closest_fix: Optional[PositionFix] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "validated": self.validated,
            "min_distance": self.min_distance,
            "closest_fix_index": self.closest_fix_index,
            "closest_fix_time": self.closest_fix.time if self.closest_fix else None,
            "reason": self.reason,
        }


@dataclass
class ProximityReport:
    radius: float
    points: List[PointProximity] = field(default_factory=list)

    @property
    def validated_points(self) -> List[PointProximity]:
        return [point for point in self.points if point.validated]

    @property
    def invalidated_points(self) -> List[PointProximity]:
        return [point for point in self.points if not point.validated]

    @property
    def all_validated(self) -> bool:
        return all(point.validated for point in self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "radius": self.radius,
            "total_points": len(self.points),
            "validated_count": len(self.validated_points),
            "all_validated": self.all_validated,
            "validated_points": [point.to_dict() for point in self.validated_points],
            "invalidated_points": [point.to_dict() for point in self.invalidated_points],
        }


@dataclass
class FlightAggregate:
    """
    Everything read from one IGC log.
    One attribute per record kind, filled while the log is read,
    plus the sections computed once reading is over.
    """
    manufacturer: Optional[Manufacturer] = None
    header: Dict[str, Any] = field(default_factory=dict)
    fixes: List[PositionFix] = field(default_factory=list)
    task: Optional[Task] = None
    events: List[Event] = field(default_factory=list)
    fix_extensions: List[FixExtension] = field(default_factory=list)
    extension_data: List[Dict[str, Any]] = field(default_factory=list)
    totals: RunningTotals = field(default_factory=RunningTotals)
    turnpoint_validation: Optional[TurnpointValidation] = None
    event_summary: Optional[EventSummary] = None
    statistics: Optional[DerivedStatistics] = None

    @property
    def flight_date(self) -> Optional[datetime.date]:
        """Date from the HFDTE header, or None"""
        value = self.header.get("date")
        if not value:
            return None
        return datetime.date.fromisoformat(value)

    def metadata(self) -> Dict[str, Any]:
        """Return the single-valued part of the flight: manufacturer, header and totals"""
        return {
            "manufacturer": self.manufacturer.to_dict() if self.manufacturer else None,
            "header": dict(self.header),
            "totals": self.totals.to_dict(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the flight to a JSON-ready dictionary"""
        result = self.metadata()
        result.update({
            "fixes": [fix.to_dict() for fix in self.fixes],
            "task": self.task.to_dict() if self.task else None,
            "events": [event.to_dict() for event in self.events],
            "fix_extensions": [extension.to_dict() for extension in self.fix_extensions],
            "extension_data": [dict(item) for item in self.extension_data],
            "turnpoint_validation": (
                self.turnpoint_validation.to_dict() if self.turnpoint_validation else None
            ),
            "event_summary": self.event_summary.to_dict() if self.event_summary else None,
            "statistics": self.statistics.to_dict() if self.statistics else None,
        })
        return result
