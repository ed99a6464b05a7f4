"""
IGC file writer module for IGC Inspector.
Writes a cleaned copy of a parsed flight using the aerofiles library:
headers, task, events and the accepted fixes only.
"""

import datetime
import io
import logging
import re
from typing import BinaryIO, List

from aerofiles.igc import Writer

from ..data.models import FlightAggregate, PositionFix
from ..config.constants import (
    EXPORT_MANUFACTURER_CODE, EXPORT_LOGGER_ID, APP_NAME, APP_VERSION,
)

# Configure logger
logger = logging.getLogger("igc_inspector.io.igc")

_MANUFACTURER_CODE = re.compile(r'^[A-Z]{3}$')
_LOGGER_ID = re.compile(r'^[A-Z0-9]{3}$')

# Extensions written on every B record
FIX_EXTENSIONS = [('FXA', 3), ('SIU', 2), ('ENL', 3)]


class IGCExporter:
    """
    Writes a FlightAggregate back to the IGC format.
    Rejected fixes are left out, so the output is a cleaned log.
    """

    def __init__(self, flight: FlightAggregate):
        """
        Initialize the exporter.

        Args:
            flight: Parsed flight to write
        """
        self.flight = flight

    def _logger_identity(self):
        manufacturer = self.flight.manufacturer
        code = manufacturer.manufacturer_id if manufacturer else None
        serial = manufacturer.serial_number if manufacturer else None
        if not code or not _MANUFACTURER_CODE.match(code):
            code = EXPORT_MANUFACTURER_CODE
        if not serial or not _LOGGER_ID.match(serial[:3]):
            serial = EXPORT_LOGGER_ID
        return code, serial[:3]

    def _flight_date(self) -> datetime.date:
        date = self.flight.flight_date
        if date is None and self.flight.fixes:
            date = self.flight.fixes[0].timestamp.date()
        if date is None:
            date = datetime.datetime.now(datetime.timezone.utc).date()
        return date

    def _write_header(self, writer: Writer) -> None:
        header = self.flight.header
        code, logger_id = self._logger_identity()
        headers = {
            'manufacturer_code': code,
            'logger_id': logger_id,
            'date': self._flight_date(),
            'logger_type': header.get('logger_type') or APP_NAME,
            'gps_receiver': header.get('gps_manufacturer') or 'UNKNOWN',
            'firmware_version': header.get('firmware_version') or APP_VERSION,
            'hardware_version': header.get('hardware_version') or '',
            'pilot': header.get('pilot') or '',
            'glider_type': header.get('glider_type') or '',
            'glider_id': header.get('glider_id') or '',
            'gps_datum': header.get('gps_datum') or 'WGS-1984',
        }
        if header.get('competition_class'):
            headers['competition_class'] = header['competition_class']
        if header.get('competition_id'):
            headers['competition_id'] = header['competition_id']
        writer.write_headers(headers)
        writer.write_fix_extensions(FIX_EXTENSIONS)

    def _write_task(self, writer: Writer) -> None:
        task = self.flight.task
        if task is None or not task.declared_points:
            return

        declaration = task.declaration
        declared_at = datetime.datetime.combine(self._flight_date(), datetime.time(0))
        if declaration is not None and declaration.date and declaration.time:
            declared_at = datetime.datetime.strptime(
                f"{declaration.date} {declaration.time}", "%Y-%m-%d %H:%M:%S"
            )
        writer.write_task_metadata(
            declaration_datetime=declared_at,
            task_number=(declaration.task_number if declaration and declaration.task_number else 1),
            turnpoints=len(task.turnpoints),
            text=(declaration.text if declaration and declaration.text else None),
        )
        for point in task.declared_points:
            writer.write_task_point(
                latitude=point.latitude,
                longitude=point.longitude,
                text=point.name,
            )

    def _write_events(self, writer: Writer) -> None:
        for event in self.flight.events:
            if not event.code:
                continue
            time = datetime.datetime.strptime(event.time, "%H:%M:%S").time()
            # aerofiles only accepts three character codes
            text = event.code[3:] + (event.description or '')
            writer.write_event(time, event.code[:3], text)

    @staticmethod
    def _extension_values(fix: PositionFix) -> List[int]:
        values = [fix.fix_accuracy, fix.satellites, fix.engine_noise]
        return [
            min(value or 0, 10 ** length - 1)
            for value, (_, length) in zip(values, FIX_EXTENSIONS)
        ]

    def _write_fixes(self, writer: Writer) -> None:
        for fix in self.flight.fixes:
            writer.write_fix(
                time=fix.timestamp.time(),
                latitude=fix.latitude,
                longitude=fix.longitude,
                valid=fix.valid,
                pressure_alt=fix.pressure_altitude,
                gps_alt=fix.gnss_altitude,
                extensions=self._extension_values(fix),
            )

    def write(self, fp: BinaryIO) -> int:
        """
        Write the flight to a binary stream.

        Args:
            fp: Stream opened in binary mode (required by aerofiles)

        Returns:
            int: Number of fixes written
        """
        writer = Writer(fp)
        self._write_header(writer)
        self._write_task(writer)
        self._write_events(writer)
        self._write_fixes(writer)
        writer.write_comment("GEN", f"Cleaned by {APP_NAME} {APP_VERSION}")
        logger.info(f"Exported {len(self.flight.fixes)} fixes")
        return len(self.flight.fixes)

    def save(self, path: str) -> int:
        """Write the flight to an IGC file"""
        with open(path, 'wb') as f:
            count = self.write(f)
        logger.info(f"IGC file written: {path}")
        return count

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.write(buffer)
        return buffer.getvalue()


def create_igc_exporter(flight: FlightAggregate) -> IGCExporter:
    """
    Create a new IGC exporter instance.

    Returns:
        IGCExporter: A new IGC exporter instance
    """
    return IGCExporter(flight)
