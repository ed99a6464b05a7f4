"""
Record grammars for IGC logs.

Every record kind is described by an ordered list of field specs.
Extraction walks a cursor along the line: each field pattern is matched against
what is left of it, and a match moves the cursor past the matched text.
Values are validated once the whole line has been read.
"""

import datetime
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from .models import RecordKind, FixExtension
from ..config.constants import KNOWN_FIX_EXTENSIONS
from ..config.event_codes import classify_event, describe_category, is_recognized
from ..config.manufacturers import lookup_manufacturer
from ..exceptions import FieldValidationError, StructuralError
from ..utils.geodesy import sexagesimal_to_decimal, compact_to_clock

logger = logging.getLogger("igc_inspector.grammar")

ParsedRecord = Dict[str, Any]

# Shared validation patterns
TIME_PATTERN = r'^(?:[01]\d|2[0-3])[0-5]\d[0-5]\d$'
LATITUDE_PATTERN = r'^(?:[0-8]\d[0-5]\d{4}|9000000)$'
LONGITUDE_PATTERN = r'^(?:(?:0\d\d|1[0-7]\d)[0-5]\d{4}|18000000)$'


class FieldSpec:
    """
    A field matched at the cursor.

    Args:
        field_id: Key of the value in the parsed record
        pattern: Regex matched against the rest of the line; group 1 (or the
            whole match when there is no group) is the value
        validate: Regex the value must fully match when it is not empty
        mandatory: Raise a StructuralError when the pattern does not match
    """

    def __init__(self, field_id: str, pattern: str, validate: Optional[str] = None,
                 mandatory: bool = False):
        self.field_id = field_id
        self.pattern: Pattern = re.compile(pattern)
        self.validate: Optional[Pattern] = re.compile(validate) if validate else None
        self.mandatory = mandatory

    def __repr__(self) -> str:
        return f"FieldSpec({self.field_id!r}, {self.pattern.pattern!r})"


class Alternatives:
    """
    A group of field specs tried against the whole line in order.
    The first one that matches stores its value under its own id;
    when none matches, None is stored under the group id.
    """

    def __init__(self, field_id: str, options: List[FieldSpec]):
        self.field_id = field_id
        self.options = options


class Remainder:
    """Everything left on the line, verbatim. Ends the extraction."""

    def __init__(self, field_id: str):
        self.field_id = field_id


Spec = Union[FieldSpec, Alternatives, Remainder]


def _match_value(match) -> str:
    return match.group(1) if match.re.groups else match.group(0)


def extract(specs: List[Spec], line: str, line_number: int) -> ParsedRecord:
    """
    Extract the fields of a line.

    Args:
        specs: Ordered field specs
        line: Record line, without line terminator
        line_number: Line number used in error messages

    Returns:
        ParsedRecord: Field id -> string value or None

    Raises:
        StructuralError: A mandatory field could not be matched
        FieldValidationError: A value does not match its validation pattern
    """
    record: ParsedRecord = {}
    matched: List[Tuple[FieldSpec, Optional[str]]] = []
    cursor = 0

    for spec in specs:
        if isinstance(spec, Remainder):
            record[spec.field_id] = line[cursor:] or None
            break

        if isinstance(spec, Alternatives):
            for option in spec.options:
                match = option.pattern.match(line)
                if match:
                    value = _match_value(match)
                    record[option.field_id] = value
                    matched.append((option, value))
                    break
            else:
                record[spec.field_id] = None
            continue

        match = spec.pattern.match(line[cursor:])
        if match is None:
            if spec.mandatory:
                raise StructuralError(f"missing or malformed field '{spec.field_id}'", line_number)
            record[spec.field_id] = None
            continue

        value = _match_value(match)
        record[spec.field_id] = value
        matched.append((spec, value))
        cursor += len(match.group(0))

    for spec, value in matched:
        if value and spec.validate and not spec.validate.fullmatch(value):
            raise FieldValidationError(line_number, spec.field_id, value)

    return record


@dataclass
class GrammarContext:
    """What a grammar may know about the log beyond the line it reads"""
    line_number: int
    previous_kind: Optional[RecordKind] = None
    fix_extensions: List[FixExtension] = field(default_factory=list)


def iso_date(value: Optional[str], line_number: int, field_id: str) -> Optional[str]:
    """
    Convert an IGC DDMMYY date to YYYY-MM-DD.

    Returns:
        Optional[str]: ISO date, None for an empty or all-zero date
    """
    if not value or value == '000000':
        return None
    try:
        day, month, year = int(value[0:2]), int(value[2:4]), int(value[4:6])
        return datetime.date(2000 + year, month, day).isoformat()
    except ValueError:
        raise FieldValidationError(line_number, field_id, value, "invalid calendar date")


def _coordinate(value: str, hemisphere: str, degree_digits: int) -> float:
    degrees = int(value[:degree_digits])
    minutes = int(value[degree_digits:degree_digits + 2])
    thousandths = int(value[degree_digits + 2:])
    result = sexagesimal_to_decimal(degrees, minutes, thousandths)
    return -result if hemisphere in ('S', 'W') else result


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class RecordGrammar:
    """Base grammar: structural check, field extraction, then derived fields"""
    kind: RecordKind
    fields: List[Spec] = []

    def check(self, line: str, ctx: GrammarContext) -> None:
        """Raise StructuralError when the line cannot be a record of this kind"""

    def fields_for(self, line: str) -> List[Spec]:
        return self.fields

    def parse(self, line: str, ctx: GrammarContext) -> ParsedRecord:
        self.check(line, ctx)
        record = extract(self.fields_for(line), line, ctx.line_number)
        return self.post_process(record, line, ctx)

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        return record


class ManufacturerGrammar(RecordGrammar):
    """A<XXX><serial>[-<additional data>], always the first record"""
    kind = RecordKind.MANUFACTURER
    fields = [
        FieldSpec('manufacturer_id', r'^A(.{3})', r'^[A-Z0-9]{3}$'),
        FieldSpec('serial_number', r'^([A-Z0-9:]{3,})(?:-|$)', r'^[A-Z0-9:]{3,}$'),
        Remainder('additional_data'),
    ]

    def check(self, line: str, ctx: GrammarContext) -> None:
        if ctx.previous_kind is not None:
            raise StructuralError("manufacturer record must be the first record of the log",
                                  ctx.line_number)

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        code = record.get('manufacturer_id')
        name, approved = lookup_manufacturer(code)
        if code and name is None:
            logger.debug(f"Unknown manufacturer code {code}")
        record['manufacturer_name'] = name
        record['approved_manufacturer'] = approved
        return record


class FixGrammar(RecordGrammar):
    """B<HHMMSS><DDMMmmm><N|S><DDDMMmmm><E|W><A|V><PPPPP><GGGGG>[extensions]"""
    kind = RecordKind.FIX
    fields = [
        FieldSpec('time', r'^B(\d{6})', TIME_PATTERN, mandatory=True),
        FieldSpec('latitude', r'^(\d{7})', LATITUDE_PATTERN, mandatory=True),
        FieldSpec('latitude_ns', r'^([NS])', mandatory=True),
        FieldSpec('longitude', r'^(\d{8})', LONGITUDE_PATTERN, mandatory=True),
        FieldSpec('longitude_ew', r'^([EW])', mandatory=True),
        FieldSpec('validity', r'^([AV])', mandatory=True),
        FieldSpec('pressure_altitude', r'^([-\d]\d{4})', r'^-?\d+$', mandatory=True),
        FieldSpec('gnss_altitude', r'^([-\d]\d{4})', r'^-?\d+$', mandatory=True),
        # Positional fallback when no I record describes the extensions
        FieldSpec('fix_accuracy', r'^(\d{3})'),
        FieldSpec('satellites', r'^(\d{2})'),
        FieldSpec('engine_noise', r'^(\d{3})'),
    ]

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        raw_time = record['time']
        record['time_raw'] = raw_time
        record['time'] = compact_to_clock(raw_time)
        record['latitude'] = _coordinate(record['latitude'], record.pop('latitude_ns'), 2)
        record['longitude'] = _coordinate(record['longitude'], record.pop('longitude_ew'), 3)
        record['pressure_altitude'] = int(record['pressure_altitude'])
        record['gnss_altitude'] = int(record['gnss_altitude'])

        extensions: Dict[str, str] = {}
        if ctx.fix_extensions:
            for name in KNOWN_FIX_EXTENSIONS.values():
                record[name] = None
            for extension in ctx.fix_extensions:
                value = extension.slice(line)
                if value is None:
                    continue
                extensions[extension.code] = value
                target = KNOWN_FIX_EXTENSIONS.get(extension.code)
                if target and value.strip().isdigit():
                    record[target] = int(value)
        else:
            for name in KNOWN_FIX_EXTENSIONS.values():
                if record.get(name) is not None:
                    record[name] = int(record[name])
        record['extensions'] = extensions
        return record


class TaskGrammar(RecordGrammar):
    """
    C records: a declaration line followed by one line per task point.
    Declaration: C<DDMMYY><HHMMSS><DDMMYY><NNNN><TT><text>
    Task point:  C<DDMMmmm><N|S><DDDMMmmm><E|W><name>
    """
    kind = RecordKind.TASK
    WAYPOINT = re.compile(r'^C\d{7}[NS]\d{8}[EW]')
    DECLARATION = re.compile(r'^C\d{12}')

    waypoint_fields = [
        FieldSpec('latitude', r'^C(\d{7})', LATITUDE_PATTERN, mandatory=True),
        FieldSpec('latitude_ns', r'^([NS])', mandatory=True),
        FieldSpec('longitude', r'^(\d{8})', LONGITUDE_PATTERN, mandatory=True),
        FieldSpec('longitude_ew', r'^([EW])', mandatory=True),
        Remainder('name'),
    ]
    declaration_fields = [
        FieldSpec('date', r'^C(\d{6})', mandatory=True),
        FieldSpec('time', r'^(\d{6})', TIME_PATTERN, mandatory=True),
        FieldSpec('flight_date', r'^(\d{6})'),
        FieldSpec('task_number', r'^(\d{4})'),
        FieldSpec('turnpoint_count', r'^(\d{2})'),
        Remainder('text'),
    ]

    def check(self, line: str, ctx: GrammarContext) -> None:
        if not (self.WAYPOINT.match(line) or self.DECLARATION.match(line)):
            raise StructuralError("task record is neither a declaration nor a task point",
                                  ctx.line_number)

    def fields_for(self, line: str) -> List[Spec]:
        if self.WAYPOINT.match(line):
            return self.waypoint_fields
        return self.declaration_fields

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        if 'latitude_ns' in record:
            latitude = _coordinate(record['latitude'], record.pop('latitude_ns'), 2)
            longitude = _coordinate(record['longitude'], record.pop('longitude_ew'), 3)
            record['record_type'] = 'waypoint'
            record['latitude'] = latitude
            record['longitude'] = longitude
            record['name'] = _clean(record['name']) or ''
            record['is_start_finish'] = latitude == 0 and longitude == 0
            return record

        record['record_type'] = 'declaration'
        record['date'] = iso_date(record['date'], ctx.line_number, 'date')
        record['time'] = compact_to_clock(record['time'])
        record['flight_date'] = iso_date(record['flight_date'], ctx.line_number, 'flight_date')
        for name in ('task_number', 'turnpoint_count'):
            if record[name] is not None:
                record[name] = int(record[name])
        record['text'] = _clean(record['text'])
        record['data'] = _clean(line[13:])
        return record


class EventGrammar(RecordGrammar):
    """E<HHMMSS><code><text>"""
    kind = RecordKind.EVENT
    fields = [
        FieldSpec('time', r'^E(\d{6})', TIME_PATTERN, mandatory=True),
        FieldSpec('code', r'^(BFIOFF|BFION|BFIUN|UNDUP|UNDDN|[A-Z][A-Z0-9]{2})'),
        Remainder('data'),
    ]
    PATTERN = re.compile(r'^E\d{6}[A-Z]')

    def check(self, line: str, ctx: GrammarContext) -> None:
        if len(line) < 8 or not self.PATTERN.match(line):
            raise StructuralError("event record needs a time and a code", ctx.line_number)

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        record['time_raw'] = record['time']
        record['time'] = compact_to_clock(record['time'])
        category = classify_event(record['code'])
        record['category'] = category
        record['category_description'] = describe_category(category)
        record['is_recognized'] = is_recognized(category)
        record['description'] = _clean(record.pop('data'))
        return record


def _header(field_id: str, subject: str, long_name: str = '', validate: Optional[str] = None) -> FieldSpec:
    """Field for an H<source><subject>[<long name>]:<value> header line"""
    long_part = f"(?:{long_name})?" if long_name else ''
    return FieldSpec(field_id, rf'^H[FOP]{subject}{long_part}:(.*)$', validate)


class HeaderGrammar(RecordGrammar):
    """H<source><subject>[long name:]<value>, one alternative per known subject"""
    kind = RecordKind.HEADER
    fields = [
        Alternatives('header', [
            FieldSpec('date', r'^H[FOP]DTE(?:DATE:)?(\d{6})', r'^\d{6}$'),
            _header('pilot', 'PLT', 'PILOTINCHARGE|PILOT'),
            _header('second_pilot', 'CM2', 'CREW2'),
            _header('glider_type', 'GTY', 'GLIDERTYPE'),
            _header('glider_id', 'GID', 'GLIDERID'),
            _header('gps_datum', r'DTM(?:\d{3})?', 'GPSDATUM'),
            _header('firmware_version', 'RFW', 'FIRMWAREVERSION'),
            _header('hardware_version', 'RHW', 'HARDWAREVERSION'),
            _header('logger_type', 'FTY', 'FRTYPE'),
            FieldSpec('gps', r'^H[FOP]GPS(?:RECEIVER)?:?(.*)$'),
            FieldSpec('accuracy', r'^H[FOP]FXA(?:[A-Z]*:)?(\d+)', r'^\d+$'),
            _header('pressure_sensor', 'PRS', 'PRESSALTSENSOR'),
            _header('competition_id', 'CID', 'COMPETITIONID'),
            _header('competition_class', 'CCL', 'COMPETITIONCLASS'),
            _header('timezone', 'TZN', 'TIMEZONE'),
            _header('site', 'SIT', 'SITE'),
        ]),
    ]
    PATTERN = re.compile(r'^H[A-Z]{3}')

    def check(self, line: str, ctx: GrammarContext) -> None:
        if len(line) < 4 or not self.PATTERN.match(line):
            raise StructuralError("header record needs a source and a subject", ctx.line_number)
        label, separator, value = line.partition(':')
        # A long name may carry an empty value (HFCM2CREW2:), a bare subject may not
        if separator and len(label) <= 5 and not value.strip():
            raise StructuralError("header record has a separator but no data", ctx.line_number)

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        result: ParsedRecord = {}
        for key, value in record.items():
            if key == 'header':
                continue
            value = _clean(value)
            if key == 'date':
                value = iso_date(value, ctx.line_number, 'date')
            elif key == 'accuracy' and value is not None:
                value = int(value)
            elif key == 'gps' and value is not None:
                manufacturer, _, version = value.partition(',')
                result['gps_manufacturer'] = _clean(manufacturer)
                result['gps_version'] = _clean(version)
                continue
            result[key] = value
        if not result:
            logger.debug(f"Line {ctx.line_number}: header not recognized: {line}")
        return result


class FixExtensionsGrammar(RecordGrammar):
    """I<NN><SS><FF><CCC>... : extensions appended to every following B record"""
    kind = RecordKind.FIX_EXTENSIONS
    fields = [
        FieldSpec('count', r'^I(\d{2})', mandatory=True),
        Remainder('definitions'),
    ]
    DEFINITION = re.compile(r'(\d{2})(\d{2})([A-Z0-9]{3})')
    DEFINITIONS = re.compile(r'^(?:\d{4}[A-Z0-9]{3})*$')

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        definitions = (record.get('definitions') or '').strip()
        if not self.DEFINITIONS.match(definitions):
            raise FieldValidationError(ctx.line_number, 'definitions', definitions)

        extensions = []
        for start, end, code in self.DEFINITION.findall(definitions):
            start, end = int(start), int(end)
            if end < start:
                raise FieldValidationError(ctx.line_number, 'definitions', f"{start:02d}{end:02d}{code}",
                                           "extension ends before it starts")
            extensions.append(FixExtension(code=code, start=start, end=end))

        count = int(record['count'])
        if count != len(extensions):
            logger.warning(f"Line {ctx.line_number}: I record announces {count} extensions, "
                           f"defines {len(extensions)}")
        record['count'] = count
        record['extensions'] = extensions
        return record


class ExtensionDataGrammar(RecordGrammar):
    """K<HHMMSS><data>"""
    kind = RecordKind.EXTENSION_DATA
    fields = [
        FieldSpec('time', r'^K(\d{6})', TIME_PATTERN),
        Remainder('data'),
    ]

    def post_process(self, record: ParsedRecord, line: str, ctx: GrammarContext) -> ParsedRecord:
        if record['time']:
            record['time'] = compact_to_clock(record['time'])
        return record


class LogbookGrammar(RecordGrammar):
    """L<source><text>: comments, read and discarded"""
    kind = RecordKind.LOGBOOK
    fields = [
        FieldSpec('source', r'^L([A-Z0-9]{0,3})'),
        Remainder('text'),
    ]


RECORD_GRAMMARS: Dict[RecordKind, RecordGrammar] = {
    grammar.kind: grammar
    for grammar in (
        ManufacturerGrammar(),
        FixGrammar(),
        TaskGrammar(),
        EventGrammar(),
        HeaderGrammar(),
        FixExtensionsGrammar(),
        ExtensionDataGrammar(),
        LogbookGrammar(),
    )
}


def get_grammar(kind: RecordKind) -> RecordGrammar:
    return RECORD_GRAMMARS[kind]
