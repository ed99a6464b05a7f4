"""
Parser for IGC flight recorder logs.
Reads a log line by line, hands every record to its grammar and
folds the parsed records into a FlightAggregate.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from .models import RecordKind, SlotPolicy, FlightAggregate
from .grammar import GrammarContext, get_grammar
from ..exceptions import EmptyInputError, UnsupportedRecordError, DuplicateRecordError
from ..config.settings import settings

# Configure logger
logger = logging.getLogger("igc_inspector.parser")


class ParserState(Enum):
    """Enum for the dispatcher states"""
    START = "start"
    READING = "reading"
    DONE = "done"


def iter_lines(content: str) -> Iterator[Tuple[int, str]]:
    """
    Yield (line number, line) for every non-blank line of a log.
    Line numbers are 1-based positions in the input; surrounding whitespace is removed.
    """
    for line_number, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if line:
            yield line_number, line


def classify_line(line: str, line_number: int) -> RecordKind:
    """
    Return the record kind of a line.

    Raises:
        UnsupportedRecordError: The leading character names no supported kind
    """
    kind = RecordKind.from_line(line)
    if kind is None:
        raise UnsupportedRecordError(line[:1], line_number)
    return kind


class IGCParser:
    """
    Reads IGC logs into FlightAggregate objects.

    A parser instance can read any number of logs; every call to parse()
    starts from a fresh state.
    """

    def __init__(self,
                 with_raw: Optional[bool] = None,
                 max_speed_kmh: Optional[float] = None,
                 proximity_radius_m: Optional[float] = None):
        """
        Initialize the parser.

        Args:
            with_raw: Keep the raw text of every record (default: from settings)
            max_speed_kmh: Fixes implying a faster speed are dropped (default: from settings)
            proximity_radius_m: Radius used to validate task turnpoints (default: from settings)
        """
        self.with_raw = settings.get('include_raw', False) if with_raw is None else with_raw
        self.max_speed_kmh = (settings.get('max_valid_speed_kmh')
                              if max_speed_kmh is None else max_speed_kmh)
        self.proximity_radius_m = (settings.get('proximity_radius_m')
                                   if proximity_radius_m is None else proximity_radius_m)
        self.state = ParserState.START

    def parse(self, content: str) -> FlightAggregate:
        """
        Parse a whole log and run the finalizers.

        Args:
            content: Text of the IGC log

        Returns:
            FlightAggregate: The finalized flight

        Raises:
            IGCError: The log is empty or a line is malformed
        """
        # Imported here: the core package depends on this module
        from ..core.builder import FlightBuilder
        from ..core.finalize import finalize_flight

        self.state = ParserState.START
        if content is None or not content.strip():
            raise EmptyInputError("IGC content is empty")

        builder = FlightBuilder(max_speed_kmh=self.max_speed_kmh, with_raw=self.with_raw)
        seen_unique: Dict[RecordKind, int] = {}
        previous_kind: Optional[RecordKind] = None
        accepted = 0

        self.state = ParserState.READING
        for line_number, line in iter_lines(content):
            kind = classify_line(line, line_number)
            ctx = GrammarContext(
                line_number=line_number,
                previous_kind=previous_kind,
                fix_extensions=builder.flight.fix_extensions,
            )
            policy = kind.policy

            if policy == SlotPolicy.UNIQUE:
                if kind in seen_unique:
                    raise DuplicateRecordError(kind.value, line_number, seen_unique[kind])
                seen_unique[kind] = line_number

            record = get_grammar(kind).parse(line, ctx)
            previous_kind = kind

            if policy == SlotPolicy.IGNORED:
                logger.debug(f"Line {line_number}: {kind.name} record ignored")
                continue

            if self.with_raw:
                record['raw'] = line
            builder.add(kind, record, line_number)
            accepted += 1

        if accepted == 0:
            raise EmptyInputError("IGC content holds no usable record")

        flight = builder.flight
        finalize_flight(flight, radius=self.proximity_radius_m)
        self.state = ParserState.DONE

        logger.info(f"Parsed {len(flight.fixes)} fixes "
                    f"({flight.totals.rejected_fix_count} rejected), "
                    f"{len(flight.events)} events")
        return flight


def parse(content: str, **kwargs) -> FlightAggregate:
    """Parse a log with a throwaway parser; keyword arguments go to IGCParser"""
    return IGCParser(**kwargs).parse(content)
