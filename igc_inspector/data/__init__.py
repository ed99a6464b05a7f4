"""
Data package for IGC Inspector.
Contains the record models, the record grammars and the log parser.
"""

from .models import (
    RecordKind,
    SlotPolicy,
    Manufacturer,
    FixExtension,
    PositionFix,
    TaskDeclaration,
    Waypoint,
    Task,
    Event,
    RunningTotals,
    FlightAggregate,
)
from .parser import IGCParser, ParserState, classify_line, iter_lines, parse

__all__ = [
    'RecordKind',
    'SlotPolicy',
    'Manufacturer',
    'FixExtension',
    'PositionFix',
    'TaskDeclaration',
    'Waypoint',
    'Task',
    'Event',
    'RunningTotals',
    'FlightAggregate',
    'IGCParser',
    'ParserState',
    'classify_line',
    'iter_lines',
    'parse',
]
