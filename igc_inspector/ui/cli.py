"""
Command-line interface for IGC Inspector.
Provides sub-commands to parse, validate, split, export and list IGC logs.
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional, Dict, Any

from ..config.constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from ..config.settings import settings
from ..core.flight import IGCInspector, validate_points_proximity
from ..exceptions import IGCError
from ..io.files import read_igc_file, split_to_directory, list_igc_files, get_file_info
from ..io.igc import IGCExporter

# Configure logger
logger = logging.getLogger("igc_inspector.ui.cli")


def _parse_point(text: str) -> Dict[str, Any]:
    """Turn a 'LAT,LON' argument into a point dictionary"""
    try:
        latitude, longitude = (float(part) for part in text.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LAT,LON in decimal degrees, got {text!r}")
    return {'latitude': latitude, 'longitude': longitude}


class CLI:
    """
    Command-line interface for IGC Inspector.
    Each sub-command reads IGC files and prints its result on stdout.
    """

    def __init__(self, stdout=None):
        """
        Initialize the CLI.

        Args:
            stdout: Stream results are printed to (default: sys.stdout)
        """
        self.stdout = stdout or sys.stdout
        self.arg_parser = self._build_arg_parser()

    def _build_arg_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog='igc-inspector', description=APP_DESCRIPTION)
        parser.add_argument('--version', action='version', version=f"{APP_NAME} {APP_VERSION}")
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--config', help='Path to a JSON settings file')
        parser.add_argument('--max-speed', type=float, default=None,
                            help='Speed ceiling in km/h for accepting fixes')

        commands = parser.add_subparsers(dest='command', required=True)

        parse = commands.add_parser('parse', help='Print the parsed flight as JSON')
        parse.add_argument('file', help='IGC file')
        parse.add_argument('--metadata', action='store_true', help='Only print the metadata')
        parse.add_argument('--raw', action='store_true', help='Keep the raw line of every record')
        parse.add_argument('--indent', type=int, default=None, help='JSON indentation')

        validate = commands.add_parser('validate', help='Check that the task turnpoints were reached')
        validate.add_argument('file', help='IGC file')
        validate.add_argument('--radius', type=float, default=None, help='Proximity radius in meters')

        points = commands.add_parser('points', help='Nearest approach of the track to given points')
        points.add_argument('file', help='IGC file')
        points.add_argument('points', nargs='+', type=_parse_point, metavar='LAT,LON')
        points.add_argument('--radius', type=float, default=None, help='Proximity radius in meters')

        split = commands.add_parser('split', help='Write one text file per record kind')
        split.add_argument('file', help='IGC file')
        split.add_argument('--output', default=None, help='Output directory')

        export = commands.add_parser('export', help='Write a cleaned IGC file')
        export.add_argument('file', help='IGC file')
        export.add_argument('output', help='Output IGC file')

        listing = commands.add_parser('list', help='Summarise the IGC files of a directory')
        listing.add_argument('directory', nargs='?', default=None,
                             help='Directory to scan (default: output_directory setting)')

        return parser

    def _print_json(self, data: Any, indent: Optional[int] = None) -> None:
        if indent is None:
            indent = settings.get('json_indent', 2)
        print(json.dumps(data, indent=indent, ensure_ascii=False), file=self.stdout)

    def _inspect(self, args, **kwargs) -> IGCInspector:
        inspector = IGCInspector.from_file(args.file, max_speed_kmh=args.max_speed, **kwargs)
        inspector.validate()
        return inspector

    def cmd_parse(self, args) -> int:
        inspector = self._inspect(args, with_raw=args.raw or None)
        data = inspector.get_metadata() if args.metadata else inspector.to_dict()
        self._print_json(data, args.indent)
        return 0

    def cmd_validate(self, args) -> int:
        inspector = self._inspect(args)
        result = inspector.validate_turnpoints(args.radius)
        if result is None:
            print("No task waypoints or no fixes to validate", file=self.stdout)
            return 1
        self._print_json(result.to_dict())
        return 0 if result.all_validated else 2

    def cmd_points(self, args) -> int:
        radius = args.radius if args.radius is not None else settings.get('proximity_radius_m')
        report = validate_points_proximity(args.points, radius, read_igc_file(args.file),
                                           max_speed_kmh=args.max_speed)
        self._print_json(report.to_dict())
        return 0 if report.all_validated else 2

    def cmd_split(self, args) -> int:
        directory = args.output or settings.get('output_directory', '.')
        stem = os.path.splitext(os.path.basename(args.file))[0]
        paths = split_to_directory(read_igc_file(args.file), directory, stem)
        for key, path in sorted(paths.items()):
            print(f"{key}: {path}", file=self.stdout)
        return 0

    def cmd_export(self, args) -> int:
        inspector = self._inspect(args)
        count = IGCExporter(inspector.flight).save(args.output)
        print(f"{count} fixes written to {args.output}", file=self.stdout)
        return 0

    def cmd_list(self, args) -> int:
        directory = args.directory or settings.get('output_directory', '.')
        entries = []
        for path in list_igc_files(directory):
            entry = get_file_info(path)
            try:
                inspector = IGCInspector.from_file(path, max_speed_kmh=args.max_speed)
                inspector.validate()
            except IGCError as e:
                entry['error'] = str(e)
            else:
                flight = inspector.flight
                entry.update({
                    'date': flight.header.get('date'),
                    'pilot': flight.header.get('pilot'),
                    'fix_count': len(flight.fixes),
                    'duration': flight.statistics.duration if flight.statistics else None,
                })
            entries.append(entry)
        self._print_json(entries)
        return 0 if all('error' not in entry for entry in entries) else 2

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run one command.

        Args:
            argv: Command-line arguments (default: sys.argv[1:])

        Returns:
            int: Process exit code
        """
        args = self.arg_parser.parse_args(argv)

        if args.config:
            settings.load_from(args.config)
        self._configure_logging(args.debug)

        handler = getattr(self, f"cmd_{args.command}")
        try:
            return handler(args)
        except FileNotFoundError as e:
            logger.error(str(e))
            return 1
        except IGCError as e:
            logger.error(f"Invalid IGC file {getattr(args, 'file', '')}: {e}")
            return 1

    @staticmethod
    def _configure_logging(debug: bool) -> None:
        """Apply the log_level setting, or DEBUG when --debug is given"""
        package_logger = logging.getLogger("igc_inspector")
        if debug:
            package_logger.setLevel(logging.DEBUG)
            return
        level = str(settings.get('log_level', 'INFO')).upper()
        try:
            package_logger.setLevel(level)
        except ValueError:
            logger.warning(f"Unknown log level {level!r} in settings, keeping "
                           f"{logging.getLevelName(package_logger.level)}")


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point"""
    return CLI().run(argv)
