"""
File management utilities for IGC Inspector.
Reading logs, listing them and splitting a log into one group of lines per record kind.
"""

import os
import logging
import datetime
from typing import Callable, Dict, List, Optional, Any, TextIO

from ..config.constants import DEFAULT_ENCODING, IGC_EXTENSION
from ..config.settings import settings
from ..data.models import RecordKind
from ..data.parser import iter_lines

# Configure logger
logger = logging.getLogger("igc_inspector.io.files")


def read_igc_file(filepath: str) -> str:
    """
    Read the text of an IGC file.
    Bytes that are not valid UTF-8 are replaced.

    Args:
        filepath: Path to the file

    Returns:
        str: File content

    Raises:
        FileNotFoundError: The file does not exist
    """
    with open(filepath, 'r', encoding=DEFAULT_ENCODING, errors='replace') as f:
        return f.read()


def list_igc_files(directory: Optional[str] = None) -> List[str]:
    """
    List the IGC files of a directory, whatever the case of their extension.

    Args:
        directory: Directory to search (default: from settings)

    Returns:
        List[str]: IGC file paths, newest first

    Raises:
        FileNotFoundError: The directory does not exist
    """
    if directory is None:
        directory = settings.get('output_directory', '.')
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    paths = [
        os.path.join(directory, name) for name in os.listdir(directory)
        if name.lower().endswith(IGC_EXTENSION)
    ]
    return sorted(paths, key=os.path.getmtime, reverse=True)


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} bytes"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def get_file_info(filepath: str) -> Dict[str, Any]:
    """
    Describe an IGC file on disk without parsing it.

    Args:
        filepath: Path to the file

    Returns:
        Dict[str, Any]: Name, size, modification time and the A record line,
            or 'exists': False for a missing file
    """
    if not os.path.isfile(filepath):
        return {'exists': False, 'path': filepath, 'error': 'File not found'}

    stat = os.stat(filepath)
    with open(filepath, 'r', encoding=DEFAULT_ENCODING, errors='replace') as f:
        first_line = f.readline().strip()

    return {
        'exists': True,
        'path': filepath,
        'filename': os.path.basename(filepath),
        'size_bytes': stat.st_size,
        'size_str': _format_size(stat.st_size),
        'modified': datetime.datetime.fromtimestamp(stat.st_mtime).isoformat(),
        'is_igc': os.path.splitext(filepath)[1].lower() == IGC_EXTENSION,
        'logger': first_line if first_line.startswith(RecordKind.MANUFACTURER.value) else None,
    }


def group_records(content: str) -> Dict[str, List[str]]:
    """
    Group the lines of a log by record kind.

    Lines of an unsupported kind are kept under their own leading character.

    Args:
        content: Text of the IGC log

    Returns:
        Dict[str, List[str]]: Leading character -> lines, in order of first appearance
    """
    groups: Dict[str, List[str]] = {}
    for line_number, line in iter_lines(content):
        kind = RecordKind.from_line(line)
        if kind is None:
            logger.warning(f"Line {line_number}: unsupported record kind '{line[0]}'")
            key = line[0]
        else:
            key = kind.value
        groups.setdefault(key, []).append(line)
    return groups


def write_record_groups(content: str, sink_factory: Callable[[str], TextIO]) -> Dict[str, int]:
    """
    Write each group of record lines to its own sink.

    Args:
        content: Text of the IGC log
        sink_factory: Called with a record kind letter, returns a writable text stream.
            Streams are closed once written.

    Returns:
        Dict[str, int]: Number of lines written per kind
    """
    written = {}
    for key, lines in group_records(content).items():
        with sink_factory(key) as sink:
            for line in lines:
                sink.write(line + "\n")
        written[key] = len(lines)
    return written


def split_to_directory(content: str, directory: str, stem: str = "flight") -> Dict[str, str]:
    """
    Split a log into one text file per record kind.

    Args:
        content: Text of the IGC log
        directory: Output directory, created if needed
        stem: Prefix of the generated file names

    Returns:
        Dict[str, str]: Record kind letter -> path of the written file
    """
    os.makedirs(directory, exist_ok=True)
    paths: Dict[str, str] = {}

    def open_sink(key: str) -> TextIO:
        path = get_available_filename(os.path.join(directory, f"{stem}_{key}"), ".txt")
        paths[key] = path
        return open(path, 'w', encoding=DEFAULT_ENCODING)

    counts = write_record_groups(content, open_sink)
    logger.info(f"Split into {len(counts)} files in {directory}")
    return paths


def get_available_filename(base_path: str, extension: str = IGC_EXTENSION) -> str:
    """
    Generate a unique filename that doesn't already exist.

    Args:
        base_path: Base path and prefix for the filename
        extension: File extension

    Returns:
        str: Unique filepath
    """
    counter = 1
    directory = os.path.dirname(base_path)
    basename = os.path.basename(base_path)

    # If basename already has an extension, remove it
    if '.' in basename:
        basename = os.path.splitext(basename)[0]

    # Make sure extension starts with a dot
    if not extension.startswith('.'):
        extension = '.' + extension

    # Try with original name first
    filepath = os.path.join(directory, f"{basename}{extension}")

    # If it exists, add counter until we find an available name
    while os.path.exists(filepath):
        filepath = os.path.join(directory, f"{basename}_{counter}{extension}")
        counter += 1

    return filepath
