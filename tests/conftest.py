"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


SAMPLE_IGC = "\n".join([
    "AXXX123-ABC",
    "HFDTE150722",
    "HFPLTPILOTINCHARGE:Jane Doe",
    "HFGTYGLIDERTYPE:ASK 21",
    "HFGIDGLIDERID:D-1234",
    "HFGPSRECEIVER:uBLOX,NEO-6",
    "I023638FXA3940SIU",
    "C150722101500000000000102Local task",
    "C0000000N00000000ETAKEOFF",
    "C4600000N00600000ESTART",
    "C4601000N00600000ETP1",
    "C0000000N00000000ELANDING",
    "LXXXComment written by the pilot",
    "B100000" "4600000N" "00600000E" "A" "01000" "01100" "035" "08",
    "E100500PEVPilot pressed button",
    "B101000" "4600539N" "00600000E" "A" "01050" "01150" "035" "08",
    "B101001" "5600539N" "00600000E" "A" "01050" "01150" "035" "08",
    "K101500Extension data",
    "E102000FIN",
    "E100000STA",
    "B102000" "4601000N" "00600000E" "A" "01100" "01200" "040" "09",
    "",
])


@pytest.fixture(scope="session")
def project_root_dir():
    """Provide the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_igc():
    """
    Provide a complete log: header, fix extensions, a task with 0/0
    takeoff and landing markers, events, and four fixes of which the
    third jumps 1000 km in one second.
    """
    return SAMPLE_IGC


@pytest.fixture
def sample_igc_file(tmp_path, sample_igc):
    """Write the sample log to a temporary file."""
    path = tmp_path / "sample.igc"
    path.write_text(sample_igc, encoding="utf-8")
    return path


@pytest.fixture
def minimal_igc():
    """Provide a log with a manufacturer record and two fixes, without I record."""
    return "\n".join([
        "ALXNABC",
        "HFDTEDATE:150722,01",
        "B1000004600000N00600000EA0100001100035",
        "B1000104600010N00600000EA0100201102035",
    ])
