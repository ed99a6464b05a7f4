# igc_inspector/config/manufacturers.py

"""
This module defines the three-character manufacturer codes that open
the A record of an IGC file.

Codes starting with 'X' are used by experimental or non-approved
recorders; everything else belongs to an IGC-approved manufacturer.
"""

from .constants import EXPERIMENTAL_MANUFACTURER_PREFIX

# Dictionary with the known manufacturer codes
MANUFACTURERS = {
    # IGC-approved flight recorders
    "ACT": "Aircotec",
    "AVX": "Avionix",
    "CNI": "ClearNav Instruments",
    "FIL": "Filser",
    "FLA": "Flarm (Flight Alarm)",
    "GCS": "Garrecht",
    "IMI": "IMI Gliding Equipment",
    "LGS": "Logstream",
    "LXN": "LX Navigation",
    "LXV": "LXNAV d.o.o.",
    "NAV": "Naviter",
    "NKL": "Nielsen Kellerman",
    "PFE": "PressFinish Electronics",
    "RCE": "RC Electronics",
    "SDI": "Streamline Data Instruments",
    "TRI": "Triadis Engineering GmbH",

    # Manufacturers no longer producing approved recorders
    "CAM": "Cambridge Aero Instruments",
    "DSX": "Data Swan/DSX",
    "EWA": "EW Avionics",
    "NTE": "New Technologies s.r.l.",
    "PES": "Peschges",
    "PRT": "Print Technik",
    "SCH": "Scheffel",
    "ZAN": "Zander",

    # Free flight loggers and software
    "BRA": "Bräuniger Logger",
    "FLY": "Flytec Logger",
    "MUN": "MaxLogger",
    "CPP": "C-Pilot pro Logger",

    # Experimental codes
    "XGD": "GPSDump",
    "XMP": "MaxPunkte",
    "XSY": "SeeYou (Naviter)",
    "XCG": "CompeGPS",
    "XTC": "TNComplete",
    "XPF": "ParaFlightBook",
    "XLF": "Logfly",
    "XSL": "SkyLogger",
    "XSK": "SkyKick",
    "XTG": "Thermgeek",
    "XFH": "FlySkyhy",
    "XBA": "FreeFlight",
    "XNA": "SeeYou Navigator",
    "XFN": "ASI FlyNet2",
    "XRF": "RogalloFlightlog",
    "XGA": "FlyGaggle",
    "XWC": "White Cloud Blue Sky",
    "XVI": "Vario One",
    "XMX": "XCMania",
    "XBM": "burnair",
    "XAF": "AndroFlight",
    "XCT": "XCTrack",
    "XCS": "XCSoar",
    "XFL": "FlyMe",
    "XKR": "Variometer-Sky Land Tracker",
    "XGP": "Flight GpsLogger",
    "XTT": "TTLiveTrack24",
    "XAA": "AltAir",
    "XAV": "Avionicus",
    "XMT": "MyCloudbase Tracker",
    "XLM": "Loctome",
    "XRV": "Aviator",
    "XIF": "XC Guide",
    "XPD": "Gleitschirm Cockpit",
    "XFV": "thefightvario",
    "XLK": "LK8000",
    "XFT": "AFTrack",
    "XPY": "IGCLogger for Symbian",
    "XPG": "Gipsy",
    "XCF": "French C.F.D. contest Server",
    "XCO": "XCOpen Livetrack",
    "XLL": "Leonardo Livetrack24",
    "XLD": "DHV Livetracking",
    "XFW": "flyWithCE FR300",
    "XFM": "Flymaster Live",
    "XFI": "Flymaster GPS LS",
    "XMI": "MipFly Instruments",
    "XVB": "VairBration XC",
    "XSX": "Skytraxx Logger",
    "XRE": "REVERSALE VGP2010",
    "XDG": "Digifly Instruments",
    "XFY": "SensBox",
    "XSR": "Syride SysPCTools",
    "XSE": "Syride SYS",
    "XFX": "FlyNet XC vario",
    "XAH": "Ascent Vario",
    "XSF": "SeriFly",
    "XTR": "XCTracer",
    "XSB": "SkyBean vario",
    "XSD": "leGPSBip Logger",
    "XGF": "GoFly Instrument",
    "XUR": "Renschler Solario Blue",
    "XEP": "EpVario OpenSource",
    "XBF": "Blue Fly Vario",
    "XCA": "XC Analytics",
}


def get_manufacturer_name(code):
    """
    Gets the manufacturer name for a three-character code.

    Args:
        code (str): Manufacturer code (case insensitive)

    Returns:
        str: Manufacturer name, or None if the code is unknown
    """
    if not code:
        return None
    return MANUFACTURERS.get(code.strip().upper())


def is_approved_manufacturer(code):
    """
    Tells whether a code belongs to an approved (non-experimental) manufacturer.

    Args:
        code (str): Manufacturer code

    Returns:
        bool: False for codes starting with 'X' or empty codes
    """
    if not code:
        return False
    return not code.upper().startswith(EXPERIMENTAL_MANUFACTURER_PREFIX)


def lookup_manufacturer(code):
    """
    Looks up a manufacturer code.

    Args:
        code (str): Manufacturer code

    Returns:
        tuple: (name or None, is_approved)
    """
    return get_manufacturer_name(code), is_approved_manufacturer(code)
