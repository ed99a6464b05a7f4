#!/usr/bin/env python3

"""
Entry point script that runs the IGC Inspector command line.
"""

import sys

from igc_inspector.ui.cli import main

if __name__ == '__main__':
    sys.exit(main())
