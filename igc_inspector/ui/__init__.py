"""
UI package for IGC Inspector.
Contains the command-line interface.
"""

from .cli import CLI, main

__all__ = [
    'CLI',
    'main'
]
