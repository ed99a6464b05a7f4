"""
Configuration package for IGC Inspector.
Contains settings, constants and the code tables used across the application.
"""

from .constants import *
from .settings import settings, Settings
from .manufacturers import lookup_manufacturer
from .event_codes import classify_event, describe_category

__all__ = ['settings', 'Settings', 'lookup_manufacturer', 'classify_event', 'describe_category']
