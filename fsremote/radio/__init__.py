#!/usr/bin/env python3
"""
High level radio control with a mirrored device state
"""

from .enums import EqPreset, Mode, OutOfRange, PlayControl, PlayStatus
from .radio import EQ_CUSTOM_MAX, EQ_CUSTOM_MIN, InvalidValue, Radio
from .state import FieldCell, RadioState

__all__ = [
    "EQ_CUSTOM_MAX",
    "EQ_CUSTOM_MIN",
    "EqPreset",
    "FieldCell",
    "InvalidValue",
    "Mode",
    "OutOfRange",
    "PlayControl",
    "PlayStatus",
    "Radio",
    "RadioState",
]
