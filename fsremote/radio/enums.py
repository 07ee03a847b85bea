#!/usr/bin/env python3
"""
Small integer codes used by the device

Codes from the wire go through try_from(), which raises OutOfRange for
numbers outside the enum; callers choose the fallback themselves.
"""

import enum


class OutOfRange(ValueError):
    """integer code has no matching variant"""


class _Code(enum.IntEnum):
    @classmethod
    def try_from(cls, code: int):
        """code -> variant, OutOfRange if there is none"""
        try:
            return cls(code)
        except ValueError as err:
            raise OutOfRange(f"{code} is not a valid {cls.__name__}") from err

    @classmethod
    def from_code(cls, code: int, fallback):
        """try_from() with an explicit fallback"""
        try:
            return cls.try_from(code)
        except OutOfRange:
            return fallback

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class EqPreset(_Code):
    """netremote.sys.audio.eqpreset"""

    CUSTOM = 0
    NORMAL = 1
    FLAT = 2
    JAZZ = 3
    ROCK = 4
    MOVIE = 5
    CLASSIC = 6
    POP = 7
    NEWS = 8


class Mode(_Code):
    """netremote.sys.mode; the numbering is device specific"""

    INTERNET = 0
    SPOTIFY = 1
    UNKNOWN = 2
    MUSIC_PLAYER = 3
    DAB = 4
    FM = 5
    AUX_IN = 6

    def __str__(self) -> str:
        return {
            Mode.DAB: "DAB",
            Mode.FM: "FM",
            Mode.UNKNOWN: "No idea",
        }.get(self, super().__str__())


class PlayStatus(_Code):
    """netremote.play.status"""

    LOADING = 0
    BUFFERING = 1
    PLAYING = 2
    PAUSED = 3
    WAITING = 5
    DISCONNECTED = 6
    UNKNOWN = 10


class PlayControl(_Code):
    """values written to netremote.play.control"""

    TOGGLE = 0
    NEXT = 3
    PREVIOUS = 4
