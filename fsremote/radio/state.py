#!/usr/bin/env python3
"""
Mirrored device state

Each field has its own lock, so a reader of one field never waits on a
notification that updates another.  The flip side is that there is no
cross-field atomicity: while a notification batch is being applied a
reader may see, for example, the new volume next to the old mute flag.
"""

import datetime
import logging
import threading
from typing import Any, Callable, Generic, TypeVar

from fsremote.fsapi import S16, U8, U32, Node, Notification, Text, UnknownNode, Value

from .enums import EqPreset, Mode, PlayStatus

T = TypeVar("T")


class FieldCell(Generic[T]):
    """one mirrored value behind its own lock"""

    def __init__(self, name: str, value: T):
        self.name = name
        self._value: T = value
        self._lock = threading.Lock()
        self.version: int = 0

    def get(self) -> T:
        """current value"""
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        """replace the value"""
        with self._lock:
            self._value = value
            self.version += 1

    def __repr__(self) -> str:
        return f"FieldCell({self.name}={self.get()!r})"


def _flag(value: Value) -> bool:
    return value.value == 1


def _millis(value: Value) -> datetime.timedelta:
    return datetime.timedelta(milliseconds=value.value)


def _seconds(value: Value) -> datetime.timedelta:
    return datetime.timedelta(seconds=value.value)


def _same(value: Value):
    return value.value


class RadioState:  # pylint: disable=too-many-instance-attributes
    """what we know about the device, kept current by notifications"""

    def __init__(self):
        self.power: FieldCell[bool] = FieldCell("power", False)
        self.volume: FieldCell[int] = FieldCell("volume", 0)
        self.max_volume: FieldCell[int] = FieldCell("max_volume", 0)
        self.muted: FieldCell[bool] = FieldCell("muted", False)
        self.eq_preset: FieldCell[EqPreset] = FieldCell("eq_preset", EqPreset.NORMAL)
        self.loudness: FieldCell[bool] = FieldCell("loudness", False)
        self.bass: FieldCell[int] = FieldCell("bass", 0)
        self.treble: FieldCell[int] = FieldCell("treble", 0)
        self.mode: FieldCell[Mode] = FieldCell("mode", Mode.UNKNOWN)
        self.sleep: FieldCell[datetime.timedelta] = FieldCell("sleep", datetime.timedelta(0))
        self.play_status: FieldCell[PlayStatus] = FieldCell("play_status", PlayStatus.UNKNOWN)
        self.name: FieldCell[str] = FieldCell("name", "")
        self.text: FieldCell[str] = FieldCell("text", "")
        self.album: FieldCell[str] = FieldCell("album", "")
        self.artist: FieldCell[str] = FieldCell("artist", "")
        self.duration: FieldCell[datetime.timedelta] = FieldCell(
            "duration", datetime.timedelta(0)
        )
        self.graphic_uri: FieldCell[str] = FieldCell("graphic_uri", "")

        # node -> (cell, expected value type, conversion)
        self._setters: dict[Node, tuple[FieldCell, type[Value], Callable[[Value], Any]]] = {
            Node.SYS_POWER: (self.power, U8, _flag),
            Node.SYS_AUDIO_VOLUME: (self.volume, U8, _same),
            Node.SYS_AUDIO_MUTE: (self.muted, U8, _flag),
            Node.SYS_AUDIO_EQ_PRESET: (
                self.eq_preset,
                U8,
                lambda value: EqPreset.from_code(value.value, EqPreset.NORMAL),
            ),
            Node.SYS_AUDIO_EQ_LOUDNESS: (self.loudness, U8, _flag),
            Node.SYS_AUDIO_EQ_CUSTOM_PARAM0: (self.bass, S16, _same),
            Node.SYS_AUDIO_EQ_CUSTOM_PARAM1: (self.treble, S16, _same),
            Node.SYS_MODE: (self.mode, U32, lambda value: Mode.from_code(value.value, Mode.UNKNOWN)),
            Node.SYS_SLEEP: (self.sleep, U32, _seconds),
            Node.PLAY_STATUS: (
                self.play_status,
                U8,
                lambda value: PlayStatus.from_code(value.value, PlayStatus.UNKNOWN),
            ),
            Node.PLAY_INFO_NAME: (self.name, Text, _same),
            Node.PLAY_INFO_TEXT: (self.text, Text, _same),
            Node.PLAY_INFO_ALBUM: (self.album, Text, _same),
            Node.PLAY_INFO_ARTIST: (self.artist, Text, _same),
            Node.PLAY_INFO_DURATION: (self.duration, U32, _millis),
            Node.PLAY_INFO_GRAPHIC_URI: (self.graphic_uri, Text, _same),
        }

    @property
    def fields(self) -> list[FieldCell]:
        """every mirrored cell"""
        return [value for value in vars(self).values() if isinstance(value, FieldCell)]

    def apply(self, notification: Notification, strict: bool = False) -> bool:
        """update the one field the node maps to

        Returns False when nothing changed: the node is not mirrored, or the
        value has a type the field does not take.  With strict, a node that
        is not mirrored raises UnknownNode instead.
        """
        setter = self._setters.get(notification.node)
        if setter is None:
            if strict:
                raise UnknownNode(notification.node.value)
            logging.debug("Not mirroring %s", notification.node)
            return False

        cell, valuetype, convert = setter
        if not isinstance(notification.value, valuetype):
            logging.warning(
                "Ignoring %s for %s: expected %s",
                notification.value,
                notification.node,
                valuetype.__name__,
            )
            return False

        cell.set(convert(notification.value))
        logging.debug("%s = %s", cell.name, notification.value)
        return True

    def snapshot(self) -> dict[str, Any]:
        """field values read one at a time; not a consistent cut"""
        return {cell.name: cell.get() for cell in self.fields}
