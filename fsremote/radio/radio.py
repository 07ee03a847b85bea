#!/usr/bin/env python3
"""
Radio facade

Per-feature getters and setters on top of FsapiClient, with the device
state mirrored in a RadioState.  Setters write the device first and the
mirror after the device accepted the value.

Relative changes (volume up/down, toggles) read the mirrored value and
write a derived one.  Nothing stops another controller from changing the
same node in between, in which case its change is lost.
"""

import datetime
import logging

from fsremote.fsapi import (
    S16,
    U8,
    U32,
    FsapiClient,
    FsapiError,
    InvalidData,
    Node,
    NotificationListener,
    Text,
    Value,
)

from .enums import EqPreset, Mode, PlayControl, PlayStatus
from .state import RadioState

EQ_CUSTOM_MIN = -7
EQ_CUSTOM_MAX = 7


class InvalidValue(FsapiError):
    """value rejected before it was sent to the device"""


def _expect(value: Value, valuetype: type[Value], node: Node):
    if not isinstance(value, valuetype):
        raise InvalidData(f"{node} returned {value!r}, expected {valuetype.__name__}")
    return value.value


class Radio:  # pylint: disable=too-many-public-methods
    """one device with its mirrored state"""

    def __init__(self, client: FsapiClient, state: RadioState | None = None, strict: bool = False):
        self.client = client
        self.state = state or RadioState()
        self.listener = NotificationListener(client, self.state, strict=strict)

    @classmethod
    async def connect(cls, host: str, pin: str | int, **kwargs) -> "Radio":
        """create a session and load the initial state"""
        strict = kwargs.pop("strict", False)
        client = FsapiClient(host, pin, strict=strict, **kwargs)
        radio = cls(client, strict=strict)
        try:
            await client.create_session()
            await radio.refresh()
        except BaseException:
            await client.close()
            raise
        return radio

    async def _read(self, node: Node, valuetype: type[Value]):
        return _expect(await self.client.get(node), valuetype, node)

    async def refresh(self) -> None:
        """read every mirrored field from the device"""
        state = self.state
        steps = await self._read(Node.SYS_CAPS_VOLUME_STEPS, U8)
        if steps < 1:
            raise InvalidData(f"{self.client.host} reports no volume steps")
        state.max_volume.set(steps - 1)
        state.volume.set(await self._read(Node.SYS_AUDIO_VOLUME, U8))
        state.muted.set(await self._read(Node.SYS_AUDIO_MUTE, U8) == 1)
        state.power.set(await self._read(Node.SYS_POWER, U8) == 1)
        state.eq_preset.set(
            EqPreset.from_code(await self._read(Node.SYS_AUDIO_EQ_PRESET, U8), EqPreset.NORMAL)
        )
        state.loudness.set(await self._read(Node.SYS_AUDIO_EQ_LOUDNESS, U8) == 1)
        state.bass.set(await self._read(Node.SYS_AUDIO_EQ_CUSTOM_PARAM0, S16))
        state.treble.set(await self._read(Node.SYS_AUDIO_EQ_CUSTOM_PARAM1, S16))
        state.mode.set(Mode.from_code(await self._read(Node.SYS_MODE, U32), Mode.UNKNOWN))
        state.sleep.set(datetime.timedelta(seconds=await self._read(Node.SYS_SLEEP, U32)))
        state.name.set(await self._read(Node.PLAY_INFO_NAME, Text))
        state.text.set(await self._read(Node.PLAY_INFO_TEXT, Text))
        state.album.set(await self._read(Node.PLAY_INFO_ALBUM, Text))
        state.artist.set(await self._read(Node.PLAY_INFO_ARTIST, Text))
        state.duration.set(
            datetime.timedelta(milliseconds=await self._read(Node.PLAY_INFO_DURATION, U32))
        )
        state.graphic_uri.set(await self._read(Node.PLAY_INFO_GRAPHIC_URI, Text))
        logging.debug("Loaded state from %s: %s", self.client.host, state.snapshot())

    async def update_state(self) -> int:
        """wait for one batch of notifications and apply it"""
        return await self.listener.poll_once()

    # --- volume ---

    async def volume_set(self, volume: int) -> int:
        """set the volume, clamped to 0..max"""
        volume = min(max(volume, 0), self.state.max_volume.get())
        await self.client.set(Node.SYS_AUDIO_VOLUME, volume)
        self.state.volume.set(volume)
        return volume

    async def volume_up(self, change: int = 1) -> int:
        """relative volume change; negative goes down"""
        return await self.volume_set(self.state.volume.get() + change)

    async def volume_mute(self, mute: bool) -> None:
        """mute or unmute"""
        if mute != self.state.muted.get():
            await self.client.set(Node.SYS_AUDIO_MUTE, int(mute))
        self.state.muted.set(mute)

    async def volume_toggle(self) -> bool:
        """flip mute, returns the new setting"""
        await self.volume_mute(not self.state.muted.get())
        return self.state.muted.get()

    # --- power ---

    async def power_set(self, power: bool) -> None:
        """on or standby"""
        if power != self.state.power.get():
            await self.client.set(Node.SYS_POWER, int(power))
        self.state.power.set(power)

    async def power_toggle(self) -> bool:
        """flip power, returns the new setting"""
        await self.power_set(not self.state.power.get())
        return self.state.power.get()

    # --- equalizer ---

    async def eq_set(self, preset: EqPreset) -> None:
        """select an equalizer preset"""
        await self.client.set(Node.SYS_AUDIO_EQ_PRESET, int(preset))
        self.state.eq_preset.set(preset)

    async def _eq_custom_set(self, node: Node, cell, level: int) -> None:
        if not EQ_CUSTOM_MIN <= level <= EQ_CUSTOM_MAX:
            raise InvalidValue(f"{level} is outside {EQ_CUSTOM_MIN}..{EQ_CUSTOM_MAX}")
        if level != cell.get():
            await self.client.set(node, level)
            cell.set(level)

    async def eq_bass_set(self, bass: int) -> None:
        """custom eq bass, -7..7"""
        await self._eq_custom_set(Node.SYS_AUDIO_EQ_CUSTOM_PARAM0, self.state.bass, bass)

    async def eq_treble_set(self, treble: int) -> None:
        """custom eq treble, -7..7"""
        await self._eq_custom_set(Node.SYS_AUDIO_EQ_CUSTOM_PARAM1, self.state.treble, treble)

    async def eq_loudness_set(self, loudness: bool) -> None:
        """loudness; only takes effect with the custom preset"""
        if loudness != self.state.loudness.get():
            await self.client.set(Node.SYS_AUDIO_EQ_LOUDNESS, int(loudness))
            self.state.loudness.set(loudness)

    # --- player ---

    async def player_toggle(self) -> None:
        """play/pause"""
        await self.client.set(Node.PLAY_CONTROL, int(PlayControl.TOGGLE))

    async def player_next(self) -> None:
        """next track or station"""
        await self.client.set(Node.PLAY_CONTROL, int(PlayControl.NEXT))

    async def player_prev(self) -> None:
        """previous track or station"""
        await self.client.set(Node.PLAY_CONTROL, int(PlayControl.PREVIOUS))

    async def player_status(self) -> PlayStatus:
        """ask the device what the player is doing"""
        status = PlayStatus.from_code(await self._read(Node.PLAY_STATUS, U8), PlayStatus.UNKNOWN)
        self.state.play_status.set(status)
        return status

    # --- sleep / mode ---

    async def sleep_in(self, sleep_in: datetime.timedelta) -> None:
        """standby after this long; zero turns the timer off"""
        seconds = int(sleep_in.total_seconds())
        if seconds < 0:
            raise InvalidValue("sleep time cannot be negative")
        await self.client.set(Node.SYS_SLEEP, seconds)
        self.state.sleep.set(datetime.timedelta(seconds=seconds))

    async def mode_set(self, mode: Mode) -> None:
        """switch the operating mode"""
        await self.client.set(Node.SYS_MODE, int(mode))
        self.state.mode.set(mode)

    # --- presets ---

    async def presets(self) -> list[str]:
        """names of the stored presets for the current mode"""
        await self.client.set(Node.NAV_STATE, 1)
        names: list[str] = []
        for item in await self.client.get_item_list(Node.NAV_PRESETS, self.client.session_id):
            label = item.label
            if label is None:
                raise InvalidData(f"preset {item.key} has no name")
            if not label:
                break
            names.append(label)
        return names

    async def preset_select(self, preset: int) -> None:
        """play a stored preset"""
        await self.client.set(Node.NAV_STATE, 1)
        await self.client.set(Node.NAV_ACTION_SELECT_PRESET, preset)

    async def close(self) -> None:
        """stop listening, log out and release the connection"""
        self.listener.shutdown()
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
