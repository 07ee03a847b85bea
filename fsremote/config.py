#!/usr/bin/env python3
"""
config file parsing/handling
"""

import contextlib
import logging
import pathlib

from PySide6.QtCore import QCoreApplication, QSettings  # pylint: disable=no-name-in-module

DEFAULTS: dict[str, str | float | bool] = {
    "radio/host": "",
    "radio/pin": "1234",
    "radio/timeout": 5.0,
    "radio/notifytimeout": 60.0,
    "radio/strict": False,
    "settings/loglevel": "INFO",
}


class ConfigFile:
    """read and write the remote's settings"""

    def __init__(self, inifile: str | pathlib.Path | None = None, reset: bool = False):
        if inifile:
            self.cparser: QSettings = QSettings(str(inifile), QSettings.IniFormat)
        else:
            self.cparser = QSettings(
                QSettings.IniFormat,
                QSettings.UserScope,
                QCoreApplication.organizationName() or "fsremote",
                QCoreApplication.applicationName() or "fsremote",
            )
        logging.debug("configuration: %s", self.cparser.fileName())

        self.host: str = ""
        self.pin: str = "1234"
        self.timeout: float = 5.0
        self.notifytimeout: float = 60.0
        self.strict: bool = False
        self.loglevel: str = "INFO"

        if reset:
            self.cparser.clear()
        self.defaults()
        self.get()

    def defaults(self) -> None:
        """fill in anything that is not set yet"""
        for key, value in DEFAULTS.items():
            if not self.cparser.contains(key):
                self.cparser.setValue(key, value)

    def get(self) -> None:
        """refresh values"""
        self.cparser.sync()
        self.host = self.cparser.value("radio/host", defaultValue="")
        self.pin = str(self.cparser.value("radio/pin", defaultValue="1234"))
        with contextlib.suppress(TypeError, ValueError):
            self.timeout = self.cparser.value("radio/timeout", type=float)
        with contextlib.suppress(TypeError, ValueError):
            self.notifytimeout = self.cparser.value("radio/notifytimeout", type=float)
        with contextlib.suppress(TypeError):
            self.strict = self.cparser.value("radio/strict", type=bool)
        loglevel = str(self.cparser.value("settings/loglevel", defaultValue="INFO")).strip().upper()
        if not isinstance(logging.getLevelName(loglevel), int):
            logging.warning("Unknown settings/loglevel %r, using INFO", loglevel)
            loglevel = "INFO"
        self.loglevel = loglevel

    def put(self, host: str, pin: str, loglevel: str) -> None:
        """replace the connection settings and save"""
        self.host = host
        self.pin = pin
        self.loglevel = loglevel
        self.save()

    def save(self) -> None:
        """save the current set"""
        self.cparser.setValue("radio/host", self.host)
        self.cparser.setValue("radio/pin", self.pin)
        self.cparser.setValue("radio/timeout", self.timeout)
        self.cparser.setValue("radio/notifytimeout", self.notifytimeout)
        self.cparser.setValue("radio/strict", self.strict)
        self.cparser.setValue("settings/loglevel", self.loglevel)
        self.cparser.sync()
