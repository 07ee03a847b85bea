#!/usr/bin/env python3
"""bootstrap the remote"""

import logging
import logging.handlers
import pathlib
import sys

from PySide6.QtCore import QCoreApplication, QStandardPaths  # pylint: disable=no-name-in-module

LOGFORMAT = (
    "%(asctime)s %(levelname)s %(process)d %(processName)s/%(threadName)s "
    + "%(module)s:%(funcName)s:%(lineno)d %(message)s"
)


def set_qt_names(
    app: QCoreApplication | None = None,
    domain: str = "com.github.fsremote",
    appname: str = "fsremote",
):
    """bootstrap Qt for configuration"""
    if not app:
        app = QCoreApplication.instance()
    if not app:
        app = QCoreApplication()
    app.setOrganizationDomain(domain)
    app.setOrganizationName("fsremote")
    app.setApplicationName(appname)


def setuplogging(
    logdir: pathlib.Path | str | None = None,
    logname: str = "debug.log",
    rotate: bool = False,
    level: int | str = logging.DEBUG,
) -> pathlib.Path:
    """configure logging"""
    if logdir:
        logpath = pathlib.Path(logdir)
        if logpath.is_file():
            logname = logpath.name
            logpath = logpath.parent
    else:
        logpath = pathlib.Path(
            QStandardPaths.writableLocation(QStandardPaths.AppDataLocation) or ".",
        ).joinpath("logs")
    logpath.mkdir(parents=True, exist_ok=True)
    logfile = logpath.joinpath(logname)

    besuretorotate = bool(logfile.exists() and rotate)
    logfhandler = logging.handlers.RotatingFileHandler(
        filename=logfile, backupCount=10, encoding="utf-8"
    )
    if besuretorotate:
        try:
            logfhandler.doRollover()
        except OSError as error:
            logging.warning("Could not rotate log file: %s", error)

    logging.basicConfig(
        format=LOGFORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        handlers=[logfhandler],
        level=level,
        force=True,
    )
    logging.captureWarnings(True)
    return logpath


def add_stderr_logging(level: int | str = logging.DEBUG) -> logging.Handler:
    """mirror log output to the terminal"""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(module)s: %(message)s"))
    handler.setLevel(level)
    logging.getLogger().addHandler(handler)
    return handler
