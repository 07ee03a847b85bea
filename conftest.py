#!/usr/bin/env python3
"""pytest fixtures"""

import contextlib
import pathlib
import tempfile

import pytest
import pytest_asyncio

import fsremote.bootstrap
import fsremote.config
from fsremote.fsapi import FsapiClient

# keep the test run away from the real Qt names
DOMAIN = "com.github.fsremote.testsuite"

HOST = "radio.local"
PIN = "1234"


def _frame(status: str = "FS_OK", payload: str = "") -> str:
    """wrap a payload the way the device does"""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<fsapiResponse><status>{status}</status>{payload}</fsapiResponse>"
    )


@pytest.fixture
def fsapi_frame():
    """build device responses"""
    return _frame


@pytest.fixture
def bootstrap():
    """bootstrap a configuration on a throwaway ini file"""
    with contextlib.suppress(PermissionError):  # Windows blows
        with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as newpath:
            fsremote.bootstrap.set_qt_names(domain=DOMAIN, appname="testsuite")
            config = fsremote.config.ConfigFile(
                inifile=pathlib.Path(newpath).joinpath("fsremote.ini"), reset=True
            )
            yield config
            del config


@pytest_asyncio.fixture
async def fsclient():
    """client for a radio that never really answers"""
    client = FsapiClient(HOST, PIN, timeout=1.0, notifytimeout=1.0)
    yield client
    await client.transport.close()
