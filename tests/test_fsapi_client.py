#!/usr/bin/env python3
''' test the session and long-poll client '''

# pylint: disable=redefined-outer-name

import asyncio
import re
from unittest.mock import AsyncMock

import aiohttp
import pytest
from aioresponses import aioresponses

from fsremote.fsapi import (
    U8,
    Fail,
    FsapiClient,
    HttpStatusError,
    InvalidData,
    InvalidStatus,
    Node,
    Notification,
    ResponseFormatError,
    ResponseStatus,
    SessionID,
    SessionState,
    Text,
    Timeout,
    Transport,
    TransportError,
    UnknownNode,
    WrongPin,
)

BASE = 'http://radio.local/fsapi'
ANY_URL = re.compile(r'^http://radio\.local/fsapi/.*$')


@pytest.mark.asyncio
async def test_get(fsclient, fsapi_frame):
    ''' GET returns the typed value '''
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/GET/netremote.sys.audio.volume?pin=1234',
                   body=fsapi_frame(payload='<value><u8>9</u8></value>'))
        assert await fsclient.get(Node.SYS_AUDIO_VOLUME) == U8(9)


@pytest.mark.asyncio
async def test_get_non_ok(fsclient, fsapi_frame):
    ''' status other than FS_OK is an error that names the status '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_NODE_DOES_NOT_EXIST'))
        with pytest.raises(InvalidStatus) as excinfo:
            await fsclient.get(Node.SYS_AUDIO_VOLUME)
    assert excinfo.value.status is ResponseStatus.NODE_DOES_NOT_EXIST


@pytest.mark.asyncio
async def test_get_without_value(fsclient, fsapi_frame):
    ''' GET needs a value payload '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(payload='<sessionId>5</sessionId>'))
        with pytest.raises(InvalidData):
            await fsclient.get(Node.SYS_AUDIO_VOLUME)


@pytest.mark.asyncio
async def test_get_decode_error(fsclient, fsapi_frame):
    ''' decode errors reach the caller '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_WHAT'))
        with pytest.raises(ResponseFormatError):
            await fsclient.get(Node.SYS_POWER)


@pytest.mark.asyncio
async def test_set(fsclient, fsapi_frame):
    ''' SET sends the value as a parameter '''
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/SET/netremote.sys.audio.volume?pin=1234&value=12', body=fsapi_frame())
        mocked.get(f'{BASE}/SET/netremote.sys.power?pin=1234&value=1', body=fsapi_frame())
        mocked.get(f'{BASE}/SET/netremote.nav.searchterm?pin=1234&value=Radio+1',
                   body=fsapi_frame())
        await fsclient.set(Node.SYS_AUDIO_VOLUME, 12)
        await fsclient.set(Node.SYS_POWER, True)
        await fsclient.set(Node.NAV_SEARCH_TERM, Text('Radio 1'))


@pytest.mark.asyncio
async def test_set_rejected(fsclient, fsapi_frame):
    ''' device refuses the value '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_FAIL'))
        with pytest.raises(InvalidStatus) as excinfo:
            await fsclient.set(Node.PLAY_CONTROL, 3)
    assert excinfo.value.status is ResponseStatus.FAIL


@pytest.mark.asyncio
async def test_wrong_pin(fsclient):
    ''' HTTP 403 means the pin is wrong '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, status=403, body='')
        with pytest.raises(WrongPin):
            await fsclient.get(Node.SYS_POWER)


@pytest.mark.asyncio
async def test_http_error(fsclient):
    ''' other HTTP failures carry the code '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, status=404, body='')
        with pytest.raises(HttpStatusError) as excinfo:
            await fsclient.get(Node.SYS_POWER)
    assert excinfo.value.status == 404
    assert '1234' not in str(excinfo.value)


@pytest.mark.asyncio
async def test_transport_timeout(fsclient):
    ''' transport timeouts map to Timeout '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, exception=asyncio.TimeoutError())
        with pytest.raises(Timeout):
            await fsclient.get(Node.SYS_POWER)


@pytest.mark.asyncio
async def test_connection_error(fsclient):
    ''' unreachable device '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, exception=aiohttp.ClientConnectionError('refused'))
        with pytest.raises(TransportError):
            await fsclient.get(Node.SYS_POWER)


@pytest.mark.asyncio
async def test_item_list(fsclient, fsapi_frame):
    ''' one page with everything '''
    payload = ('<item key="0"><field name="name"><c8_array>BBC</c8_array></field></item>'
               '<item key="1"><field name="name"><c8_array>FIP</c8_array></field></item>'
               '<listend/>')
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/LIST_GET_NEXT/netremote.nav.presets/-1?pin=1234&maxItems=65536',
                   body=fsapi_frame(payload=payload))
        items = await fsclient.get_item_list(Node.NAV_PRESETS)
    assert [item.key for item in items] == [0, 1]
    assert items[1].label == 'FIP'


@pytest.mark.asyncio
async def test_item_list_with_session(fsclient, fsapi_frame):
    ''' the session id is passed along when given '''
    with aioresponses() as mocked:
        mocked.get(
            f'{BASE}/LIST_GET_NEXT/netremote.nav.presets/-1?pin=1234&SID=77&maxItems=65536',
            body=fsapi_frame(payload='<listend/>'))
        assert await fsclient.get_item_list(Node.NAV_PRESETS, SessionID(77)) == []


@pytest.mark.asyncio
async def test_item_list_end_status(fsclient, fsapi_frame):
    ''' FS_LIST_END means nothing (more) to list '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_LIST_END'))
        assert await fsclient.get_item_list(Node.NAV_LIST) == []


@pytest.mark.asyncio
async def test_item_list_fail(fsclient, fsapi_frame):
    ''' FS_FAIL on a list is its own error '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_FAIL'))
        with pytest.raises(Fail):
            await fsclient.get_item_list(Node.NAV_PRESETS)


@pytest.mark.asyncio
async def test_item_list_other_status(fsclient, fsapi_frame):
    ''' anything else is unexpected '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_NODE_BLOCKED'))
        with pytest.raises(InvalidStatus):
            await fsclient.get_item_list(Node.NAV_PRESETS)


@pytest.mark.asyncio
async def test_session_lifecycle(fsclient, fsapi_frame):
    ''' NO_SESSION -> ACTIVE -> NO_SESSION '''
    assert fsclient.state is SessionState.NO_SESSION
    assert fsclient.session_id is None
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/CREATE_SESSION?pin=1234',
                   body=fsapi_frame(payload='<sessionId>1001</sessionId>'))
        mocked.get(f'{BASE}/DELETE_SESSION?pin=1234&sid=1001', body=fsapi_frame())
        assert await fsclient.create_session() == SessionID(1001)
        assert fsclient.state is SessionState.ACTIVE
        await fsclient.delete_session()
    assert fsclient.state is SessionState.NO_SESSION
    assert fsclient.session_id is None


@pytest.mark.asyncio
async def test_create_session_replaces(fsclient, fsapi_frame):
    ''' only the newest session is held '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(payload='<sessionId>1</sessionId>'))
        mocked.get(ANY_URL, body=fsapi_frame(payload='<sessionId>2</sessionId>'))
        await fsclient.create_session()
        await fsclient.create_session()
    assert fsclient.session_id == SessionID(2)


@pytest.mark.asyncio
async def test_create_session_without_id(fsclient, fsapi_frame):
    ''' an OK without a session id is no session '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame())
        with pytest.raises(InvalidData):
            await fsclient.create_session()
    assert fsclient.state is SessionState.NO_SESSION


@pytest.mark.asyncio
async def test_delete_without_session(fsclient):
    ''' nothing to do, nothing sent '''
    with aioresponses() as mocked:
        await fsclient.delete_session()
        assert not mocked.requests


@pytest.mark.asyncio
async def test_delete_session_clears_on_failure(fsclient, fsapi_frame):
    ''' the session is gone even when the device complains '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(payload='<sessionId>3</sessionId>'))
        mocked.get(ANY_URL, body=fsapi_frame(status='FS_FAIL'))
        await fsclient.create_session()
        with pytest.raises(InvalidStatus):
            await fsclient.delete_session()
    assert fsclient.state is SessionState.NO_SESSION


@pytest.mark.asyncio
async def test_notifications(fsclient, fsapi_frame):
    ''' a batch of changes '''
    payload = ('<notify node="netremote.sys.audio.volume"><value><u8>4</u8></value></notify>'
               '<notify node="netremote.sys.audio.mute"><value><u8>1</u8></value></notify>')
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/CREATE_SESSION?pin=1234',
                   body=fsapi_frame(payload='<sessionId>42</sessionId>'))
        mocked.get(f'{BASE}/GET_NOTIFIES?pin=1234&sid=42', body=fsapi_frame(payload=payload))
        await fsclient.create_session()
        batch = await fsclient.get_notifications()
    assert batch == [
        Notification(Node.SYS_AUDIO_VOLUME, U8(4)),
        Notification(Node.SYS_AUDIO_MUTE, U8(1)),
    ]


@pytest.mark.asyncio
async def test_notifications_timeout_is_none(fsclient, fsapi_frame):
    ''' nothing changed is not an error '''
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/GET_NOTIFIES?pin=1234&sid=9',
                   body=fsapi_frame(status='FS_TIMEOUT'))
        assert await fsclient.get_notifications(SessionID(9)) is None


@pytest.mark.asyncio
async def test_notifications_transport_timeout_is_none(fsclient):
    ''' a long-poll that outlives notifytimeout is not an error either '''
    with aioresponses() as mocked:
        mocked.get(f'{BASE}/GET_NOTIFIES?pin=1234&sid=7', exception=asyncio.TimeoutError())
        assert await fsclient.get_notifications(SessionID(7)) is None


@pytest.mark.asyncio
async def test_injected_transport_gets_client_timeouts():
    ''' the client's timeouts are passed on every request '''
    transport = Transport(timeout=30.0)
    transport.fetch_text = AsyncMock(
        return_value='<fsapiResponse><status>FS_TIMEOUT</status></fsapiResponse>')
    client = FsapiClient('radio.local', 1234, transport=transport, timeout=2.0, notifytimeout=9.0)
    with pytest.raises(InvalidStatus):
        await client.get(Node.SYS_POWER)
    assert await client.get_notifications(SessionID(3)) is None
    assert [kwargs['timeout'] for _, kwargs in transport.fetch_text.await_args_list] == [2.0, 9.0]


@pytest.mark.asyncio
async def test_notifications_need_a_session(fsclient):
    ''' no session, no long-poll '''
    with pytest.raises(InvalidData):
        await fsclient.get_notifications()


@pytest.mark.asyncio
async def test_notifications_wrong_payload(fsclient, fsapi_frame):
    ''' a value is not a batch '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(payload='<value><u8>1</u8></value>'))
        with pytest.raises(InvalidData):
            await fsclient.get_notifications(SessionID(9))


@pytest.mark.asyncio
async def test_notifications_strict(fsapi_frame):
    ''' strict clients fail on unknown nodes '''
    client = FsapiClient('radio.local', 1234, strict=True)
    payload = '<notify node="netremote.new.thing"><value><u8>1</u8></value></notify>'
    try:
        with aioresponses() as mocked:
            mocked.get(ANY_URL, body=fsapi_frame(payload=payload))
            with pytest.raises(UnknownNode) as excinfo:
                await client.get_notifications(SessionID(1))
        assert excinfo.value.path == 'netremote.new.thing'
    finally:
        await client.transport.close()


@pytest.mark.asyncio
async def test_close_deletes_session(fsapi_frame):
    ''' leaving the context logs out '''
    with aioresponses() as mocked:
        mocked.get(ANY_URL, body=fsapi_frame(payload='<sessionId>8</sessionId>'))
        mocked.get(f'{BASE}/DELETE_SESSION?pin=1234&sid=8', body=fsapi_frame())
        async with FsapiClient('radio.local', '1234') as client:
            await client.create_session()
        assert client.state is SessionState.NO_SESSION
        assert client.transport.session is None


@pytest.mark.asyncio
async def test_shared_session_not_closed(fsapi_frame):
    ''' a session handed in belongs to the caller '''
    async with aiohttp.ClientSession() as session:
        transport = Transport(session=session)
        client = FsapiClient('radio.local', '1234', transport=transport)
        with aioresponses() as mocked:
            mocked.get(ANY_URL, body=fsapi_frame(payload='<value><u8>1</u8></value>'))
            assert await client.get(Node.SYS_POWER) == U8(1)
        await client.close()
        assert not session.closed


@pytest.mark.asyncio
async def test_ipv6_host(fsapi_frame):
    ''' bare IPv6 addresses are bracketed '''
    client = FsapiClient('fe80::1', '1234')
    try:
        with aioresponses() as mocked:
            mocked.get('http://[fe80::1]/fsapi/GET/netremote.sys.power?pin=1234',
                       body=fsapi_frame(payload='<value><u8>0</u8></value>'))
            assert await client.get(Node.SYS_POWER) == U8(0)
    finally:
        await client.transport.close()
