#!/usr/bin/env python3
"""
FSAPI client

Issues the protocol verbs against a device and owns the notification
session.  The device keeps a single session: creating one invalidates
whatever session existed before, for this client or any other.
"""

import asyncio
import enum
import logging

from . import protocol
from .nodes import Node, resolve
from .transport import Transport
from .types import (
    LIST_MAX_ITEMS,
    VERB_CREATE_SESSION,
    VERB_DELETE_SESSION,
    VERB_GET,
    VERB_GET_NOTIFIES,
    VERB_LIST_GET_NEXT,
    VERB_SET,
    Fail,
    InvalidData,
    InvalidStatus,
    ItemList,
    NotificationBatch,
    Response,
    ResponseStatus,
    SessionID,
    Timeout,
    Value,
)


class SessionState(enum.Enum):
    """where the client is in the session lifecycle"""

    NO_SESSION = "no session"
    ACTIVE = "active"


class FsapiClient:  # pylint: disable=too-many-instance-attributes
    """one device, addressed by host and pin

    timeout applies to every verb but GET_NOTIFIES, which waits up to
    notifytimeout.  Both are passed on each request, so they hold for an
    injected transport too.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        host: str,
        pin: str | int,
        transport: Transport | None = None,
        timeout: float = 5.0,
        notifytimeout: float = 60.0,
        strict: bool = False,
    ):
        self.host: str = host
        self.pin: str = str(pin)
        self.transport: Transport = transport or Transport(timeout=timeout)
        self.timeout: float = timeout
        self.notifytimeout: float = notifytimeout
        self.strict: bool = strict
        self._session_id: SessionID | None = None
        self._poll_lock = asyncio.Lock()

    @property
    def session_id(self) -> SessionID | None:
        """the session this client holds, if any"""
        return self._session_id

    @property
    def state(self) -> SessionState:
        """NO_SESSION or ACTIVE"""
        return SessionState.ACTIVE if self._session_id else SessionState.NO_SESSION

    def _url(self, verb: str, *segments: str, **params) -> str:
        return protocol.build_url(self.host, verb, *segments, pin=self.pin, **params)

    async def _request(self, url: str, timeout: float | None = None) -> Response:
        text = await self.transport.fetch_text(
            url, timeout=self.timeout if timeout is None else timeout
        )
        response = protocol.parse_response(text, strict=self.strict)
        logging.debug("%s -> %s", protocol.mask_pin(url), response.status.value)
        return response

    @staticmethod
    def _require_ok(response: Response) -> None:
        if not response.ok:
            raise InvalidStatus(response.status)

    async def get(self, node: Node) -> Value:
        """read one node"""
        response = await self._request(self._url(VERB_GET, resolve(node)))
        self._require_ok(response)
        if not isinstance(response.data, Value):
            raise InvalidData(f"GET {node}: expected a value, got {response.data!r}")
        return response.data

    async def set(self, node: Node, value: Value | int | str) -> None:
        """write one node"""
        if isinstance(value, bool):
            value = int(value)
        response = await self._request(self._url(VERB_SET, resolve(node), value=str(value)))
        self._require_ok(response)
        if response.data is not None:
            raise InvalidData(f"SET {node}: unexpected payload {response.data!r}")

    async def get_item_list(self, node: Node, session_id: SessionID | None = None) -> ItemList:
        """every item of a list node, in a single page"""
        url = self._url(
            VERB_LIST_GET_NEXT,
            resolve(node),
            "-1",
            SID=str(session_id) if session_id else None,
            maxItems=LIST_MAX_ITEMS,
        )
        response = await self._request(url)
        if response.status is ResponseStatus.FAIL:
            raise Fail(f"{node} is not available right now")
        if response.status is ResponseStatus.LIST_END:
            return ItemList()
        self._require_ok(response)
        if not isinstance(response.data, ItemList):
            raise InvalidData(f"LIST_GET_NEXT {node}: expected items, got {response.data!r}")
        return response.data

    async def create_session(self) -> SessionID:
        """log in; replaces any session held before"""
        response = await self._request(self._url(VERB_CREATE_SESSION))
        self._require_ok(response)
        if not isinstance(response.data, SessionID):
            raise InvalidData(f"CREATE_SESSION: expected a session id, got {response.data!r}")
        if self._session_id:
            logging.debug("Session %s superseded by %s", self._session_id, response.data)
        self._session_id = response.data
        logging.info("Created session %s on %s", self._session_id, self.host)
        return self._session_id

    async def delete_session(self) -> None:
        """log out"""
        if not self._session_id:
            logging.debug("No session to delete on %s", self.host)
            return
        session_id, self._session_id = self._session_id, None
        response = await self._request(self._url(VERB_DELETE_SESSION, sid=str(session_id)))
        logging.info("Deleted session %s on %s", session_id, self.host)
        self._require_ok(response)
        if response.data is not None:
            raise InvalidData(f"DELETE_SESSION: unexpected payload {response.data!r}")

    async def get_notifications(
        self, session_id: SessionID | None = None
    ) -> NotificationBatch | None:
        """long-poll for changes

        The device holds the request until something changes or its own
        timeout runs out.  None means nothing changed; call again.  Only
        one poll per client is in flight at a time.  A transport timeout
        is treated the same as the device's FS_TIMEOUT.
        """
        session_id = session_id or self._session_id
        if not session_id:
            raise InvalidData("GET_NOTIFIES needs a session")

        async with self._poll_lock:
            try:
                response = await self._request(
                    self._url(VERB_GET_NOTIFIES, sid=str(session_id)), timeout=self.notifytimeout
                )
            except Timeout as err:
                logging.debug("Long-poll on %s ran out: %s", self.host, err)
                return None
        if response.status is ResponseStatus.TIMEOUT:
            return None
        self._require_ok(response)
        if not isinstance(response.data, NotificationBatch):
            raise InvalidData(f"GET_NOTIFIES: expected notifications, got {response.data!r}")
        return response.data

    async def close(self) -> None:
        """delete the session if one is held and release the transport"""
        try:
            await self.delete_session()
        finally:
            await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
