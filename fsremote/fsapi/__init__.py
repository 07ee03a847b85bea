#!/usr/bin/env python3
"""
FSAPI client package

Decoding of the device's XML responses, the node schema, and the client
that issues requests and long-polls for notifications.
"""

from .client import FsapiClient, SessionState
from .listener import NotificationListener
from .nodes import Node, lookup, parse, resolve
from .protocol import parse_response
from .transport import Transport
from .types import (
    S16,
    U8,
    U32,
    Array,
    DecodeError,
    Fail,
    Field,
    FsapiError,
    HttpStatusError,
    InvalidData,
    InvalidStatus,
    Item,
    ItemList,
    MalformedList,
    MalformedNotification,
    MalformedValue,
    Notification,
    NotificationBatch,
    Response,
    ResponseFormatError,
    ResponseStatus,
    SessionID,
    Text,
    Timeout,
    TransportError,
    UnknownNode,
    UnknownValueType,
    Value,
    ValueParseError,
    WrongPin,
)

__all__ = [
    "Array",
    "DecodeError",
    "Fail",
    "Field",
    "FsapiClient",
    "FsapiError",
    "HttpStatusError",
    "InvalidData",
    "InvalidStatus",
    "Item",
    "ItemList",
    "MalformedList",
    "MalformedNotification",
    "MalformedValue",
    "Node",
    "Notification",
    "NotificationBatch",
    "NotificationListener",
    "Response",
    "ResponseFormatError",
    "ResponseStatus",
    "S16",
    "SessionID",
    "SessionState",
    "Text",
    "Timeout",
    "Transport",
    "TransportError",
    "U32",
    "U8",
    "UnknownNode",
    "UnknownValueType",
    "Value",
    "ValueParseError",
    "WrongPin",
    "lookup",
    "parse",
    "parse_response",
    "resolve",
]
