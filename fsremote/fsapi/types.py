#!/usr/bin/env python3
"""
Shared data types, constants and exceptions for the FSAPI protocol

Every response from the device is decoded into the classes defined here.
None of them outlive a single request/response cycle except SessionID,
which the client keeps for as long as the session is active.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from .nodes import Node

# URL verbs
FSAPI_PATH = "fsapi"
VERB_GET = "GET"
VERB_SET = "SET"
VERB_LIST_GET_NEXT = "LIST_GET_NEXT"
VERB_CREATE_SESSION = "CREATE_SESSION"
VERB_DELETE_SESSION = "DELETE_SESSION"
VERB_GET_NOTIFIES = "GET_NOTIFIES"

# multi-page continuation is not implemented, so ask for everything at once
LIST_MAX_ITEMS = 65536

# XML element names
TAG_RESPONSE = "fsapiResponse"
TAG_STATUS = "status"
TAG_VALUE = "value"
TAG_SESSION_ID = "sessionId"
TAG_ITEM = "item"
TAG_FIELD = "field"
TAG_LISTEND = "listend"
TAG_NOTIFY = "notify"

ATTR_KEY = "key"
ATTR_NAME = "name"
ATTR_NODE = "node"


class ResponseStatus(enum.Enum):
    """status element of every response frame"""

    OK = "FS_OK"
    FAIL = "FS_FAIL"
    PACKET_BAD = "FS_PACKET_BAD"
    NODE_BLOCKED = "FS_NODE_BLOCKED"
    NODE_DOES_NOT_EXIST = "FS_NODE_DOES_NOT_EXIST"
    TIMEOUT = "FS_TIMEOUT"
    LIST_END = "FS_LIST_END"

    @classmethod
    def from_text(cls, text: str) -> ResponseStatus:
        """exact match only; anything else is a decode failure"""
        try:
            return cls(text)
        except ValueError as err:
            raise ResponseFormatError(f"Unknown status: {text!r}") from err


# --- values ---------------------------------------------------------------


@dataclass(frozen=True)
class Value:
    """base of the typed scalar payloads; the variant is chosen by wire tag"""

    value: object
    tag: ClassVar[str] = ""

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Text(Value):
    """c8_array"""

    value: str
    tag: ClassVar[str] = "c8_array"


@dataclass(frozen=True)
class Array(Value):
    """raw array payload, passed through undecoded"""

    value: str
    tag: ClassVar[str] = "array"


@dataclass(frozen=True)
class IntegerValue(Value):
    """base of the numeric variants, bounded by the wire width"""

    value: int
    minimum: ClassVar[int] = 0
    maximum: ClassVar[int] = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{type(self).__name__} needs an int, not {self.value!r}")
        if not self.minimum <= self.value <= self.maximum:
            raise ValueError(
                f"{self.value} is out of range for {self.tag} "
                f"({self.minimum}..{self.maximum})"
            )


@dataclass(frozen=True)
class U8(IntegerValue):
    """unsigned 8 bit"""

    tag: ClassVar[str] = "u8"
    minimum: ClassVar[int] = 0
    maximum: ClassVar[int] = 0xFF


@dataclass(frozen=True)
class S16(IntegerValue):
    """signed 16 bit"""

    tag: ClassVar[str] = "s16"
    minimum: ClassVar[int] = -0x8000
    maximum: ClassVar[int] = 0x7FFF


@dataclass(frozen=True)
class U32(IntegerValue):
    """unsigned 32 bit"""

    tag: ClassVar[str] = "u32"
    minimum: ClassVar[int] = 0
    maximum: ClassVar[int] = 0xFFFFFFFF


VALUE_TYPES: dict[str, type[Value]] = {
    valuetype.tag: valuetype for valuetype in (Text, U8, S16, U32, Array)
}


# --- payloads -------------------------------------------------------------


@dataclass(frozen=True)
class SessionID:
    """opaque handle returned by CREATE_SESSION"""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class Field:
    """one named value inside an item"""

    name: str
    value: Value


@dataclass
class Item:
    """one record of a list response; fields keep their wire order"""

    key: int
    fields: list[Field] = field(default_factory=list)

    def get(self, name: str) -> Value | None:
        """look up a field value by name"""
        for entry in self.fields:
            if entry.name == name:
                return entry.value
        return None

    @property
    def label(self) -> str | None:
        """field 0 is usually the display label"""
        if self.fields and isinstance(self.fields[0].value, Text):
            return self.fields[0].value.value
        return None


@dataclass
class Notification:
    """a node that changed and its new value"""

    node: Node
    value: Value

    def __str__(self) -> str:
        return f"{self.node}: {self.value}"


class ItemList(list):
    """payload of a LIST_GET_NEXT response"""


class NotificationBatch(list):
    """payload of a GET_NOTIFIES response"""


@dataclass
class Response:
    """decoded envelope: status plus at most one payload"""

    status: ResponseStatus
    data: Value | SessionID | ItemList | NotificationBatch | None = None

    @property
    def ok(self) -> bool:
        """FS_OK?"""
        return self.status is ResponseStatus.OK


# --- exceptions -----------------------------------------------------------


class FsapiError(Exception):
    """Base exception for FSAPI errors"""


class WrongPin(FsapiError):
    """device refused the pin (HTTP 403)"""


class InvalidStatus(FsapiError):
    """status was unexpected for the operation"""

    def __init__(self, status: ResponseStatus | None = None, message: str | None = None):
        self.status = status
        if not message:
            message = f"Unexpected status {status.value}" if status else "Unexpected status"
        super().__init__(message)


class Fail(FsapiError):
    """FS_FAIL: usually the feature is not available in the current mode"""

    status = ResponseStatus.FAIL

    def __init__(self, message: str | None = None):
        super().__init__(message or "Action not available")


class InvalidData(FsapiError):
    """payload missing or of the wrong shape"""


class Timeout(FsapiError):
    """server or transport took too long"""


class TransportError(FsapiError):
    """connection level failure"""


class HttpStatusError(TransportError):
    """device answered with an HTTP status other than 200/403"""

    def __init__(self, status: int, url: str = ""):
        self.status = status
        self.url = url
        super().__init__(f"HTTP {status} from {url}" if url else f"HTTP {status}")


class DecodeError(FsapiError):
    """response text could not be decoded"""


class ResponseFormatError(DecodeError):
    """outer frame or status element missing, or not XML at all"""


class UnknownValueType(DecodeError):
    """value element with a tag that is not a known type"""


class MalformedValue(DecodeError):
    """value element not where it should be"""


class ValueParseError(DecodeError):
    """numeric text that does not fit the declared width"""


class MalformedList(DecodeError):
    """item list with an unexpected element"""


class MalformedNotification(DecodeError):
    """notify batch with an unexpected element"""


class UnknownNode(DecodeError):
    """path is not in the node schema"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unknown node: {path}")
