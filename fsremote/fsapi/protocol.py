#!/usr/bin/env python3
"""
FSAPI protocol handler

Decodes the response envelope and the four payload shapes it can carry,
and builds request URLs.  The record list and the notify batch are both
read with one element of lookahead: the key of the next item (or the node
of the next notification) is only known once its start tag has been read,
so it is carried across loop iterations as an explicit pending header.
"""

import contextlib
import ipaddress
import logging
import re
import urllib.parse
from typing import NamedTuple

from . import nodes
from .nodes import Node
from .reader import FrameReader
from .types import (
    ATTR_KEY,
    ATTR_NAME,
    ATTR_NODE,
    FSAPI_PATH,
    TAG_FIELD,
    TAG_ITEM,
    TAG_LISTEND,
    TAG_NOTIFY,
    TAG_RESPONSE,
    TAG_SESSION_ID,
    TAG_STATUS,
    TAG_VALUE,
    U32,
    VALUE_TYPES,
    Field,
    IntegerValue,
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
    UnknownNode,
    UnknownValueType,
    Value,
    ValueParseError,
)

_INTEGER = re.compile(r"^[+-]?\d+$")


class NotifyHeader(NamedTuple):
    """what a <notify node="..."> start tag tells us; node is None if unknown"""

    path: str
    node: Node | None


def parse_integer(text: str, minimum: int, maximum: int, what: str) -> int:
    """decimal text -> int within [minimum, maximum]"""
    text = text.strip()
    if not _INTEGER.match(text):
        raise ValueParseError(f"{what}: {text!r} is not a number")
    number = int(text)
    if not minimum <= number <= maximum:
        raise ValueParseError(f"{what}: {number} is out of range ({minimum}..{maximum})")
    return number


def decode_value(reader: FrameReader) -> Value:
    """consume one typed element (<u8>7</u8> and friends)"""
    event = reader.pop()
    if event is None or not event.is_start():
        raise MalformedValue(f"Expected a typed value, got {event or 'end of frame'}")

    valuetype = VALUE_TYPES.get(event.tag)
    if valuetype is None:
        raise UnknownValueType(f"Unknown value type: {event.tag}")

    text = reader.text_of(event, MalformedValue)
    if not issubclass(valuetype, IntegerValue):
        return valuetype(text)
    return valuetype(
        parse_integer(text, valuetype.minimum, valuetype.maximum, valuetype.tag)
    )


def _item_key(attrib: dict[str, str]) -> int:
    if ATTR_KEY not in attrib:
        raise MalformedList("item without a key")
    return parse_integer(attrib[ATTR_KEY], U32.minimum, U32.maximum, "item key")


def _decode_fields(reader: FrameReader, key: int) -> list[Field]:
    """fields of one item, up to and including </item>"""
    fields: list[Field] = []
    while True:
        event = reader.pop()
        if event is None:
            raise MalformedList(f"item {key}: frame ended inside the item")
        if event.is_end(TAG_ITEM):
            return fields
        if not event.is_start(TAG_FIELD):
            raise MalformedList(f"item {key}: unexpected {event}")

        name = event.attrib.get(ATTR_NAME)
        if name is None:
            raise MalformedList(f"item {key}: field without a name")
        if any(entry.name == name for entry in fields):
            raise MalformedList(f"item {key}: duplicate field {name}")
        value = decode_value(reader)
        reader.expect_end(TAG_FIELD, MalformedList)
        fields.append(Field(name=name, value=value))


def decode_items(first_key: int, reader: FrameReader) -> ItemList:
    """records of a list response; the first <item key=...> was already read"""
    items = ItemList()
    pending_key: int | None = first_key

    while pending_key is not None:
        key, pending_key = pending_key, None
        items.append(Item(key=key, fields=_decode_fields(reader, key)))

        event = reader.pop()
        if event is None:
            raise MalformedList("frame ended before <listend/>")
        if event.is_start(TAG_ITEM):
            pending_key = _item_key(event.attrib)
        elif event.is_start(TAG_LISTEND):
            reader.expect_end(TAG_LISTEND, MalformedList)
        else:
            raise MalformedList(f"unexpected {event} after item {key}")

    return items


def notify_header(attrib: dict[str, str], strict: bool = False) -> NotifyHeader:
    """resolve the node attribute of a <notify> start tag"""
    path = attrib.get(ATTR_NODE)
    if path is None:
        raise MalformedNotification("notify without a node")
    try:
        return NotifyHeader(path, nodes.parse(path))
    except UnknownNode:
        if strict:
            raise
        logging.warning("Ignoring notification for unknown node %s", path)
        return NotifyHeader(path, None)


def decode_notifications(
    first: NotifyHeader | Node, reader: FrameReader, strict: bool = False
) -> NotificationBatch:
    """notify batch up to </fsapiResponse>; the first <notify> was already read

    Notifications for nodes outside the schema are dropped unless strict.
    """
    if isinstance(first, Node):
        first = NotifyHeader(first.value, first)

    notifications = NotificationBatch()
    pending: NotifyHeader | None = first

    while pending is not None:
        header, pending = pending, None

        event = reader.pop()
        if event is None or not event.is_start(TAG_VALUE):
            raise MalformedNotification(
                f"{header.path}: expected <value>, got {event or 'end of frame'}"
            )
        value = decode_value(reader)
        reader.expect_end(TAG_VALUE, MalformedNotification)
        reader.expect_end(TAG_NOTIFY, MalformedNotification)

        if header.node is not None:
            notifications.append(Notification(node=header.node, value=value))

        event = reader.pop()
        if event is None:
            raise MalformedNotification("frame ended before </fsapiResponse>")
        if event.is_start(TAG_NOTIFY):
            pending = notify_header(event.attrib, strict=strict)
        elif not event.is_end(TAG_RESPONSE):
            raise MalformedNotification(f"unexpected {event} after {header.path}")

    return notifications


def _decode_session_id(reader: FrameReader, start) -> SessionID:
    text = reader.text_of(start, ResponseFormatError)
    return SessionID(parse_integer(text, U32.minimum, U32.maximum, "sessionId"))


def _decode_data(reader: FrameReader, strict: bool):  # pylint: disable=too-many-return-statements
    event = reader.pop()
    if event is None:
        raise ResponseFormatError("frame ended before </fsapiResponse>")
    if event.is_end(TAG_RESPONSE):
        return None
    if not event.is_start():
        raise ResponseFormatError(f"unexpected {event}")

    if event.tag == TAG_VALUE:
        value = decode_value(reader)
        reader.expect_end(TAG_VALUE, MalformedValue)
        return value
    if event.tag == TAG_SESSION_ID:
        return _decode_session_id(reader, event)
    if event.tag == TAG_ITEM:
        return decode_items(_item_key(event.attrib), reader)
    if event.tag == TAG_LISTEND:
        reader.expect_end(TAG_LISTEND, MalformedList)
        return ItemList()
    if event.tag == TAG_NOTIFY:
        return decode_notifications(notify_header(event.attrib, strict=strict), reader, strict)
    raise ResponseFormatError(f"Unknown payload: {event}")


def parse_response(text: str | bytes, strict: bool = False) -> Response:
    """decode one response frame"""
    reader = FrameReader(text)

    event = reader.pop()
    if event is None or not event.is_start(TAG_RESPONSE):
        raise ResponseFormatError(f"Expected <{TAG_RESPONSE}>, got {event or 'nothing'}")

    event = reader.pop()
    if event is None or not event.is_start(TAG_STATUS):
        raise ResponseFormatError(f"Expected <{TAG_STATUS}>, got {event or 'end of frame'}")
    status = ResponseStatus.from_text(reader.text_of(event, ResponseFormatError).strip())

    if status is not ResponseStatus.OK:
        return Response(status=status)
    return Response(status=status, data=_decode_data(reader, strict))


# --- requests -------------------------------------------------------------


def format_host(host: str) -> str:
    """wrap bare IPv6 addresses in brackets"""
    if host.startswith("[") and host.endswith("]"):
        return host
    with contextlib.suppress(ValueError):
        if isinstance(ipaddress.ip_address(host), ipaddress.IPv6Address):
            return f"[{host}]"
    return host


def build_url(host: str, verb: str, *segments: str, **params) -> str:
    """http://host/fsapi/VERB[/segment...]?param=...

    Parameters with a value of None are left out; order is kept.
    """
    path = "/".join([FSAPI_PATH, verb, *segments])
    query = urllib.parse.urlencode({key: val for key, val in params.items() if val is not None})
    return f"http://{format_host(host)}/{path}?{query}"


def mask_pin(url: str) -> str:
    """hide the pin for logging"""
    return re.sub(r"([?&]pin=)[^&]*", r"\1****", url)
