#!/usr/bin/env python3
"""
Pull cursor over an FSAPI response frame

The frame is pushed into lxml's XMLPullParser one tag at a time, only as
far as the decoders ask for events.  A decoder that stops early never
makes the parser look at what follows, so trailing content after a
non-OK status or after the end of a notify batch is never read.
"""

import re
from dataclasses import dataclass
from typing import Iterator

import lxml.etree

from .types import DecodeError, ResponseFormatError

START = "start"
END = "end"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


@dataclass
class Event:
    """one start or end of an element"""

    kind: str
    element: lxml.etree._Element  # pylint: disable=c-extension-no-member,protected-access

    @property
    def tag(self) -> str:
        """local element name"""
        return lxml.etree.QName(self.element).localname  # pylint: disable=c-extension-no-member

    @property
    def attrib(self) -> dict[str, str]:
        """element attributes"""
        return dict(self.element.attrib)

    def is_start(self, tag: str | None = None) -> bool:
        """start of an element, optionally of a given name"""
        return self.kind == START and (tag is None or self.tag == tag)

    def is_end(self, tag: str | None = None) -> bool:
        """end of an element, optionally of a given name"""
        return self.kind == END and (tag is None or self.tag == tag)

    def __str__(self) -> str:
        return f"<{self.tag}>" if self.kind == START else f"</{self.tag}>"


def _chunks(data: bytes) -> Iterator[bytes]:
    """split so that each piece ends with a '>'"""
    start = 0
    while start < len(data):
        end = data.find(b">", start)
        end = len(data) if end == -1 else end + 1
        yield data[start:end]
        start = end


class FrameReader:
    """start/end events of one response, with one event of lookahead"""

    def __init__(self, text: str | bytes):
        if isinstance(text, str):
            # the text is already decoded; an encoding declaration would lie
            text = _XML_DECLARATION.sub("", text, count=1).encode("utf-8")
        self._chunks = _chunks(text)
        self._parser = lxml.etree.XMLPullParser(  # pylint: disable=c-extension-no-member
            events=(START, END),
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
        )
        self._pending: list[Event] = []
        self._closed = False

    def _fill(self) -> None:
        while not self._pending and not self._closed:
            try:
                chunk = next(self._chunks, None)
                if chunk is None:
                    self._closed = True
                    self._parser.close()
                else:
                    self._parser.feed(chunk)
            except lxml.etree.XMLSyntaxError as err:  # pylint: disable=c-extension-no-member
                self._closed = True
                raise ResponseFormatError(f"Malformed XML: {err}") from err
            self._pending.extend(
                Event(kind, element) for kind, element in self._parser.read_events()
            )

    def peek(self) -> Event | None:
        """next event without consuming it, None at end of input"""
        self._fill()
        return self._pending[0] if self._pending else None

    def pop(self) -> Event | None:
        """consume the next event, None at end of input"""
        self._fill()
        return self._pending.pop(0) if self._pending else None

    def expect_end(self, tag: str, error: type[DecodeError]) -> Event:
        """consume the end of `tag` or raise `error`"""
        event = self.pop()
        if event is None or not event.is_end(tag):
            raise error(f"Expected </{tag}>, got {event or 'end of frame'}")
        return event

    def text_of(self, start: Event, error: type[DecodeError]) -> str:
        """consume a leaf element whose start was just popped and return its text"""
        self.expect_end(start.tag, error)
        return start.element.text or ""
