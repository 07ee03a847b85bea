#!/usr/bin/env python3
''' test the pull cursor '''

import pytest

from fsremote.fsapi import MalformedValue, ResponseFormatError
from fsremote.fsapi.reader import FrameReader


def test_events_in_document_order():
    ''' start and end events, one at a time '''
    reader = FrameReader('<a><b>text</b></a>')
    seen = []
    while (event := reader.pop()) is not None:
        seen.append(str(event))
    assert seen == ['<a>', '<b>', '</b>', '</a>']


def test_peek_does_not_consume():
    ''' peek returns the same event pop will '''
    reader = FrameReader('<a><b/></a>')
    assert reader.peek().is_start('a')
    assert reader.peek().is_start('a')
    assert reader.pop().is_start('a')
    assert reader.peek().is_start('b')


def test_text_of_leaf():
    ''' leaf text is available once its end was read '''
    reader = FrameReader('<a><c8_array>Radio 1</c8_array></a>')
    reader.pop()
    start = reader.pop()
    assert reader.text_of(start, MalformedValue) == 'Radio 1'
    assert reader.pop().is_end('a')


def test_text_of_empty_leaf():
    ''' empty element has empty text '''
    reader = FrameReader('<a><c8_array></c8_array></a>')
    reader.pop()
    assert reader.text_of(reader.pop(), MalformedValue) == ''


def test_text_of_rejects_children():
    ''' a leaf must not contain elements '''
    reader = FrameReader('<a><u8><b/></u8></a>')
    reader.pop()
    with pytest.raises(MalformedValue):
        reader.text_of(reader.pop(), MalformedValue)


def test_xml_declaration_on_text():
    ''' declared encoding is dropped for already decoded text '''
    reader = FrameReader('<?xml version="1.0" encoding="ISO-8859-1"?>\n<a>Köln</a>')
    start = reader.pop()
    assert reader.text_of(start, MalformedValue) == 'Köln'


def test_malformed_xml():
    ''' syntax errors become format errors '''
    reader = FrameReader('<a><b></a>')
    with pytest.raises(ResponseFormatError):
        while reader.pop() is not None:
            pass


def test_stops_feeding_when_done():
    ''' nothing after the last requested event is parsed '''
    reader = FrameReader('<a><b/></a><junk')
    assert reader.pop().is_start('a')
    assert reader.pop().is_start('b')
    assert reader.pop().is_end('b')
    assert reader.pop().is_end('a')


def test_empty_input():
    ''' nothing to read '''
    reader = FrameReader('')
    with pytest.raises(ResponseFormatError):
        reader.pop()
