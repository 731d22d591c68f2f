import re

import pytest

from libnuke.log import (
    COLOR_REGION,
    COLOR_RESOURCE_ID,
    COLOR_RESOURCE_PROPERTIES,
    COLOR_RESOURCE_TYPE,
    REASON_ERROR,
    REASON_HOLD,
    REASON_REMOVE_TRIGGERED,
    REASON_SKIP,
    REASON_SUCCESS,
    REASON_WAIT_DEPENDENCY,
    REASON_WAIT_PENDING,
    CustomFormatter,
    LogEntry,
    sorted_properties,
    text_format,
)

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _strip(text):
    return _ANSI.sub("", text)


@pytest.mark.parametrize(
    "props, want",
    [
        ({}, "[]"),
        ({"one": "1"}, '[one: "1"]'),
        ({"one": "1", "two": "2"}, '[one: "1", two: "2"]'),
        ({"two": "2", "one": "1"}, '[one: "1", two: "2"]'),
        ({"_one": "1"}, "[]"),
    ],
)
def test_sorted(props, want):
    assert sorted_properties(props) == want


def test_format_none():
    assert CustomFormatter().format(None) is None


def test_format_println():
    entry = LogEntry(message="test message", data={"_handler": "println"})
    assert CustomFormatter().format(entry) == "test message\n"
    assert "_handler" not in entry.data


@pytest.mark.parametrize(
    "data, want",
    [
        ({"type": "test"}, 'time="0001-01-01T00:00:00Z" level=panic type=test\n'),
        (
            {"type": "test", "owner": "owner", "state": "new", "state_code": 0},
            'time="0001-01-01T00:00:00Z" level=panic owner=owner state=new state_code=0 type=test\n',
        ),
        (
            {"type": "test", "owner": "owner", "state": "new", "name": "resource"},
            'time="0001-01-01T00:00:00Z" level=panic name=resource owner=owner state=new type=test\n',
        ),
        (
            {"owner": "owner", "name": "resource"},
            'time="0001-01-01T00:00:00Z" level=panic name=resource owner=owner\n',
        ),
        (
            {"type": "test", "owner": "owner"},
            'time="0001-01-01T00:00:00Z" level=panic owner=owner type=test\n',
        ),
        (
            {"type": "test", "owner": "owner", "name": "resource"},
            'time="0001-01-01T00:00:00Z" level=panic name=resource owner=owner type=test\n',
        ),
    ],
)
def test_format_fallback(data, want):
    assert CustomFormatter().format(LogEntry(data=data)) == want


def test_text_format_message_quoted():
    assert text_format(LogEntry(message="hi there")) == (
        'time="0001-01-01T00:00:00Z" level=panic msg="hi there"\n'
    )


@pytest.mark.parametrize(
    "state, code, color",
    [
        ("new", 0, REASON_SUCCESS),
        ("hold", 2, REASON_HOLD),
        ("pending", 3, REASON_REMOVE_TRIGGERED),
        ("pending-dependency", 4, REASON_WAIT_DEPENDENCY),
        ("waiting", 5, REASON_WAIT_PENDING),
        ("failed", 6, REASON_ERROR),
        ("filtered", 7, REASON_SKIP),
    ],
)
def test_format_reasons(state, code, color):
    entry = LogEntry(
        message="test message",
        data={
            "type": "test",
            "owner": "owner",
            "name": "resource",
            "state": state,
            "state_code": code,
            "prop:one": "1",
            "prop:two": "2",
            "prop:_tagPrefix": "tag",
        },
    )
    props = '[one: "1", two: "2"]'
    expected = (
        f"{COLOR_REGION.sprint('owner')} - {COLOR_RESOURCE_TYPE.sprint('test')} - "
        f"{COLOR_RESOURCE_ID.sprint('resource')} - "
        f"{COLOR_RESOURCE_PROPERTIES.sprint(props)} - "
        f"{color.sprint('test message')}\n"
    )
    assert CustomFormatter().format(entry) == expected


def test_format_plain_text_content():
    entry = LogEntry(
        message="would remove",
        data={"type": "test", "owner": "owner", "name": "resource", "state": "new", "state_code": 0, "prop:one": "1"},
    )
    assert _strip(CustomFormatter().format(entry)) == 'owner - test - resource - [one: "1"] - would remove\n'


def test_color_sprint():
    out = REASON_ERROR.sprint("x")
    assert out in {"x", "\x1b[31mx\x1b[0m"}
    assert _strip(out) == "x"