"""Coloured, stable log output for resources and their removal state."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, ClassVar

_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Color:
    """A set of SGR attributes applied to text when colour output is enabled."""

    codes: tuple[int, ...] = ()

    enabled: ClassVar[bool] = "NO_COLOR" not in os.environ and sys.stdout.isatty()

    def sprint(self, text: Any) -> str:
        text = str(text)
        if not Color.enabled or not self.codes:
            return text
        return f"\x1b[{';'.join(map(str, self.codes))}m{text}{_RESET}"


REASON_SKIP = Color((33,))
REASON_ERROR = Color((31,))
REASON_REMOVE_TRIGGERED = Color((32,))
REASON_WAIT_PENDING = Color((34,))
REASON_WAIT_DEPENDENCY = Color((36,))
REASON_SUCCESS = Color((32,))
REASON_HOLD = Color((35,))

COLOR_REGION = Color((1,))
COLOR_RESOURCE_TYPE = Color()
COLOR_RESOURCE_ID = Color((1,))
COLOR_RESOURCE_PROPERTIES = Color((3,))

_STATE_COLORS = {
    0: REASON_SUCCESS,
    1: REASON_SUCCESS,
    8: REASON_SUCCESS,
    2: REASON_HOLD,
    3: REASON_REMOVE_TRIGGERED,
    4: REASON_WAIT_DEPENDENCY,
    5: REASON_WAIT_PENDING,
    6: REASON_ERROR,
    7: REASON_SKIP,
}


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def sorted_properties(props: dict[str, str]) -> str:
    """Format properties sorted by key, leaving out keys starting with '_'."""
    parts = [f"{k}: {_quote(str(props[k]))}" for k in sorted(props) if not k.startswith("_")]
    return f"[{', '.join(parts)}]"


@dataclass
class LogEntry:
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    level: str = "panic"
    time: datetime | None = None


_PLAIN_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._/@^+")


def _text_value(value: Any) -> str:
    text = str(value)
    if text and all(c in _PLAIN_CHARS for c in text):
        return text
    return _quote(text)


def text_format(entry: LogEntry) -> str:
    """Plain key=value formatting used when an entry is not about a resource."""
    stamp = (
        entry.time.isoformat().replace("+00:00", "Z") if entry.time else "0001-01-01T00:00:00Z"
    )
    parts = [f"time={_text_value(stamp)}", f"level={_text_value(entry.level)}"]
    if entry.message:
        parts.append(f"msg={_text_value(entry.message)}")
    parts.extend(f"{k}={_text_value(entry.data[k])}" for k in sorted(entry.data))
    return " ".join(parts) + "\n"


@dataclass
class CustomFormatter:
    """Formats resource entries as one coloured line; others go to the fallback."""

    fallback: Callable[[LogEntry], str] = text_format

    def format(self, entry: LogEntry | None) -> str | None:
        if entry is None:
            return None
        data = entry.data
        if data.get("_handler") == "println":
            del data["_handler"]
            return f"{entry.message}\n"

        if not isinstance(data.get("type"), str) or any(
            key not in data for key in ("owner", "state", "state_code", "name")
        ):
            return self.fallback(entry)

        fields = sorted(
            f"{k[5:]}: {_quote(str(v))}"
            for k, v in data.items()
            if k.startswith("prop:") and not k.startswith("prop:_")
        )
        reason = _STATE_COLORS.get(data["state_code"], REASON_SUCCESS)
        return (
            f"{COLOR_REGION.sprint(data['owner'])} - "
            f"{COLOR_RESOURCE_TYPE.sprint(data['type'])} - "
            f"{COLOR_RESOURCE_ID.sprint(data['name'])} - "
            f"{COLOR_RESOURCE_PROPERTIES.sprint('[' + ', '.join(fields) + ']')} - "
            f"{reason.sprint(entry.message)}\n"
        )