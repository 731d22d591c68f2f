"""Filters that decide whether a resource is kept out of removal."""

from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Protocol

GLOBAL = "__global__"

_logger = logging.getLogger(__name__)


class FilterType(str, Enum):
    EMPTY = ""
    EXACT = "exact"
    GLOB = "glob"
    REGEX = "regex"
    CONTAINS = "contains"
    DATE_OLDER_THAN = "dateOlderThan"
    DATE_OLDER_THAN_NOW = "dateOlderThanNow"
    SUFFIX = "suffix"
    PREFIX = "prefix"
    NOT_IN = "NotIn"
    IN = "In"


class PropertySource(Protocol):
    """Anything that can look up a named property; raises when it cannot."""

    def get_property(self, name: str) -> str: ...


_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re.compile(rf"^([+-])?((?:{_DURATION_PART})+)$")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "1h30m", "-36h" or "0"."""
    text = value.strip() if isinstance(value, str) else ""
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    m = _DURATION_RE.match(text)
    if not m:
        raise ValueError(f"time: invalid duration {value!r}")
    seconds = sum(
        float(num) * _DURATION_UNITS[unit] for num, unit in re.findall(_DURATION_PART, m.group(2))
    )
    if m.group(1) == "-":
        seconds = -seconds
    return timedelta(seconds=seconds)


_DATE_RE = re.compile(r"^(\d{4})([-/])(\d{2})\2(\d{2})$")
_TIME = r"(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
_RFC3339_RE = re.compile(rf"^{_TIME}(Z|[+-]\d{{2}}:\d{{2}})$")
_ASG_RE = re.compile(rf"^{_TIME} ([+-]\d{{4}}) [A-Za-z]+$")


def _offset(text: str) -> timezone:
    if text == "Z":
        return timezone.utc
    digits = text[1:].replace(":", "")
    delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:4]))
    return timezone(-delta if text[0] == "-" else delta)


def _build(groups: tuple, tz: timezone) -> datetime:
    year, month, day, hour, minute, second, frac = groups
    micro = int((frac or "0")[:6].ljust(6, "0"))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )


def parse_date(value: str) -> datetime:
    """Parse a unix timestamp or one of the supported date formats."""
    if re.fullmatch(r"[+-]?\d+", value):
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    try:
        m = _DATE_RE.match(value)
        if m:
            return datetime(int(m.group(1)), int(m.group(3)), int(m.group(4)), tzinfo=timezone.utc)
        m = _RFC3339_RE.match(value)
        if m:
            return _build(m.groups()[:7], _offset(m.group(8)))
        m = _ASG_RE.match(value)
        if m:
            return _build(m.groups()[:7], _offset(m.group(8)))
    except ValueError:
        pass
    raise ValueError(f"unable to parse time {value}")


def glob_match(pattern: str, value: str) -> bool:
    """Shell-style match of the whole value against the pattern."""
    return fnmatch.fnmatchcase(value, pattern)


_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value {text!r}")


@dataclass
class Filter:
    """A single filter applied to one property of a resource."""

    property: str = ""
    type: str = FilterType.EXACT.value
    value: str = ""
    values: list[str] = field(default_factory=list)
    invert: bool = False
    group: str = "default"

    def validate(self) -> None:
        if not self.property and not self.value:
            raise ValueError("property and value cannot be empty")

    def match(self, value: str) -> bool:
        kind = self.type.value if isinstance(self.type, FilterType) else self.type
        try:
            ftype = FilterType(kind)
        except ValueError:
            raise ValueError(f"unknown type {kind}") from None

        if ftype in (FilterType.EMPTY, FilterType.EXACT):
            return self.value == value
        if ftype is FilterType.CONTAINS:
            return self.value in value
        if ftype is FilterType.GLOB:
            return glob_match(self.value, value)
        if ftype is FilterType.REGEX:
            try:
                pattern = re.compile(self.value)
            except re.error as exc:
                raise ValueError(f"error parsing regexp: {exc}: `{self.value}`") from exc
            return pattern.search(value) is not None
        if ftype in (FilterType.DATE_OLDER_THAN, FilterType.DATE_OLDER_THAN_NOW):
            if value == "":
                return False
            duration = parse_duration(self.value)
            field_time = parse_date(value)
            now = datetime.now(timezone.utc)
            if ftype is FilterType.DATE_OLDER_THAN:
                return field_time + duration > now
            return now + duration > field_time
        if ftype is FilterType.PREFIX:
            return value.startswith(self.value)
        if ftype is FilterType.SUFFIX:
            return value.endswith(self.value)
        if ftype is FilterType.IN:
            return value in self.values
        return value not in self.values

    @classmethod
    def from_yaml(cls, data: Any) -> Filter:
        """Build a filter from a parsed YAML node: a plain string or a mapping."""
        if isinstance(data, str):
            return new_exact_filter(data)
        if not isinstance(data, dict):
            raise ValueError(f"cannot unmarshal {type(data).__name__} into a filter")

        invert = data.get("invert")
        if invert is None:
            invert = False
        elif isinstance(invert, str):
            invert = _parse_bool(invert)
        elif not isinstance(invert, bool):
            invert = False

        raw_values = data.get("values")
        values = [v if isinstance(v, str) else "" for v in raw_values or []]

        return cls(
            group=str(data["group"]) if data.get("group") is not None else "default",
            type=str(data["type"]) if data.get("type") is not None else FilterType.EXACT.value,
            value=str(data["value"]) if data.get("value") is not None else "",
            values=values,
            property=str(data["property"]) if data.get("property") is not None else "",
            invert=invert,
        )


def new_exact_filter(value: str) -> Filter:
    """A filter matching exactly the given value."""
    return Filter(type=FilterType.EXACT.value, value=value, group="default")


@dataclass
class FilterWithScope:
    filter: Filter
    is_global: bool


class Filters(dict):
    """Filters keyed by resource type; the key GLOBAL applies to every type."""

    def for_type(self, resource_type: str) -> list[Filter] | None:
        filters = [*self.get(GLOBAL, []), *self.get(resource_type, [])]
        return filters or None

    def get_by_group(self, resource_type: str) -> dict[str, list[FilterWithScope]] | None:
        groups: dict[str, list[FilterWithScope]] = {}
        for key, is_global in ((GLOBAL, True), (resource_type, False)):
            for f in self.get(key, []):
                groups.setdefault(f.group, []).append(FilterWithScope(f, is_global))
        return groups or None

    def validate(self) -> None:
        for resource_type, filters in self.items():
            for f in filters:
                try:
                    f.validate()
                except ValueError:
                    raise ValueError(f"{resource_type}: has an invalid filter: {f!r}") from None

    def append(self, other: dict[str, list[Filter]]) -> None:
        for resource_type, filters in other.items():
            self.setdefault(resource_type, []).extend(filters)

    def merge(self, other: dict[str, list[Filter]]) -> None:
        """Alias of append."""
        self.append(other)

    def match(
        self, resource_type: str, item: PropertySource, log: logging.Logger | None = None
    ) -> bool:
        """True when every filter group has at least one matching filter."""
        log = log or _logger
        groups = self.get_by_group(resource_type)
        if groups is None:
            return False

        for name, scoped in groups.items():
            matched = False
            for entry in scoped:
                try:
                    prop = item.get_property(entry.filter.property)
                except Exception as exc:  # noqa: BLE001 - missing properties are only warned about
                    log.warning("error getting property: %s", exc)
                    continue
                result = entry.filter.match(prop)
                log.debug(
                    "matching filter for group '%s': match=%s, invert=%s",
                    name,
                    result,
                    entry.filter.invert,
                )
                if entry.filter.invert:
                    result = not result
                matched = matched or result
            if not matched:
                return False
        return True

    @classmethod
    def from_yaml(cls, data: Any) -> Filters:
        """Build filters from a mapping of resource type to raw filter nodes."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("filters must be a mapping of resource type to filters")
        return cls({key: [Filter.from_yaml(f) for f in value or []] for key, value in data.items()})