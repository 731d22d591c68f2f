# libnuke

Building blocks for tools that scan an account for resources and decide which
ones to remove:

- `libnuke.filter`: filters that match resource properties, alone or in groups.
- `libnuke.config`: a YAML configuration of blocklist, regions, accounts,
  presets, resource types and settings.
- `libnuke.log`: stable, optionally coloured one-line reports of resources.
- `libnuke.docs`: a property/description map built from a dataclass.
- `libnuke.errors`: the exceptions used to signal a skip, a hold, a wait or a
  configuration problem.

## What it does not do

The package does not talk to any cloud API, and it has no scanner, removal
queue or run loop, and no command-line program. A tool built on it lists its
resources, applies these filters and configuration to them, and removes them
itself.

## Installation

```
pip install libnuke
```

Tests:

```
pip install "libnuke[test]"
pytest
```

## Configuration

```yaml
blocklist:
  - "000000000000"

regions:
  - us-east-1

accounts:
  "111111111111":
    presets:
      - common
    filters:
      IamRole:
        - "admin"
        - type: glob
          value: "ci-*"
        - property: CreateDate
          type: dateOlderThanNow
          value: "-24h"
          invert: true

presets:
  common:
    filters:
      __global__:
        - property: tag:keep
          value: "true"
```

```python
from libnuke.config import load_config

config = load_config("nuke.yaml", deprecations={"IamRole": "IAMRole"})
config.validate_account("111111111111")
filters = config.filters("111111111111")
```

`load_config(path, *, log=None, deprecations=None, resolve_blocklist=True,
resolve_deprecations=True)` reads the file with `yaml.safe_load` and returns a
`Config`. Resolving the blocklist folds the deprecated `account-blocklist` and
`account-blacklist` keys into `blocklist` (with a warning). Resolving
deprecations renames deprecated resource types in account filters to their
replacements, and raises `DeprecatedResourceTypeError` when an account uses
both a deprecated type and its replacement.

`Config` methods:

- `validate_account(account_id)` raises `NoBlocklistDefinedError`,
  `BlocklistAccountError` or `AccountNotConfiguredError`.
- `filters(account_id)` returns a new `Filters` holding the account's filters
  followed by those of its presets; it raises `AccountNotConfiguredError` for an
  unknown or empty account and `UnknownPresetError` for an undefined preset.
- `has_blocklist()`, `in_blocklist(search_id)`, `resolve_blocklist()`,
  `resolve_deprecations()`, `load(path)` and `Config.from_dict(data)`.

`ResourceTypes` holds `includes`, `excludes`, `alternatives` and the
deprecated `targets` and `cloud_control` (`cloud-control` in YAML).
`get_includes()` and `get_alternatives()` return the deprecated list merged
with its replacement, without duplicates, or `None` when both are empty.

Warnings go to the standard `logging` module (logger `libnuke.config`, or the
logger passed as `log`).

## Filters

```python
from libnuke.filter import Filter, FilterType, Filters, new_exact_filter

Filter(type=FilterType.GLOB, value="b*sh").match("bash")      # True
new_exact_filter("foo").match("foo")                          # True

filters = Filters.from_yaml({"Bucket": ["logs", {"type": "prefix", "value": "tmp-"}]})
filters.validate()
filters.for_type("Bucket")  # filters under "__global__" first, then the type's own
```

A filter node in YAML is either a plain string (an exact match in group
`default`) or a mapping with `type`, `property`, `value`, `values`, `group`
and `invert` (a boolean or a string such as `"true"`).

Types: `exact` (also the empty type), `contains`, `glob`, `regex` (searched
anywhere in the value), `prefix`, `suffix`, `In` and `NotIn` (against
`values`), `dateOlderThan` and `dateOlderThanNow`. Unknown types and invalid
patterns raise `ValueError` when matched.

The date filters take a duration such as `0`, `-36h` or `1h30m`
(`parse_duration`) and a date given as a unix timestamp, `YYYY-MM-DD`,
`YYYY/MM/DD`, RFC 3339 with or without fractions, or
`YYYY-MM-DD HH:MM:SS -0700 MST` (`parse_date`). An empty value never matches.
`dateOlderThan` matches when date + duration is after now; `dateOlderThanNow`
matches when now + duration is after the date.

`Filters.match(resource_type, item, log=None)` groups the global and
type-specific filters by `group`; it returns `True` only when every group has
at least one matching filter (after `invert`). `item` is anything with a
`get_property(name)` method; a property that cannot be read is logged and
skipped. `Filters.get_by_group`, `append` and its alias `merge` are available
as well.

## Reporting

```python
from libnuke.log import CustomFormatter, LogEntry, sorted_properties

sorted_properties({"b": "2", "a": "1", "_hidden": "x"})   # '[a: "1", b: "2"]'

CustomFormatter().format(LogEntry(
    message="would remove",
    data={"type": "Bucket", "owner": "us-east-1", "name": "logs",
          "state": "new", "state_code": 0, "prop:Name": "logs"},
))
# 'us-east-1 - Bucket - logs - [Name: "logs"] - would remove\n'
```

`CustomFormatter.format` returns a line for entries carrying `type`, `owner`,
`name`, `state` and `state_code`, colouring the message by state code; an
entry whose `_handler` is `println` gives just its message; anything else
goes to `text_format`, a plain `key=value` layout. Colours are used only when
standard output is a terminal and `NO_COLOR` is unset (`Color.enabled`).

## Property docs

```python
from dataclasses import dataclass, field
from libnuke.docs import generate_properties_map

@dataclass
class Bucket:
    Name: str = field(default="", metadata={"description": "The bucket name"})
    VpcID: str = field(default="", metadata={"description": "The VPC", "property": "prefix=vpc"})
    Tags: dict = field(default_factory=dict)

generate_properties_map(Bucket)
# {"Name": "The bucket name", "vpc:VpcID": "The VPC", "tag:<key>:": "This resource has tags ..."}
```

The `property` metadata takes `-` (leave the field out), `name=X` and
`prefix=P`. Fields starting with `_` are skipped; anything that is not a
dataclass raises `TypeError`, and `None` gives an empty map.

## Errors

All exceptions derive from `libnuke.errors.NukeError`:
`SkipRequestError`, `UnknownEndpointError`, `WaitResourceError`,
`HoldResourceError`, `UnknownPresetError`, `DeprecatedResourceTypeError`,
`NoBlocklistDefinedError`, `BlocklistAccountError` and
`AccountNotConfiguredError`.