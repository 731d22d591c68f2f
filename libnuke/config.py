"""Configuration of accounts, presets, resource types and blocklists."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from libnuke.errors import (
    AccountNotConfiguredError,
    BlocklistAccountError,
    DeprecatedResourceTypeError,
    NoBlocklistDefinedError,
    UnknownPresetError,
)
from libnuke.filter import Filters

_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())


def _mapping(value: Any, key: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def _scalar(value: Any, key: str) -> str:
    if isinstance(value, (dict, list)):
        raise ValueError(f"'{key}' must hold only plain values")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _str_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return [_scalar(item, key) for item in value]


def _collection(value: Any, key: str) -> list[str] | None:
    return None if value is None else _str_list(value, key)


def _union(first: list[str] | None, second: list[str] | None) -> list[str] | None:
    combined = list(first or [])
    combined.extend(item for item in second or [] if item not in combined)
    return combined or None


@dataclass
class ResourceTypes:
    """Resource types to include, exclude or replace by an alternative."""

    includes: list[str] | None = None
    excludes: list[str] | None = None
    alternatives: list[str] | None = None
    targets: list[str] | None = None
    cloud_control: list[str] | None = None

    def get_includes(self) -> list[str] | None:
        """Includes combined with the deprecated targets."""
        combined = None
        if self.targets is not None:
            _logger.warning("'targets' is deprecated. Please use 'includes' instead.")
            combined = _union(combined, self.targets)
        return _union(combined, self.includes)

    def get_alternatives(self) -> list[str] | None:
        """Alternatives combined with the deprecated cloud-control list."""
        combined = None
        if self.cloud_control is not None:
            _logger.warning("'cloud-control' is deprecated. Please use 'alternatives' instead.")
            combined = _union(combined, self.cloud_control)
        return _union(combined, self.alternatives)

    @classmethod
    def from_dict(cls, data: Any) -> ResourceTypes:
        data = _mapping(data, "resource-types")
        return cls(
            includes=_collection(data.get("includes"), "includes"),
            excludes=_collection(data.get("excludes"), "excludes"),
            alternatives=_collection(data.get("alternatives"), "alternatives"),
            targets=_collection(data.get("targets"), "targets"),
            cloud_control=_collection(data.get("cloud-control"), "cloud-control"),
        )


@dataclass
class Account:
    """Filters, resource types and presets for one account."""

    filters: Filters | None = None
    resource_types: ResourceTypes = field(default_factory=ResourceTypes)
    presets: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Account:
        data = _mapping(data, "account")
        raw_filters = data.get("filters")
        return cls(
            filters=None if raw_filters is None else Filters.from_yaml(raw_filters),
            resource_types=ResourceTypes.from_dict(data.get("resource-types")),
            presets=_str_list(data.get("presets"), "presets"),
        )


@dataclass
class Preset:
    """A named set of filters that accounts can refer to."""

    filters: Filters = field(default_factory=Filters)

    @classmethod
    def from_dict(cls, data: Any) -> Preset:
        data = _mapping(data, "preset")
        return cls(filters=Filters.from_yaml(data.get("filters")))


@dataclass
class Config:
    """Accounts, regions, resource types, presets and settings for a run."""

    blocklist: list[str] = field(default_factory=list)
    regions: list[str] = field(default_factory=list)
    accounts: dict[str, Account | None] = field(default_factory=dict)
    resource_types: ResourceTypes = field(default_factory=ResourceTypes)
    presets: dict[str, Preset] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    deprecations: dict[str, str] = field(default_factory=dict)
    log: logging.Logger = field(default=_logger, repr=False, compare=False)
    account_blacklist: list[str] = field(default_factory=list)
    account_blocklist: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a configuration from a parsed YAML document."""
        config = cls()
        config._apply(data)
        return config

    def _apply(self, data: Any) -> None:
        if data is None:
            return
        if not isinstance(data, dict):
            raise ValueError("configuration must be a mapping")
        if "blocklist" in data:
            self.blocklist = _str_list(data["blocklist"], "blocklist")
        if "regions" in data:
            self.regions = _str_list(data["regions"], "regions")
        if "accounts" in data:
            self.accounts = {
                _scalar(key, "accounts"): None if value is None else Account.from_dict(value)
                for key, value in _mapping(data["accounts"], "accounts").items()
            }
        if "resource-types" in data:
            self.resource_types = ResourceTypes.from_dict(data["resource-types"])
        if "presets" in data:
            self.presets = {
                _scalar(key, "presets"): Preset.from_dict(value)
                for key, value in _mapping(data["presets"], "presets").items()
            }
        if "settings" in data:
            self.settings = dict(_mapping(data["settings"], "settings"))
        if "account-blacklist" in data:
            self.account_blacklist = _str_list(data["account-blacklist"], "account-blacklist")
        if "account-blocklist" in data:
            self.account_blocklist = _str_list(data["account-blocklist"], "account-blocklist")

    def load(self, path: str | Path) -> None:
        """Read a YAML file and apply its contents to this configuration."""
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        self._apply(data)

    def resolve_blocklist(self) -> list[str]:
        """The blocklist with the deprecated keys folded in."""
        blocklist: list[str] = []
        if self.account_blocklist:
            blocklist.extend(self.account_blocklist)
            self.account_blocklist = []
            self.log.warning(
                "deprecated configuration key 'account-blocklist' - please use 'blocklist' instead"
            )
        if self.account_blacklist:
            blocklist.extend(self.account_blacklist)
            self.account_blacklist = []
            self.log.warning(
                "deprecated configuration key 'account-blacklist' - please use 'blocklist' instead"
            )
        blocklist.extend(self.blocklist)
        return blocklist

    def has_blocklist(self) -> bool:
        return bool(self.resolve_blocklist())

    def in_blocklist(self, search_id: str) -> bool:
        return search_id in self.resolve_blocklist()

    def validate_account(self, account_id: str) -> None:
        """Raise unless the account may be acted upon."""
        if not self.has_blocklist():
            raise NoBlocklistDefinedError()
        if self.in_blocklist(account_id):
            raise BlocklistAccountError()
        if account_id not in self.accounts:
            raise AccountNotConfiguredError()

    def filters(self, account_id: str) -> Filters:
        """The account's filters together with those of its presets."""
        account = self.accounts.get(account_id)
        if account is None:
            raise AccountNotConfiguredError()
        result = Filters()
        if account.filters:
            result.append(account.filters)
        for name in account.presets:
            preset = self.presets.get(name)
            if preset is None:
                raise UnknownPresetError(name)
            result.append(preset.filters)
        return result

    def resolve_deprecations(self) -> None:
        """Rename deprecated resource types in account filters to their replacements."""
        for account in self.accounts.values():
            if account is None or account.filters is None:
                return
            for resource_type, filters in list(account.filters.items()):
                replacement = self.deprecations.get(resource_type)
                if replacement is None:
                    continue
                self.log.warning(
                    "deprecated resource type '%s' - converting to '%s'",
                    resource_type,
                    replacement,
                )
                if replacement in account.filters:
                    raise DeprecatedResourceTypeError(
                        "using deprecated resource type and replacement: "
                        f"'{resource_type}','{replacement}'"
                    )
                account.filters[replacement] = filters
                del account.filters[resource_type]


def load_config(
    path: str | Path,
    *,
    log: logging.Logger | None = None,
    deprecations: dict[str, str] | None = None,
    resolve_blocklist: bool = True,
    resolve_deprecations: bool = True,
) -> Config:
    """Load a configuration file and resolve blocklist and deprecations."""
    config = Config(log=log or _logger)
    if deprecations:
        config.deprecations = dict(deprecations)
    config.load(path)
    if resolve_blocklist:
        config.blocklist = config.resolve_blocklist()
    if resolve_deprecations:
        config.resolve_deprecations()
    return config