"""Errors raised while scanning, filtering and removing resources."""


class NukeError(Exception):
    """Base class for all library errors."""

    default_message = ""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)

    @property
    def message(self) -> str:
        return str(self)


class SkipRequestError(NukeError):
    """A request for a resource should be skipped."""


class UnknownEndpointError(NukeError):
    """The endpoint for a resource is not known."""


class WaitResourceError(NukeError):
    """A resource is still being removed and must be waited on."""


class HoldResourceError(NukeError):
    """A resource cannot be removed yet and is put on hold."""


class UnknownPresetError(NukeError):
    """An account refers to a preset that is not defined."""


class DeprecatedResourceTypeError(NukeError):
    """A deprecated resource type clashes with its replacement."""


class NoBlocklistDefinedError(NukeError):
    """The configuration defines no blocklist."""

    default_message = "no blocklist defined"


class BlocklistAccountError(NukeError):
    """The account is in the blocklist."""

    default_message = "account is in blocklist"


class AccountNotConfiguredError(NukeError):
    """The account has no configuration."""

    default_message = "account is not configured"