import pytest

from libnuke.errors import (
    AccountNotConfiguredError,
    BlocklistAccountError,
    DeprecatedResourceTypeError,
    HoldResourceError,
    NoBlocklistDefinedError,
    NukeError,
    SkipRequestError,
    UnknownEndpointError,
    UnknownPresetError,
    WaitResourceError,
)

TEST_STRING = "this is just a test"


def test_skip_request_carries_message():
    err = SkipRequestError("resource is regional")
    assert err.message == "resource is regional"
    assert str(err) == "resource is regional"


@pytest.mark.parametrize(
    "cls",
    [
        SkipRequestError,
        UnknownEndpointError,
        WaitResourceError,
        HoldResourceError,
        UnknownPresetError,
        DeprecatedResourceTypeError,
    ],
)
def test_message_errors(cls):
    err = cls(TEST_STRING)
    assert str(err) == TEST_STRING
    assert err.message == TEST_STRING
    assert isinstance(err, NukeError)


@pytest.mark.parametrize(
    "cls, message",
    [
        (NoBlocklistDefinedError, "no blocklist defined"),
        (BlocklistAccountError, "account is in blocklist"),
        (AccountNotConfiguredError, "account is not configured"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message