"""Tests for the server entry point's bind-address guard."""

from __future__ import annotations

import pytest

from flowstate.core.config.settings import Settings
from flowstate.core.server.main import _check_bind


@pytest.mark.parametrize("host", ["127.0.0.1", "localhost", "::1"])
def test_loopback_hosts_are_allowed(host):
    _check_bind(Settings(flowstate_host=host))


def test_public_host_is_refused():
    with pytest.raises(RuntimeError, match="FLOWSTATE_ALLOW_INSECURE_BIND"):
        _check_bind(Settings(flowstate_host="0.0.0.0"))


def test_public_host_allowed_when_opted_in():
    _check_bind(Settings(flowstate_host="0.0.0.0", flowstate_allow_insecure_bind=True))
