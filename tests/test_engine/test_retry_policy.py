from __future__ import annotations

import warnings

import httpx
import pytest

from market_scanner.exchange.adapters.retry_policy import delivery_retry


def test_builds_without_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        delivery_retry(3)


def test_retries_transport_errors_then_succeeds():
    calls = []

    @delivery_retry(3)
    def post():
        calls.append(1)
        if len(calls) < 2:
            raise httpx.ConnectError("refused")
        return "ok"

    assert post() == "ok"
    assert len(calls) == 2


def test_does_not_retry_other_errors():
    calls = []

    @delivery_retry(3)
    def post():
        calls.append(1)
        raise ValueError("bad payload")

    with pytest.raises(ValueError):
        post()
    assert len(calls) == 1
