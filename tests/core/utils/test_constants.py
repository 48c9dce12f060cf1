"""Consistency checks for the store timeout settings."""

from core.utils.constants import (
    GATEWAY_TIMEOUT,
    STORE_CALL_TIMEOUT,
    STORE_CONNECT_TIMEOUT,
    STORE_MAX_ATTEMPTS,
    STORE_READ_TIMEOUT,
)


def test_client_retry_budget_fits_in_call_timeout() -> None:
    worst_case = (STORE_CONNECT_TIMEOUT + STORE_READ_TIMEOUT) * STORE_MAX_ATTEMPTS

    assert worst_case <= STORE_CALL_TIMEOUT


def test_call_timeout_is_below_gateway_limit() -> None:
    assert STORE_CALL_TIMEOUT < GATEWAY_TIMEOUT
