"""Tests for the error/retry state machine."""

import pytest

from wagerboard.exceptions import FetchErrorKind, FetchFailure
from wagerboard.models import FetchState, RetryState
from wagerboard.services.retry_policy import ERROR_MESSAGES, RetryPolicy, describe_failure


@pytest.fixture
def policy():
    return RetryPolicy(FetchState(refresh_interval_ms=30000))


def _server_error() -> FetchFailure:
    return FetchFailure.from_status(500, "Internal Server Error")


def test_first_failure_degrades_without_stopping(policy):
    decision = policy.record_failure(_server_error())

    assert decision.state == RetryState.DEGRADED
    assert not decision.cancel_timer
    assert not decision.terminal
    assert decision.interval_ms == 30000
    assert policy.state.consecutive_error_count == 1
    assert policy.current_state == RetryState.DEGRADED


def test_second_failure_suspends(policy):
    policy.record_failure(_server_error())
    decision = policy.record_failure(_server_error())

    assert decision.state == RetryState.SUSPENDED
    assert decision.cancel_timer
    assert decision.terminal
    assert policy.current_state == RetryState.SUSPENDED


def test_success_resets_count(policy):
    policy.record_failure(_server_error())

    decision = policy.record_success()

    assert decision.state == RetryState.HEALTHY
    assert not decision.resume_timer
    assert policy.state.consecutive_error_count == 0
    assert policy.current_state == RetryState.HEALTHY


def test_success_after_suspension_resumes_timer(policy):
    policy.record_failure(_server_error())
    policy.record_failure(_server_error())

    decision = policy.record_success()

    assert decision.resume_timer
    assert policy.current_state == RetryState.HEALTHY


def test_rate_limit_widens_interval_without_changing_state(policy):
    decision = policy.record_failure(FetchFailure.from_status(429, "Too Many Requests"))

    assert decision.state == RetryState.DEGRADED
    assert decision.interval_ms == 60000
    assert policy.state.refresh_interval_ms == 60000
    assert decision.message == ERROR_MESSAGES[FetchErrorKind.RATE_LIMIT]


def test_rate_limit_at_threshold_still_suspends(policy):
    policy.record_failure(_server_error())
    decision = policy.record_failure(FetchFailure.from_status(429, "Too Many Requests"))

    assert decision.cancel_timer
    assert policy.state.refresh_interval_ms == 60000


@pytest.mark.parametrize(
    "status, kind",
    [(429, FetchErrorKind.RATE_LIMIT), (500, FetchErrorKind.SERVER), (503, FetchErrorKind.SERVER), (404, FetchErrorKind.UNKNOWN)],
)
def test_status_classification(status, kind):
    assert FetchFailure.from_status(status, "x").kind == kind


def test_messages_by_kind():
    assert describe_failure(FetchFailure("boom", kind=FetchErrorKind.NETWORK)).startswith("Unable to connect")
    assert describe_failure(FetchFailure("boom", kind=FetchErrorKind.CONNECTION)).startswith("Connection issue")
    assert describe_failure(_server_error()).startswith("The server is currently experiencing issues")
    assert describe_failure(FetchFailure.from_status(404, "Not Found")) == "Failed to fetch data: 404 Not Found"


def test_known_reason_is_translated():
    failure = FetchFailure.from_status(400, "Permintaan tidak valid")

    assert describe_failure(failure) == "Failed to fetch data: 400 Invalid request"
