from __future__ import annotations

import pytest

from duneresilient.validation import (
    validate_backoff_params,
    validate_retry_policy_params,
    validate_timeout,
)

######################################
#     Tests for validate_timeout     #
######################################


@pytest.mark.parametrize("timeout", [0.1, 10, 30.0])
def test_validate_timeout_valid(timeout: float) -> None:
    validate_timeout(timeout)


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_validate_timeout_invalid(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        validate_timeout(timeout)


#############################################
#     Tests for validate_backoff_params     #
#############################################


def test_validate_backoff_params_valid() -> None:
    validate_backoff_params(initial_backoff=2.0, max_backoff=60.0, jitter=0.25)
    validate_backoff_params(initial_backoff=2.0, max_backoff=2.0, jitter=0.0)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"initial_backoff": 0.0, "max_backoff": 1.0, "jitter": 0.0}, "initial_backoff must be > 0"),
        ({"initial_backoff": 1.0, "max_backoff": -1.0, "jitter": 0.0}, "max_backoff must be > 0"),
        ({"initial_backoff": 2.0, "max_backoff": 1.0, "jitter": 0.0}, "max_backoff must be >="),
        ({"initial_backoff": 1.0, "max_backoff": 1.0, "jitter": -1.0}, "jitter must be >= 0"),
    ],
)
def test_validate_backoff_params_invalid(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_backoff_params(**kwargs)


##################################################
#     Tests for validate_retry_policy_params     #
##################################################


def test_validate_retry_policy_params_valid() -> None:
    validate_retry_policy_params(
        max_attempts=1,
        initial_backoff=1.0,
        max_backoff=1.0,
        jitter=0.0,
        retryable_status_codes=set(),
    )


@pytest.mark.parametrize("max_attempts", [0, -3])
def test_validate_retry_policy_params_invalid_max_attempts(max_attempts: int) -> None:
    with pytest.raises(ValueError, match=r"max_attempts must be >= 1"):
        validate_retry_policy_params(
            max_attempts=max_attempts,
            initial_backoff=1.0,
            max_backoff=1.0,
            jitter=0.0,
            retryable_status_codes={503},
        )


@pytest.mark.parametrize("code", [42, 600, "503"])
def test_validate_retry_policy_params_invalid_status_code(code: object) -> None:
    with pytest.raises(ValueError, match=r"retryable_status_codes must contain HTTP status codes"):
        validate_retry_policy_params(
            max_attempts=3,
            initial_backoff=1.0,
            max_backoff=1.0,
            jitter=0.0,
            retryable_status_codes={code},
        )
