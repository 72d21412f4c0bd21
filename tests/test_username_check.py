import asyncio

import pytest

from username_check import (
    UsernameAvailabilityChecker,
    UsernameStatus,
    check_username_availability,
    normalize_username,
    validate_username,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("jane", True),
        ("jane-doe", True),
        ("j4ne", True),
        ("ja", False),
        ("a" * 31, False),
        ("-jane", False),
        ("jane-", False),
        ("jane--doe", False),
        ("jane_doe", False),
    ],
)
def test_validate_username(value, expected):
    assert validate_username(value) is expected


def test_normalize_username_strips_and_lowercases():
    assert normalize_username("Jane Doe_99!") == "janedoe99"


def test_own_username_is_available():
    owners = {"jane": "user-1"}

    assert check_username_availability("jane", owners.get, current_user_id="user-1") is UsernameStatus.AVAILABLE
    assert check_username_availability("jane", owners.get, current_user_id="user-2") is UsernameStatus.TAKEN
    assert check_username_availability("john", owners.get) is UsernameStatus.AVAILABLE


def test_lookup_is_case_insensitive():
    seen = []

    def lookup(value):
        seen.append(value)
        return None

    check_username_availability("JaneDoe", lookup)
    assert seen == ["janedoe"]


def test_empty_and_invalid_input():
    assert check_username_availability("", lambda _: None) is UsernameStatus.IDLE
    assert check_username_availability("a--b", lambda _: None) is UsernameStatus.INVALID


def test_lookup_failure_returns_to_idle():
    def lookup(_):
        raise ConnectionError("offline")

    assert check_username_availability("jane", lookup) is UsernameStatus.IDLE


def test_debounced_checker_only_checks_last_input():
    calls = []

    async def lookup(value):
        calls.append(value)
        return "someone-else" if value == "taken" else None

    async def scenario():
        checker = UsernameAvailabilityChecker(lookup, delay=0.01)
        first = checker.submit("tak")
        second = checker.submit("taken")
        await asyncio.sleep(0)
        assert first.cancelled()
        assert await second is UsernameStatus.TAKEN
        return checker.status

    assert asyncio.run(scenario()) is UsernameStatus.TAKEN
    assert calls == ["taken"]


def test_checker_states():
    async def failing(_):
        raise ConnectionError("offline")

    async def scenario():
        checker = UsernameAvailabilityChecker(failing, delay=0)
        assert checker.submit("   ") is None
        assert checker.status is UsernameStatus.IDLE
        assert await checker.check("x") is UsernameStatus.INVALID
        assert await checker.check("jane") is UsernameStatus.IDLE

    asyncio.run(scenario())
