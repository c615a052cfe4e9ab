"""Tests for AuthorizationStatus mapping and AuthorizationState."""

import pytest

from locationbroker.authorization import AuthorizationState, AuthorizationStatus

ALLOWED = {AuthorizationStatus.AUTHORIZED_LIMITED, AuthorizationStatus.AUTHORIZED_FULL}


@pytest.mark.parametrize(
    "raw, expected",
    [
        (0, AuthorizationStatus.NOT_DETERMINED),
        (1, AuthorizationStatus.RESTRICTED),
        (2, AuthorizationStatus.DENIED),
        (3, AuthorizationStatus.AUTHORIZED_FULL),
        (4, AuthorizationStatus.AUTHORIZED_LIMITED),
        (42, AuthorizationStatus.UNKNOWN),
        ("denied", AuthorizationStatus.DENIED),
        ("authorizedWhenInUse", AuthorizationStatus.AUTHORIZED_LIMITED),
        ("authorized_full", AuthorizationStatus.AUTHORIZED_FULL),
        ("granted", AuthorizationStatus.UNKNOWN),
        (None, AuthorizationStatus.UNKNOWN),
        (True, AuthorizationStatus.UNKNOWN),
        (AuthorizationStatus.RESTRICTED, AuthorizationStatus.RESTRICTED),
    ],
)
def test_from_platform(raw, expected):
    assert AuthorizationStatus.from_platform(raw) is expected


def test_display_names():
    assert AuthorizationStatus.NOT_DETERMINED.display_name == "notDetermined"
    assert AuthorizationStatus.AUTHORIZED_FULL.display_name == "authorizedAlways"


def test_initial_state():
    state = AuthorizationState(ALLOWED)
    assert state.status is AuthorizationStatus.NOT_DETERMINED
    assert state.is_known is False
    assert state.is_sufficient() is False
    assert state.is_denied() is False


def test_allowed_set_rejects_never_sufficient_statuses():
    with pytest.raises(ValueError, match="denied"):
        AuthorizationState({AuthorizationStatus.AUTHORIZED_FULL, AuthorizationStatus.DENIED})


def test_is_sufficient_tracks_latest_update():
    state = AuthorizationState(ALLOWED)
    sequence = [
        AuthorizationStatus.AUTHORIZED_FULL,
        AuthorizationStatus.DENIED,
        AuthorizationStatus.AUTHORIZED_LIMITED,
        AuthorizationStatus.UNKNOWN,
        AuthorizationStatus.RESTRICTED,
        AuthorizationStatus.AUTHORIZED_FULL,
    ]
    for status in sequence:
        state.update(status)
        assert state.is_sufficient() is (status in ALLOWED)
        assert state.is_denied() is (status is AuthorizationStatus.DENIED)
        assert state.is_known is True


def test_update_publishes_change():
    state = AuthorizationState(ALLOWED)
    seen = []
    state.subscribe(seen.append)
    state.update(AuthorizationStatus.DENIED)
    assert seen == [None, AuthorizationStatus.DENIED]
