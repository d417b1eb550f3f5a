# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskboard.cli.bootstrap import create_initial_state, sign_in_default_user
from taskboard.core.errors import TaskboardError, ValidationError
from taskboard.profiles.profile_models import Role


def test_default_user_is_created_and_signed_in(settings: SimpleNamespace) -> None:
    settings.user_email = "owner@example.com"
    settings.user_name = "Owner"
    settings.user_role = "admin"

    state = create_initial_state(settings=settings)
    sign_in_default_user(state)

    assert state.session is not None
    assert state.session.email == "owner@example.com"
    assert state.session.role == Role.ADMIN
    assert state.profiles.count_profiles() == 1


def test_no_default_user_starts_signed_out(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    sign_in_default_user(state)
    assert state.session is None


def test_malformed_default_email_is_a_startup_error(settings: SimpleNamespace) -> None:
    settings.user_email = "not-an-email"
    state = create_initial_state(settings=settings)

    with pytest.raises(ValidationError) as ei:
        sign_in_default_user(state)

    # main() reports TaskboardError as "Startup failed" instead of a traceback
    assert isinstance(ei.value, TaskboardError)
    assert ei.value.fields == ["user_email"]
    assert state.session is None
