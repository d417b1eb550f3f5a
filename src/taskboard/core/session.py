# src/taskboard/core/session.py

"""
Caller identity.

A Session is passed explicitly into every repository call; nothing in the
core reads a "current user" from shared state. SessionManager is the local
sign-in front end used by the console (no passwords: e-mail lookup against the
profiles table).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..profiles.profile_models import Profile, Role
from .errors import Unauthenticated
from .ports import ProfileRepo

logger = logging.getLogger(__name__)


class SessionEvent(StrEnum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


@dataclass(frozen=True, slots=True)
class Session:
    user_id: str
    role: Role = Role.USER
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def for_profile(cls, profile: Profile) -> Session:
        return cls(user_id=profile.id, role=profile.role, email=profile.email)


def require_session(session: Session | None) -> Session:
    if session is None or not session.user_id:
        raise Unauthenticated()
    return session


SessionListener = Callable[[SessionEvent, Session | None], None]


class SessionManager:
    def __init__(self, profiles: ProfileRepo) -> None:
        self._profiles = profiles
        self._current: Session | None = None
        self._listeners: list[SessionListener] = []

    def current(self) -> Session | None:
        return self._current

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self._current)
            except Exception:
                logger.exception("Session listener failed event=%s", event)

    def sign_in(self, email: str) -> Session:
        profile = self._profiles.find_by_email(email)
        if profile is None:
            raise Unauthenticated(f"no account for {email!r}")
        self._current = Session.for_profile(profile)
        logger.info("Signed in user_id=%s role=%s", profile.id, profile.role)
        self._notify(SessionEvent.SIGNED_IN)
        return self._current

    def sign_up(self, email: str, name: str | None = None, role: Role = Role.USER) -> Session:
        if self._profiles.find_by_email(email) is not None:
            raise ValueError(f"an account already exists for {email!r}")
        profile = self._profiles.upsert_profile(email=email, name=name, role=role)
        self._current = Session.for_profile(profile)
        logger.info("Signed up user_id=%s role=%s", profile.id, profile.role)
        self._notify(SessionEvent.SIGNED_IN)
        return self._current

    def sign_out(self) -> None:
        if self._current is None:
            return
        logger.info("Signed out user_id=%s", self._current.user_id)
        self._current = None
        self._notify(SessionEvent.SIGNED_OUT)
