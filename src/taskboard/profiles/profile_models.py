# src/taskboard/profiles/profile_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_DISPLAY_NAME = "User"


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_db(cls, raw: str | None) -> Role:
        # Anything unrecognised is treated as the least privileged role.
        if not raw:
            return cls.USER
        try:
            return cls(raw)
        except ValueError:
            return cls.USER


@dataclass(frozen=True, slots=True)
class Profile:
    id: str
    email: str
    name: str | None = None
    role: Role = Role.USER
    avatar_url: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def display_name(profile: Profile | None) -> str:
    """Name, else the local part of the e-mail, else a generic label."""
    if profile is None:
        return DEFAULT_DISPLAY_NAME
    if profile.name and profile.name.strip():
        return profile.name.strip()
    local = (profile.email or "").split("@", 1)[0].strip()
    return local or DEFAULT_DISPLAY_NAME
