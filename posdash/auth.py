"""Staff login against the persisted staff list."""

from __future__ import annotations

import hmac
from typing import Iterable

from posdash.errors import InvalidCredentialsError
from posdash.models import StaffUser


def authenticate(staff: Iterable[StaffUser], username: str, password: str) -> StaffUser:
    """Return the matching staff account or raise ``InvalidCredentialsError``."""
    for user in staff:
        if user.username == username and hmac.compare_digest(user.password.encode(), password.encode()):
            return user
    raise InvalidCredentialsError("Invalid credentials")
