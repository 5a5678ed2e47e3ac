"""Login flow: session-scoped attempt throttling and credential checks."""

from __future__ import annotations

import math
import time
from typing import Callable, MutableMapping

from flask import current_app

from hackhub.errors import AuthError, LockedOutError, ValidationError
from hackhub.models import Profile
from hackhub.services.validation import is_valid_email, is_valid_password, sanitize_input

MAX_LOGIN_ATTEMPTS = 5
LOCKOUT_SECONDS = 15 * 60


class LoginThrottle:
    """Failed-attempt counter and lockout held in a per-client session mapping.

    The state resets on a successful login, on logout (the session is cleared)
    and once a lockout has elapsed.
    """

    SESSION_KEY = 'login_throttle'

    def __init__(
        self,
        store: MutableMapping,
        max_attempts: int = MAX_LOGIN_ATTEMPTS,
        lockout_seconds: int = LOCKOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock

    def _state(self) -> dict:
        return dict(self._store.get(self.SESSION_KEY) or {})

    def _save(self, state: dict) -> None:
        # Reassign so Flask notices the session changed.
        self._store[self.SESSION_KEY] = state

    @property
    def attempts(self) -> int:
        return int(self._state().get('attempts', 0))

    @property
    def locked_until(self) -> float | None:
        return self._state().get('locked_until')

    def remaining_minutes(self) -> int | None:
        """Minutes (rounded up) until the lockout ends, or None when not locked."""
        locked_until = self.locked_until
        if locked_until is None:
            return None
        remaining = locked_until - self._clock()
        if remaining <= 0:
            self.reset()
            return None
        return math.ceil(remaining / 60)

    def check(self) -> None:
        minutes = self.remaining_minutes()
        if minutes is not None:
            raise LockedOutError(minutes)

    def record_failure(self) -> bool:
        """Count a failed sign-in; return True if this failure triggered the lockout."""
        state = self._state()
        if state.get('locked_until') is not None:
            return False
        attempts = int(state.get('attempts', 0)) + 1
        state['attempts'] = attempts
        locked = attempts >= self.max_attempts
        if locked:
            state['locked_until'] = self._clock() + self.lockout_seconds
        self._save(state)
        return locked

    def reset(self) -> None:
        self._store.pop(self.SESSION_KEY, None)


def throttle_for(store: MutableMapping) -> LoginThrottle:
    """Build a throttle using the app's configured limits."""
    config = current_app.config
    return LoginThrottle(
        store,
        max_attempts=config.get('MAX_LOGIN_ATTEMPTS', MAX_LOGIN_ATTEMPTS),
        lockout_seconds=config.get('LOCKOUT_MINUTES', LOCKOUT_SECONDS // 60) * 60,
    )


def authenticate(data, throttle: LoginThrottle, raw_email: str | None, raw_password: str | None) -> Profile:
    """Validate the submitted credentials and sign in.

    Checks run in order and the first failure wins: lockout, email shape,
    password length. Only then is ``data.sign_in`` called.

    Raises:
        LockedOutError: the session is locked out, or this failure locked it
        ValidationError: malformed email or short password
        AuthError: the credentials were rejected
    """
    throttle.check()

    email = sanitize_input(raw_email)
    password = sanitize_input(raw_password)

    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if not is_valid_password(password):
        raise ValidationError("Password must be at least 6 characters long")

    try:
        profile = data.sign_in(email, password)
    except AuthError:
        if throttle.record_failure():
            current_app.logger.warning(
                f"Login locked after {throttle.attempts} failed attempts for {email}"
            )
            raise LockedOutError(math.ceil(throttle.lockout_seconds / 60)) from None
        current_app.logger.info(f"Failed login for {email} ({throttle.attempts} attempts)")
        raise

    throttle.reset()
    current_app.logger.info(f"Profile {profile.id} signed in")
    return profile


__all__ = ['LoginThrottle', 'throttle_for', 'authenticate', 'MAX_LOGIN_ATTEMPTS', 'LOCKOUT_SECONDS']
