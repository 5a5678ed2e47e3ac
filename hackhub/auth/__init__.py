"""Session guards for the participant pages."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, cast

from flask import flash, redirect, request, url_for
from flask_login import current_user

from hackhub.models import ProfileRole

F = TypeVar('F', bound=Callable[..., object])

LOGIN_MESSAGE = 'Please log in to access this page'


def _to_login():
    flash(LOGIN_MESSAGE, 'warning')
    return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))


def login_required_with_message(func: F) -> F:
    """Redirect visitors without a profile to the login page, keeping ``next``."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return _to_login()
        return func(*args, **kwargs)
    return cast(F, wrapper)


def anonymous_required(func: F) -> F:
    """The login page renders nothing for a signed-in profile; it goes to the profile page."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        if current_user.is_authenticated:
            return redirect(url_for('profile.show'))
        return func(*args, **kwargs)
    return cast(F, wrapper)


def admin_required(func: F) -> F:
    @wraps(func)
    @login_required_with_message
    def wrapper(*args, **kwargs):
        if not current_user.has_role(ProfileRole.ADMIN):
            flash('Only admins can review submissions', 'error')
            return redirect(url_for('applications.index'))
        return func(*args, **kwargs)
    return cast(F, wrapper)


__all__ = ['LOGIN_MESSAGE', 'login_required_with_message', 'anonymous_required', 'admin_required']
