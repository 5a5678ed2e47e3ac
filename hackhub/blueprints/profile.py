"""Profile pages."""

from __future__ import annotations

from flask import Blueprint, redirect, render_template, url_for
from flask_login import current_user

from hackhub.auth import login_required_with_message
from hackhub.services.problem_selection import PROBLEMS_BY_ID


profile_bp = Blueprint('profile', __name__)

RECENT_NOTIFICATIONS = 20


@profile_bp.route('/')
def home():
    if current_user.is_authenticated:
        return redirect(url_for('profile.show'))
    return redirect(url_for('auth.login'))


@profile_bp.route('/profile')
@login_required_with_message
def show():
    profile = current_user
    return render_template(
        'profile.html',
        profile=profile,
        problem=PROBLEMS_BY_ID.get(profile.selected_problem or ''),
        notifications=profile.notifications[:RECENT_NOTIFICATIONS],
    )
