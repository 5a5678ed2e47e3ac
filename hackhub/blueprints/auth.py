"""Authentication blueprint for HackHub."""

from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for
from flask_login import current_user, login_user, logout_user

from hackhub.auth import anonymous_required
from hackhub.errors import HackHubError, LockedOutError
from hackhub.extensions import limiter
from hackhub.forms import LoginForm
from hackhub.services.data_access import DataAccess
from hackhub.services.login import authenticate, throttle_for


auth_bp = Blueprint("auth", __name__)


def _login_rate_limit() -> str:
    return current_app.config.get('LOGIN_RATE_LIMIT', '20 per minute')


def _safe_next(target: str | None) -> str | None:
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit(_login_rate_limit, methods=["POST"])
@anonymous_required
def login():
    form = LoginForm()
    if form.validate_on_submit():
        throttle = throttle_for(session)
        try:
            profile = authenticate(DataAccess(), throttle, form.email.data, form.password.data)
        except LockedOutError as exc:
            flash(f"{exc.title}: {exc.message}", "error")
            return render_template("login.html", form=form), 429
        except HackHubError as exc:
            flash(exc.message, "error")
            return render_template("login.html", form=form)
        except Exception as exc:
            current_app.logger.error(f"Unexpected login error: {exc}")
            flash("An unexpected error occurred", "error")
            return render_template("login.html", form=form)

        login_user(profile)
        session["profile_id"] = profile.id
        session["is_admin"] = profile.is_admin
        return redirect(_safe_next(request.args.get("next")) or url_for("profile.show"))

    return render_template("login.html", form=form)


@auth_bp.route("/logout")
def logout():
    if current_user.is_authenticated:
        logout_user()
    session.clear()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))


__all__ = ["auth_bp"]
