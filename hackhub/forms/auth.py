"""Login form."""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField

# Email and password rules are checked by the login service after the lockout
# check, so the form itself only carries the raw values.


class LoginForm(FlaskForm):
    email = StringField(
        "Email",
        render_kw={"placeholder": "Enter your email", "type": "email"}
    )
    password = PasswordField(
        "Password",
        render_kw={"placeholder": "Enter your password", "minlength": 6}
    )
