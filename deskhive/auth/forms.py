"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class AdminSignUpForm(FlaskForm):
    """One-time admin sign-up form."""

    email = StringField(
        "Email",
        validators=[DataRequired("Please enter an email address."), Email()],
    )
    password = PasswordField(
        "Password",
        validators=[
            DataRequired("Please enter a password."),
            Length(min=6, message="Password must be at least 6 characters."),
            EqualTo("confirm_password", message="Passwords do not match."),
        ],
    )
    confirm_password = PasswordField("Confirm Password", validators=[DataRequired()])
