"""Forms for the directory blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField


class AddMemberForm(FlaskForm):
    """Form for provisioning a member account.

    The email is checked by the directory service so the caller sees the
    same messages whichever client submits it.
    """

    email = StringField("Email")
