"""Forms for the announcements blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import Optional

from .models import PRIORITIES, PRIORITY_INFO


class AnnouncementForm(FlaskForm):
    """Form for a broadcast announcement."""

    title = StringField("Title", validators=[Optional()])
    body = TextAreaField("Body", validators=[Optional()])
    priority = SelectField(
        "Priority",
        choices=[(p, p.capitalize()) for p in PRIORITIES],
        default=PRIORITY_INFO,
    )
