"""Forms for the check-ins blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import Length, Optional

from .models import MOOD_LABELS, MOODS


class CheckInForm(FlaskForm):
    """Form for the daily mood check-in."""

    mood = SelectField(
        "Mood",
        choices=[(m, MOOD_LABELS[m]) for m in MOODS],
        validate_choice=False,
    )
    note = TextAreaField("Note", validators=[Optional(), Length(max=500)])
    date_key = StringField("Date", validators=[Optional()])
