"""Forms for the feed blueprint."""

from flask_wtf import FlaskForm
from wtforms import TextAreaField
from wtforms.validators import Length, Optional


class FeedMessageForm(FlaskForm):
    """Form for posting to a community feed."""

    body = TextAreaField("Message", validators=[Optional(), Length(max=2000)])
