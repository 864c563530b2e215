"""Forms for the community blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from deskhive.announcements.models import PRIORITIES


class CommunityForm(FlaskForm):
    """Form for creating a new community.

    Member IDs arrive as a JSON list and are read from the payload directly.
    """

    name = StringField("Name", validators=[Optional(), Length(max=120)])
    description = TextAreaField("Description", validators=[Optional()])
    project = StringField("Project", validators=[Optional(), Length(max=120)])


class MemberForm(FlaskForm):
    """Form naming one user, for membership and lead changes."""

    user_id = StringField("User", validators=[DataRequired("Please choose a user.")])


class CommunityNoticeForm(FlaskForm):
    """Form for a project lead's notice to their community."""

    title = StringField("Title", validators=[DataRequired("Title and body are required.")])
    body = TextAreaField("Body", validators=[DataRequired("Title and body are required.")])
    priority = SelectField(
        "Priority",
        choices=[(p, p.capitalize()) for p in PRIORITIES],
        default="info",
    )
