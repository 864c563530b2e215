"""Forms for the issues blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Optional

from .models import ISSUE_CATEGORIES, ISSUE_STATUSES


class IssueReportForm(FlaskForm):
    """Form for filing an anonymous issue."""

    category = SelectField(
        "Category",
        choices=[(c, c.capitalize()) for c in ISSUE_CATEGORIES],
        default="other",
    )
    title = StringField("Title", validators=[Optional()])
    description = TextAreaField("Description", validators=[Optional()])


class IssueResponseForm(FlaskForm):
    """Form for the admin's answer to an issue."""

    response = TextAreaField("Response", validators=[Optional()])
    status = SelectField(
        "Status",
        choices=[(s, s) for s in ISSUE_STATUSES],
        validators=[DataRequired()],
    )
