"""Forms for the tasks blueprint."""

from flask_wtf import FlaskForm
from wtforms import DateField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Optional

from .models import PRIORITY_MEDIUM, TASK_PRIORITIES, TASK_STATUSES


class TaskForm(FlaskForm):
    """Form for assigning a task."""

    assignee_id = StringField(
        "Assign To", validators=[DataRequired("Please choose a member.")]
    )
    title = StringField("Title", validators=[Optional()])
    description = TextAreaField("Description", validators=[Optional()])
    priority = SelectField(
        "Priority",
        choices=[(p, p.capitalize()) for p in TASK_PRIORITIES],
        default=PRIORITY_MEDIUM,
    )
    due_date = DateField("Due Date", validators=[Optional()])


class TaskStatusForm(FlaskForm):
    """Form for moving a task along."""

    status = SelectField(
        "Status",
        choices=[(s, s) for s in TASK_STATUSES],
        validators=[DataRequired()],
    )
