"""Forms for the awards blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Optional


class AwardForm(FlaskForm):
    """Form for naming the employee of the month."""

    employee_id = StringField(
        "Employee", validators=[DataRequired("Please choose an employee.")]
    )
    reason = TextAreaField("Reason", validators=[Optional()])
