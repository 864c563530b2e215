"""Helpers for validating Flask-WTF forms on JSON endpoints."""

from __future__ import annotations

from flask_wtf import FlaskForm

from deskhive.errors import ValidationError


def validate_form(form: FlaskForm) -> FlaskForm:
    """Validate a submitted form, raising the first field error."""
    if form.validate_on_submit():
        return form
    for field_name, messages in form.errors.items():
        if messages:
            message = messages[0]
            if isinstance(message, dict):
                # Nested form errors carry their own mapping.
                message = next(iter(message.values()), "Validation failed.")
            if field_name == "csrf_token":
                raise ValidationError(
                    "Your session may have expired. Please try your action again."
                )
            raise ValidationError(str(message))
    raise ValidationError("Invalid request.")
