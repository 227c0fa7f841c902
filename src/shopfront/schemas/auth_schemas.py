from typing import Any, Dict

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow import ValidationError as SchemaValidationError

from shopfront.core.exceptions import ValidationError


class SignUpSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(required=True, validate=validate.Length(min=1))
    phone_number = fields.Str(required=True, data_key="phoneNumber", validate=validate.Length(min=1))
    dob = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, validate=validate.Length(min=1))


class SignInSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(load_default=None, allow_none=True)
    phone_number = fields.Str(load_default=None, allow_none=True, data_key="phoneNumber")
    password = fields.Str(load_default=None, allow_none=True)


def load_payload(schema: Schema, payload: Any) -> Dict[str, Any]:
    """
    Validate a decoded JSON body against `schema`.

    Returns the loaded fields, or raises ValidationError naming every
    offending field so nothing from the body is trusted before this passes.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid body")
    try:
        return schema.load(payload)
    except SchemaValidationError as err:
        bad_fields = sorted(err.messages) if isinstance(err.messages, dict) else []
        raise ValidationError(
            f"Missing or invalid fields: {', '.join(bad_fields)}",
            field_errors=err.messages if isinstance(err.messages, dict) else None,
        )
