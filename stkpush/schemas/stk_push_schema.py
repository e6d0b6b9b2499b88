from marshmallow import Schema, fields, validate, validates, post_load, ValidationError, EXCLUDE

from stkpush.utils.validators import (
    MAX_ACCOUNT_REFERENCE_LENGTH,
    MAX_TRANSACTION_DESC_LENGTH,
    amount_error_message,
    normalize_phone_number,
    sanitize_text,
    validate_amount,
)

PHONE_REQUIRED = 'Phone number is required.'
PHONE_INVALID = 'Invalid phone number format. Must be a valid Kenyan mobile number.'
ACCOUNT_REFERENCE_INVALID = (
    f'Invalid account reference. Must be a non-empty string '
    f'(max {MAX_ACCOUNT_REFERENCE_LENGTH} characters).'
)
TRANSACTION_DESC_INVALID = (
    f'Invalid transaction description. Must be a non-empty string '
    f'(max {MAX_TRANSACTION_DESC_LENGTH} characters).'
)


def _messages(message):
    return {'required': message, 'null': message, 'invalid': message}


class StkPushRequestSchema(Schema):
    """STK Push initiation schema"""

    # Order in which validation problems are reported to the caller
    FIELD_ORDER = ('amount', 'phoneNumber', 'accountReference', 'transactionDesc')

    class Meta:
        unknown = EXCLUDE

    amount = fields.Raw(required=True, error_messages=_messages(amount_error_message()))
    phone_number = fields.Str(
        required=True,
        data_key='phoneNumber',
        error_messages=_messages(PHONE_REQUIRED),
    )
    account_reference = fields.Str(
        required=True,
        data_key='accountReference',
        validate=validate.Length(min=1, max=MAX_ACCOUNT_REFERENCE_LENGTH, error=ACCOUNT_REFERENCE_INVALID),
        error_messages=_messages(ACCOUNT_REFERENCE_INVALID),
    )
    transaction_desc = fields.Str(
        required=True,
        data_key='transactionDesc',
        validate=validate.Length(min=1, max=MAX_TRANSACTION_DESC_LENGTH, error=TRANSACTION_DESC_INVALID),
        error_messages=_messages(TRANSACTION_DESC_INVALID),
    )

    @validates('amount')
    def check_amount(self, value, **kwargs):
        is_valid, error = validate_amount(value)
        if not is_valid:
            raise ValidationError(error)

    @validates('phone_number')
    def check_phone_number(self, value, **kwargs):
        if not value:
            raise ValidationError(PHONE_REQUIRED)
        if normalize_phone_number(value) is None:
            raise ValidationError(PHONE_INVALID)

    @post_load
    def normalize(self, data, **kwargs):
        data['phone_number'] = normalize_phone_number(data['phone_number'])
        data['account_reference'] = sanitize_text(data['account_reference'])
        data['transaction_desc'] = sanitize_text(data['transaction_desc'])
        return data

    @classmethod
    def first_error(cls, messages):
        """Pick the message for the first failing field, in FIELD_ORDER."""
        for name in cls.FIELD_ORDER:
            if name in messages:
                errors = messages[name]
                return errors[0] if isinstance(errors, list) else str(errors)
        # Schema-level errors (e.g. body is not an object)
        for errors in messages.values():
            return errors[0] if isinstance(errors, list) else str(errors)
        return 'Invalid request'
