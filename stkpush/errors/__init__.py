from stkpush.errors.exceptions import AppError, ValidationError, BadRequest

__all__= [
    'ValidationError',
    'AppError',
    'BadRequest',
]
