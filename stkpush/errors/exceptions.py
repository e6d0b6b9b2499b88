class AppError(Exception):
    status_code = 500
    error = "Application error"

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        if status_code:
            self.status_code = status_code
        self.message = message
        self.details = details

    def to_dict(self):
        body = {'success': False, 'error': self.error, 'message': self.message}
        if self.details is not None:
            body['details'] = self.details
        return body


class ValidationError(AppError):
    status_code = 400
    error = "Validation error"

class BadRequest(AppError):
    status_code = 400
    error = "Bad request"
