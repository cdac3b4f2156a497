class ApiError(Exception):
    """Error raised by request handlers and rendered by the app-level error handler"""

    def __init__(self, status_code, message, errors=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors

    @classmethod
    def bad_request(cls, message='Bad request'):
        return cls(400, message)

    @classmethod
    def validation(cls, errors, message='Validation failed'):
        return cls(400, message, errors=errors)

    @classmethod
    def unauthorized(cls, message='Not authorized'):
        return cls(401, message)

    @classmethod
    def forbidden(cls, message='Forbidden'):
        return cls(403, message)

    @classmethod
    def not_found(cls, message='Resource not found'):
        return cls(404, message)

    @classmethod
    def conflict(cls, message='Resource already exists'):
        # Duplicates are reported as a plain bad request
        return cls(400, message)

    def to_dict(self):
        data = {'message': self.message}
        if self.errors:
            data['errors'] = self.errors
        return data

    def __repr__(self):
        return f'<ApiError {self.status_code} {self.message}>'
