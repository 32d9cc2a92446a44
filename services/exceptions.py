# services/exceptions.py


class CommunicationError(Exception):
    """Base error for the communications API; rendered as JSON by the blueprint."""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(CommunicationError):
    status_code = 422

    def __init__(self, errors, message='The given data was invalid.'):
        super().__init__(message)
        self.errors = errors

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class NotFound(CommunicationError):
    status_code = 404


class InvalidState(CommunicationError):
    status_code = 422


class DispatchFailure(CommunicationError):
    status_code = 500

    def __init__(self, result):
        super().__init__(result.get('message', 'Dispatch failed'))
        self.result = result


class PersistenceFailure(CommunicationError):
    status_code = 500
