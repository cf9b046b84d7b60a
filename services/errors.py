class ServiceError(Exception):
    status_code = 400
    code = 'service_error'

    def __init__(self, message: str = '', code: str = None):
        super().__init__(message or self.code)
        if code:
            self.code = code


class NotFoundError(ServiceError):
    status_code = 404
    code = 'not_found'


class PermissionDeniedError(ServiceError):
    status_code = 403
    code = 'forbidden'


class ConflictError(ServiceError):
    status_code = 409
    code = 'conflict'
