"""Errors raised by the generic record operations"""


class ObjectError(Exception):
    status_code = 400

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def as_response_data(self):
        data = {'message': self.message}
        if self.errors is not None:
            data['errors'] = self.errors
        return data


class UnknownObjectCode(ObjectError):
    status_code = 404

    def __init__(self, object_code):
        self.object_code = object_code
        super().__init__(f"Unknown object: {object_code}")


class RecordNotFound(ObjectError):
    status_code = 404

    def __init__(self, label):
        super().__init__(f"{label} not found")


class RecordValidationError(ObjectError):
    def __init__(self, errors, message='Invalid data'):
        super().__init__(message, errors=errors)


class DeleteBlocked(ObjectError):
    pass


class CompanyContextRequired(ObjectError):
    def __init__(self):
        super().__init__('Company context required')
