from werkzeug.http import HTTP_STATUS_CODES


class BirblException(Exception):

    def as_dict(self):
        return {
            'message': str(self)
        }


class ConfigurationError(BirblException):
    pass


class UnknownAttribute(BirblException, AttributeError):

    def __init__(self, resource, name):
        super(UnknownAttribute, self).__init__(
            'Unknown attribute "{}" for resource "{}"'.format(name, resource.meta.name))
        self.resource = resource
        self.name = name

    def as_dict(self):
        dct = super(UnknownAttribute, self).as_dict()
        dct['attribute'] = self.name
        dct['resource'] = self.resource.meta.name
        return dct


class UnknownRelation(BirblException, LookupError):

    def __init__(self, name):
        super(UnknownRelation, self).__init__('No resource registered for relation "{}"'.format(name))
        self.name = name


class InvalidState(BirblException):

    def __init__(self, item, message):
        super(InvalidState, self).__init__(message)
        self.item = item


class ValidationError(BirblException, ValueError):

    def __init__(self, errors, root=None):
        self.root = root
        self.errors = list(errors)
        super(ValidationError, self).__init__('; '.join(error.message for error in self.errors))

    def _complete_path(self, error):
        path = tuple(error.absolute_path)
        if self.root is not None:
            return (self.root,) + path
        return path

    def _format_errors(self):
        for error in self.errors:
            yield {
                'validationOf': {error.validator: error.validator_value},
                'path': self._complete_path(error),
                'message': error.message
            }

    def as_dict(self):
        dct = super(ValidationError, self).as_dict()
        dct['errors'] = list(self._format_errors())
        return dct


class TransportError(BirblException):
    """
    Raised for any failed request to the Birbl API. ``status_code`` is ``None`` when no response was received.
    """
    status = None

    def __init__(self, method, url, status_code=None, response=None, message=None):
        self.method = method
        self.url = url
        self.status_code = status_code if status_code is not None else self.status
        self.response = response

        if message is None:
            message = HTTP_STATUS_CODES.get(self.status_code, 'Request failed')
        super(TransportError, self).__init__('{} {}: {}'.format(method, url, message))

    def as_dict(self):
        return {
            'status': self.status_code,
            'message': HTTP_STATUS_CODES.get(self.status_code, ''),
            'method': self.method,
            'url': self.url,
        }


class BadRequest(TransportError):
    status = 400


class ItemNotFound(TransportError):
    status = 404


class Conflict(TransportError):
    status = 409


ERRORS_BY_STATUS = {
    400: BadRequest,
    404: ItemNotFound,
    409: Conflict,
    422: BadRequest,
}


def error_for_status(status_code):
    return ERRORS_BY_STATUS.get(status_code, TransportError)
