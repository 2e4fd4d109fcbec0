from collections import OrderedDict

from werkzeug.utils import cached_property
from jsonschema import Draft4Validator, ValidationError, FormatChecker

from .exceptions import ValidationError as BirblValidationError, UnknownAttribute
from .utils import canonical_key


class Schema(object):
    """
    Base class for everything described by a JSON-schema. Subclasses implement :meth:`schema`; the result is
    computed once and exposed as :attr:`response`, :attr:`request` and :attr:`update`.

    .. attribute:: response

        JSON-schema describing data returned by the API.

    .. attribute:: request

        JSON-schema that data sent to the API to create an item must match. Also available as :attr:`create`.

    .. attribute:: update

        JSON-schema that data sent to the API to update an item must match.

    """

    def schema(self):
        """
        :return: a single JSON-schema used in every direction, a ``(response, request)`` pair, or a
            ``(response, create, update)`` triple
        """
        raise NotImplementedError()

    @cached_property
    def _schemas(self):
        schema = self.schema()
        if not isinstance(schema, tuple):
            return schema, schema, schema
        if len(schema) == 2:
            return schema[0], schema[1], schema[1]
        return schema

    @property
    def response(self):
        return self._schemas[0]

    @property
    def request(self):
        return self._schemas[1]

    create = request

    @property
    def update(self):
        return self._schemas[2]

    @cached_property
    def _validators(self):
        validators = {}
        for update, schema in ((False, self.request), (True, self.update)):
            Draft4Validator.check_schema(schema)
            validators[update] = Draft4Validator(schema, format_checker=FormatChecker())
        return validators

    def format(self, value):
        return value

    def validate(self, instance, update=False):
        """
        Validates a JSON value against :attr:`request`, or :attr:`update` when ``update`` is ``True``.

        :raises birbl.exceptions.ValidationError: listing every failing constraint
        """
        validator = self._validators[update]
        try:
            validator.validate(instance)
        except ValidationError:
            raise BirblValidationError(validator.iter_errors(instance))
        return instance

    def convert(self, instance, update=False):
        return self.validate(instance, update)


class FieldSet(Schema):
    """
    A schema representation of a dictionary of :class:`fields.Raw` objects, keyed by attribute name.

    Uses the fields' ``io`` attributes to determine whether they are read-only or writable.

    :param dict fields: a dictionary of :class:`fields.Raw` objects
    :param required_fields: a list or tuple of field names that are required when creating an item
    """
    resource = None

    def __init__(self, fields, required_fields=None):
        self.fields = OrderedDict((canonical_key(key), field) for key, field in (fields or {}).items())
        self.required = set(canonical_key(name) for name in required_fields or ())

    def bind(self, resource):
        if self.resource is not None and self.resource is not resource:
            return FieldSet(self.fields, self.required).bind(resource)

        self.resource = resource
        return self

    def __contains__(self, name):
        return canonical_key(name) in self.fields

    def field(self, name):
        """
        :return: the field for an attribute name
        :raises UnknownAttribute: if the schema declares no such attribute
        """
        try:
            return self.fields[canonical_key(name)]
        except KeyError:
            raise UnknownAttribute(self.resource, name)

    @property
    def writable(self):
        return [key for key, field in self.fields.items() if 'c' in field.io or 'u' in field.io]

    def _object_schema(self, flag, attr):
        return {
            "type": "object",
            "properties": OrderedDict((key, getattr(field, attr))
                                      for key, field in self.fields.items() if flag in field.io)
        }

    def schema(self):
        create = self._object_schema('c', 'request')
        if self.required:
            create['required'] = sorted(self.required)

        return self._object_schema('r', 'response'), create, self._object_schema('u', 'request')

    def format(self, values):
        """
        Formats the writable attributes present in ``values`` for JSON output.
        """
        return OrderedDict((key, self.fields[key].format(values[key]))
                           for key in self.writable if key in values)
