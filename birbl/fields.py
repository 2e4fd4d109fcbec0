import copy
from datetime import date, datetime

import aniso8601

from .schema import Schema


def _typed_schema(type_, **constraints):
    schema = {"type": type_}
    schema.update((key, value) for key, value in constraints.items() if value is not None)
    return schema


def _allow_null(schema):
    if "enum" in schema and None not in schema["enum"]:
        schema["enum"] = list(schema["enum"]) + [None]

    if "type" in schema:
        types = schema["type"]
        schema["type"] = (list(types) if isinstance(types, (list, tuple)) else [types]) + ["null"]
    elif list(schema) == ["$ref"]:
        return {"anyOf": [schema, {"type": "null"}]}
    return schema


class Raw(Schema):
    """
    Base class for all field types. A field holds the JSON-schema for one attribute of a resource and converts
    between the JSON value exchanged with the API and the Python value kept in the resource's attributes.

    >>> fields.Raw({"type": "string"}, io="r").response
    {'type': 'string', 'readOnly': True}

    :param schema: JSON-schema for the field, a ``(response, request)`` tuple of schemas, a :class:`Schema`, or a
        callable returning any of these
    :param str io: one or more of ``"r"`` (read), ``"c"`` (create), ``"u"`` (update) and ``"w"`` (create and update),
        default: ``"rw"``. Fields that are only read are hydrated from the API but never sent back to it
    :param default: optional default value, must be JSON-convertible; may be a callable with no arguments
    :param bool nullable: whether ``None`` is a valid value
    """

    def __init__(self, schema, io="rw", default=None, nullable=False):
        self._schema = schema
        self._default = default
        self.nullable = nullable
        self.io = io

    @property
    def io(self):
        return self._io

    @io.setter
    def io(self, value):
        flags = value.replace('w', 'cu')
        self._io = ''.join(flag for flag in 'cru' if flag in flags)

    def with_io(self, io):
        """
        Returns a copy of this field with different ``io`` flags, so that a subclass can change a field it inherits
        without affecting the base class.
        """
        field = copy.copy(self)
        for cached in ('_schemas', '_validators'):
            field.__dict__.pop(cached, None)
        field.io = io
        return field

    @property
    def default(self):
        if callable(self._default):
            return self._default()
        return self._default

    def _decorate(self, schema, response):
        schema = dict(schema)

        if response and self.io == "r":
            schema["readOnly"] = True

        if "null" in schema.get("type", ()):
            self.nullable = True
        elif self.nullable:
            schema = _allow_null(schema)

        default = self.default
        if default is not None:
            schema["default"] = default
        return schema

    def schema(self):
        schema = self._schema() if callable(self._schema) else self._schema

        if isinstance(schema, Schema):
            response, request = schema.response, schema.request
        elif isinstance(schema, tuple):
            response, request = schema
        else:
            response = request = schema

        return self._decorate(response, True), self._decorate(request, False)

    def format(self, value):
        """
        Formats a Python value for the JSON body of a request.
        """
        return None if value is None else self.formatter(value)

    def convert(self, instance, update=False, validate=True):
        """
        Validates a JSON value against the request schema and converts it to its Python representation.

        :raises birbl.exceptions.ValidationError: if ``validate`` is set and the value does not match
        """
        if validate:
            self.validate(instance, update)
        return None if instance is None else self.converter(instance)

    def formatter(self, value):
        return value

    def converter(self, value):
        return value

    def __repr__(self):
        return '{}(io={!r}, nullable={!r})'.format(self.__class__.__name__, self.io, self.nullable)


class Any(Raw):
    """
    A field type that allows any JSON value.
    """

    def __init__(self, **kwargs):
        super(Any, self).__init__({"type": ["null", "string", "number", "boolean", "object", "array"]}, **kwargs)


def _as_field(value):
    field = value() if isinstance(value, type) else value
    if isinstance(field, Raw):
        return field
    if isinstance(field, Schema):
        return Raw(field)
    raise RuntimeError('Expected a field or schema, got {!r}'.format(field))


class Array(Raw):
    """
    A list of values of one field type. A missing array that is not nullable is sent as ``[]``.

    ::

        digital_asset_urls = fields.Array(fields.String(), max_items=10)

    :param items: field class or instance for the list items
    :param int min_items: minimum number of items
    :param int max_items: maximum number of items
    :param bool unique: if ``True``, all values in the list must be unique
    """

    def __init__(self, items, min_items=None, max_items=None, unique=None, **kwargs):
        self.container = _as_field(items)
        self._constraints = {key: value for key, value in (('minItems', min_items),
                                                            ('maxItems', max_items),
                                                            ('uniqueItems', unique)) if value is not None}
        kwargs.setdefault('default', list)
        super(Array, self).__init__(self._array_schema, **kwargs)

    def _array_schema(self):
        return (dict(self._constraints, type="array", items=self.container.response),
                dict(self._constraints, type="array", items=self.container.request))

    def format(self, value):
        if value is None and not self.nullable:
            return []
        return super(Array, self).format(value)

    def formatter(self, value):
        return [self.container.format(item) for item in value]

    def converter(self, value):
        return [self.container.convert(item, validate=False) for item in value]


class Object(Raw):
    """
    A JSON object with either a fixed set of named properties or any number of values of a single field type.

    :param properties: a dictionary of ``{name: field}`` pairs, or a field class or instance for all values;
        any JSON value is allowed when omitted
    """

    def __init__(self, properties=None, **kwargs):
        self.properties = self.values = None

        if isinstance(properties, dict):
            self.properties = properties
        else:
            self.values = Any() if properties is None else _as_field(properties)

        super(Object, self).__init__(self._object_schema, **kwargs)

    def _object_schema(self):
        def build(attr):
            if self.properties is None:
                return {"type": "object", "additionalProperties": getattr(self.values, attr)}
            return {
                "type": "object",
                "properties": {key: getattr(field, attr) for key, field in self.properties.items()},
                "additionalProperties": False
            }

        return build("response"), build("request")

    def formatter(self, value):
        if self.properties is None:
            return {key: self.values.format(item) for key, item in value.items()}
        return {key: field.format(value.get(key, field.default)) for key, field in self.properties.items()}

    def converter(self, value):
        if self.properties is None:
            return {key: self.values.convert(item, validate=False) for key, item in value.items()}
        return {key: field.convert(value.get(key, field.default), validate=False)
                for key, field in self.properties.items()}


class Nested(Raw):
    """
    A field for a value object owned by the resource, such as an :class:`birbl.resources.Address`. Values are
    instances of ``value_class`` and are serialized inline under the field's own key using
    ``value_class.as_json()``.

    :param value_class: a :class:`birbl.resource.ValueObject` subclass
    """

    def __init__(self, value_class, **kwargs):
        self.value_class = value_class
        super(Nested, self).__init__(lambda: value_class.schema, **kwargs)

    def convert(self, instance, update=False, validate=True):
        if isinstance(instance, self.value_class):
            return instance
        return super(Nested, self).convert(instance, update, validate)

    def converter(self, value):
        return self.value_class(value)

    def formatter(self, value):
        return value.as_json()


class String(Raw):
    """
    :param int min_length: minimum length of string
    :param int max_length: maximum length of string
    :param str pattern: regex pattern that the string must match
    :param list enum: list of allowed strings
    :param str format: JSON-schema format name
    """

    def __init__(self, min_length=None, max_length=None, pattern=None, enum=None, format=None, **kwargs):
        super(String, self).__init__(_typed_schema("string",
                                                   minLength=min_length,
                                                   maxLength=max_length,
                                                   pattern=pattern,
                                                   enum=None if enum is None else list(enum),
                                                   format=format), **kwargs)


class Email(String):
    def __init__(self, **kwargs):
        super(Email, self).__init__(format="email", **kwargs)


class DateString(Raw):
    """
    A field for ISO 8601 date strings, parsed with aniso8601. Converts to :class:`datetime.date`.
    """
    python_type = date
    string_format = "date"

    def __init__(self, **kwargs):
        super(DateString, self).__init__({"type": "string", "format": self.string_format}, **kwargs)

    def convert(self, instance, update=False, validate=True):
        if isinstance(instance, self.python_type):
            return instance
        return super(DateString, self).convert(instance, update, validate)

    def formatter(self, value):
        return value.strftime('%Y-%m-%d')

    def converter(self, value):
        return aniso8601.parse_date(value)


class DateTimeString(DateString):
    """
    A field for ISO 8601 date-time strings. Converts to :class:`datetime.datetime`.
    """
    python_type = datetime
    string_format = "date-time"

    def formatter(self, value):
        return value.isoformat()

    def converter(self, value):
        return aniso8601.parse_datetime(value)


class Boolean(Raw):
    def __init__(self, **kwargs):
        super(Boolean, self).__init__({"type": "boolean"}, **kwargs)

    def formatter(self, value):
        return bool(value)


class Integer(Raw):
    def __init__(self, minimum=None, maximum=None, **kwargs):
        super(Integer, self).__init__(_typed_schema("integer", minimum=minimum, maximum=maximum), **kwargs)

    def formatter(self, value):
        return int(value)


class PositiveInteger(Integer):
    """
    A :class:`Integer` field that only accepts integers >=1, such as a participant count.
    """

    def __init__(self, maximum=None, **kwargs):
        super(PositiveInteger, self).__init__(minimum=1, maximum=maximum, **kwargs)


class Number(Raw):
    def __init__(self, minimum=None, maximum=None, exclusive_minimum=False, exclusive_maximum=False, **kwargs):
        super(Number, self).__init__(_typed_schema(
            "number",
            minimum=minimum,
            maximum=maximum,
            exclusiveMinimum=True if exclusive_minimum and minimum is not None else None,
            exclusiveMaximum=True if exclusive_maximum and maximum is not None else None
        ), **kwargs)
