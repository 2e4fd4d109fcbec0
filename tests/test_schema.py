from unittest import TestCase

from birbl import fields, Resource
from birbl.exceptions import ValidationError, UnknownAttribute
from birbl.schema import Schema, FieldSet


class SchemaTestCase(TestCase):

    def test_schema_class(self):
        class FooSchema(Schema):

            def __init__(self, schema):
                self._schema = schema

            def schema(self):
                return self._schema

        foo_response = {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "createdAt": {"type": "string", "format": "date-time"}
            }
        }

        foo_request = {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 3},
                "properties": {
                    "type": "object",
                    "additionalProperties": {"type": "string"}
                }
            }
        }

        foo = FooSchema((foo_response, foo_request))
        bar = FooSchema({"type": "boolean"})

        self.assertEqual(foo_request, foo.request)
        self.assertEqual(foo_response, foo.response)
        self.assertEqual({"type": "boolean"}, bar.request)
        self.assertEqual({"type": "boolean"}, bar.response)
        self.assertEqual({"name": "Foo foo"}, foo.format({"name": "Foo foo"}))
        self.assertEqual(False, bar.format(False))
        self.assertEqual(True, bar.convert(True))

        with self.assertRaises(ValidationError):
            bar.convert("True")

        self.assertEqual({
            "name": "Foo",
            "properties": {
                "is": "foo"
            }
        }, foo.convert({
            "name": "Foo",
            "properties": {
                "is": "foo"
            }
        }))

        with self.assertRaises(ValidationError) as cx:
            foo.convert({
                "name": "Foo",
                "properties": {
                    "age": 12
                }})

        self.assertEqual({
            'errors': [
                {
                    'path': ('properties', 'age'),
                    'validationOf': {'type': 'string'},
                    'message': "12 is not of type 'string'"
                }
            ],
            'message': "12 is not of type 'string'"
        }, cx.exception.as_dict())

    def test_fieldset_schema(self):
        fs = FieldSet({
            "id": fields.Integer(io="r"),
            "name": fields.String(),
            "secret": fields.String(io="c"),
        }, required_fields=("name",))

        read, create, update = fs.schema()
        self.assertEqual(["id", "name"], list(read["properties"]))
        self.assertEqual(["name", "secret"], list(create["properties"]))
        self.assertEqual(["name"], list(update["properties"]))
        self.assertEqual(["name"], create["required"])
        self.assertNotIn("required", update)
        self.assertEqual(["name", "secret"], fs.writable)

    def test_fieldset_validate(self):
        fs = FieldSet({"name": fields.String(), "size": fields.Integer()}, required_fields=("name",))

        self.assertEqual({"name": "Foo"}, fs.validate({"name": "Foo"}))
        self.assertEqual({"size": 1}, fs.validate({"size": 1}, update=True))

        with self.assertRaises(ValidationError):
            fs.validate({"size": 1})

        with self.assertRaises(ValidationError):
            fs.validate({"name": "Foo", "size": "big"})

    def test_fieldset_field(self):
        class FooResource(Resource):
            class Schema:
                name = fields.String()

        self.assertIsInstance(FooResource.schema.field("NAME"), fields.String)
        self.assertTrue("Name" in FooResource.schema)
        self.assertFalse("color" in FooResource.schema)

        with self.assertRaises(UnknownAttribute) as cx:
            FooResource.schema.field("color")

        self.assertEqual({
            "message": 'Unknown attribute "color" for resource "fooresource"',
            "attribute": "color",
            "resource": "fooresource"
        }, cx.exception.as_dict())

    def test_fieldset_format(self):
        fs = FieldSet({"id": fields.Integer(io="r"), "name": fields.String(), "size": fields.Integer()})
        self.assertEqual({"name": "Foo"}, dict(fs.format({"id": 1, "name": "Foo"})))

    def test_fieldset_rebind(self):
        class FooResource(Resource):
            pass

        class BarResource(Resource):
            pass

        fs = FieldSet({"foo": fields.String()}).bind(FooResource)
        rebound = fs.bind(BarResource)
        self.assertIsNot(fs, rebound)
        self.assertIs(BarResource, rebound.resource)
        self.assertIs(FooResource, fs.resource)
