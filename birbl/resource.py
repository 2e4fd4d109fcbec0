import logging

from . import fields
from .exceptions import ConfigurationError, InvalidState
from .graph import ChildGraph
from .naming import pluralize, singularize, strip_namespace
from .reference import ResourceReference
from .routes import Route
from .schema import FieldSet
from .signals import before_create, after_create, before_update, after_update, before_delete, after_delete, \
    before_add_to_relation, after_add_to_relation
from .utils import AttributeBag, AttributeDict, canonical_key, hybridmethod

logger = logging.getLogger(__name__)


class ResourceMeta(type):

    def __new__(mcs, name, bases, members):
        class_ = super(ResourceMeta, mcs).__new__(mcs, name, bases, members)
        class_.routes = routes = dict(getattr(class_, 'routes') or {})
        class_.meta = meta = AttributeDict(getattr(class_, 'meta', {}) or {})

        for base in bases:
            if hasattr(base, 'Meta'):
                meta.update({k: v for k, v in base.Meta.__dict__.items() if not k.startswith('__')})

        if 'Meta' in members:
            changes = members['Meta'].__dict__
            for k, v in changes.items():
                if not k.startswith('__'):
                    meta[k] = v

            if not changes.get('name', None):
                meta['name'] = name.lower()
        else:
            meta['name'] = name.lower()

        if not meta.get('namespace'):
            meta['namespace'] = class_.__module__.split('.')[0]

        schema = {}
        for base in bases:
            if getattr(base, 'schema', None) is not None:
                schema.update(base.schema.fields)

        if 'Schema' in members:
            schema.update({k: f for k, f in members['Schema'].__dict__.items() if not k.startswith('__')})

        class_.schema = fs = FieldSet(schema, required_fields=meta.get('required_fields', None))

        for field_name in meta.get('read_only_fields', ()):
            if field_name in fs:
                key = canonical_key(field_name)
                fs.fields[key] = fs.fields[key].with_io("r")

        fs.bind(class_)

        for n, m in members.items():
            if isinstance(m, Route):
                if m.attribute is None:
                    m.attribute = n
                routes[m.attribute] = m

        return class_


class ValueObject(metaclass=ResourceMeta):
    """
    A set of attributes described by a ``Schema`` that is owned by another object and has no identity of its own.
    Values are kept in an :class:`AttributeBag` and converted by their field when set, so each key given on
    construction must match a field.

    :param dict attributes: initial attribute values
    :raises UnknownAttribute: if ``attributes`` contains a key with no matching field
    """
    meta = None
    routes = None
    schema = None

    def __init__(self, attributes=None):
        object.__setattr__(self, 'attributes', AttributeBag())

        for name, value in (attributes or {}).items():
            self.set_attribute(name, value)

    def get_attribute(self, name):
        self.schema.field(name)
        return self.attributes.get(name)

    def set_attribute(self, name, value):
        """
        Converts ``value`` using the field for ``name`` and stores it. ``None`` is stored without conversion.

        :raises UnknownAttribute: if the schema has no field ``name``
        :raises ValidationError: if the value does not match the field
        """
        field = self.schema.field(name)
        self.attributes[name] = None if value is None else field.convert(value)

    def __getattr__(self, name):
        if name.startswith('_') or name == 'attributes' or name not in self.schema:
            raise AttributeError("'{}' object has no attribute '{}'".format(self.__class__.__name__, name))
        return self.get_attribute(name)

    def __setattr__(self, name, value):
        if name in self.schema:
            self.set_attribute(name, value)
        else:
            object.__setattr__(self, name, value)

    def writable_attributes(self):
        writable = self.schema.writable
        return {key: value for key, value in self.attributes.as_dict().items() if key in writable}

    def as_json(self):
        """
        Returns the writable attributes formatted for JSON, with every owned value object serialized under its own
        key. Value objects are written last, so they replace any raw value under the same key.
        """
        attributes = dict(self.schema.format(self.writable_attributes()))

        for key, field in self.schema.fields.items():
            if isinstance(field, fields.Nested) and key in self.schema.writable:
                value = self.attributes.get(key)
                if value is not None:
                    attributes[key] = field.format(value)

        return attributes

    def __eq__(self, other):
        return type(self) is type(other) and self.as_json() == other.as_json()

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        return '<{} {!r}>'.format(self.__class__.__name__, self.attributes)


class Resource(ValueObject):
    """
    Base class for a Birbl API resource.

    A resource is configured using its ``Schema`` and ``Meta`` attributes as well as any properties that are of type
    :class:`routes.Route`. Resource classes must be registered with an :class:`birbl.Api` before they can talk to
    the API.

    :class:`Meta` class attributes:

    =======================  ==============  ====================================================================
    Attribute name           Default         Description
    =======================  ==============  ====================================================================
    name                     ---             Singular name of the resource; defaults to the lower-case class name
    namespace                ---             Prefix removed from the qualified collection name; defaults to the
                                             top-level package the resource is defined in
    required_fields          ``()``          Fields that must be present when an item is created
    read_only_fields         ``()``          Fields that are read from the API but never sent back to it
    refetch_empty_relations  ``False``       When ``True``, a relation with no children is loaded again on every
                                             access instead of being cached as empty
    =======================  ==============  ====================================================================

    Usage example:

    .. code-block:: python

        class Activity(Resource):
            class Schema:
                name = fields.String()
                base_price = fields.Integer(nullable=True)

            reservations = Children('reservation')

        activity = Activity.find(1225)
        activity.name = 'Morning yoga'
        activity.save()

    .. attribute:: api

        Back reference to the :class:`Api` this resource is registered with.

    .. attribute:: parent

        The resource this item was loaded or created through, or ``None``. Set when the item is constructed and never
        changed afterwards.

    """
    api = None

    class Schema:
        id = fields.Raw({"type": ["integer", "string"]}, io="r", nullable=True)

    class Meta:
        name = None
        namespace = None
        required_fields = ()
        read_only_fields = ()
        refetch_empty_relations = False

    def __init__(self, attributes=None, parent=None):
        object.__setattr__(self, '_parent', parent)
        object.__setattr__(self, '_deleted', False)
        object.__setattr__(self, '_children', ChildGraph(refetch_empty=self.meta.refetch_empty_relations))
        super(Resource, self).__init__(attributes)

    @classmethod
    def get_client(cls):
        if cls.api is None:
            raise ConfigurationError('Resource "{}" is not registered with an Api'.format(cls.meta.name))
        if cls.api.client is None:
            raise ConfigurationError('The Api for resource "{}" has no client'.format(cls.meta.name))
        return cls.api.client

    @classmethod
    def resource_name(cls):
        return cls.meta.name

    @classmethod
    def qualified_name(cls):
        return '{}/{}'.format(cls.meta.namespace, pluralize(cls.meta.name))

    @classmethod
    def collection_path(cls):
        return strip_namespace(cls.qualified_name(), cls.meta.namespace)

    @classmethod
    def item_path(cls, id):
        return '{}/{}'.format(cls.collection_path(), id)

    @classmethod
    def all(cls):
        results = cls.get_client().get(cls.collection_path())
        return [cls(attributes) for attributes in results or ()]

    @classmethod
    def find(cls, id, attributes=None, parent=None):
        """
        Loads an item by id.

        :param id: item id
        :param dict attributes: optional attributes to seed the item with; values returned by the API take precedence
        :param Resource parent: optional parent resource
        :raises ItemNotFound: if there is no item with this id
        """
        data = dict(attributes or {}, id=id)
        data.update(cls.get_client().get(cls.item_path(id)) or {})
        return cls(data, parent)

    @classmethod
    def create(cls, attributes=None, parent=None):
        item = cls(attributes, parent)
        item.save()
        return item

    @hybridmethod
    def delete(cls, id, attributes=None):
        """
        Deletes an item by id without loading it. A resource instance may be passed in place of ``attributes``; it is
        then used as the parent of the item.
        """
        parent = None
        if isinstance(attributes, Resource):
            parent, attributes = attributes, None

        item = cls(dict(attributes or {}, id=id), parent)
        item.delete()

    def __getattr__(self, name):
        if not name.startswith('_') and self.parent is not None and name == self.parent.resource_name():
            return self.parent
        return super(Resource, self).__getattr__(name)

    @property
    def parent(self):
        return self._parent

    def is_new_record(self):
        return self.id is None

    def is_deleted(self):
        return self._deleted

    def _check_state(self):
        if self._deleted:
            raise InvalidState(self, '{} {} has been deleted'.format(self.meta.name, self.id))

    def path(self):
        if self.is_new_record():
            raise InvalidState(self, 'Unsaved {} has no item path'.format(self.meta.name))
        return self.item_path(self.id)

    def post_path(self):
        return self.collection_path()

    def save(self):
        """
        Creates the item with ``POST`` if it is new and assigns the id returned by the API; otherwise updates it with
        ``PUT``.

        :raises InvalidState: if the item has been deleted
        :raises ValidationError: if the attributes are incomplete or invalid
        """
        self._check_state()
        client = self.get_client()
        payload = self.as_json()
        cls = self.__class__

        if self.is_new_record():
            self.schema.validate(payload)
            before_create.send(cls, item=self)
            result = client.post(self.post_path(), payload)
            self.id = result['id']
            after_create.send(cls, item=self)
        else:
            self.schema.validate(payload, update=True)
            before_update.send(cls, item=self, changes=payload)
            client.put(self.path(), payload)
            after_update.send(cls, item=self, changes=payload)
        return True

    @delete.instancemethod
    def delete(self):
        self._check_state()
        cls = self.__class__
        before_delete.send(cls, item=self)
        self.get_client().delete(self.path())
        object.__setattr__(self, '_deleted', True)
        after_delete.send(cls, item=self)

    def _relation_resource(self, name):
        return ResourceReference(singularize(canonical_key(name))).resolve(self.__class__)

    def children(self, relation):
        """
        Returns the children of a relation, loading them from the API the first time they are requested.

        :param str relation: plural relation name, e.g. ``'activities'``
        """
        self._check_state()
        relation = canonical_key(relation)

        if self._children.is_resolved(relation):
            return self._children[relation]

        path = '{}/{}'.format(self.path(), relation)
        logger.debug('Loading %s from %s', relation, path)
        data = self.get_client().get(path)

        resource = singularize(relation)
        for item in data or ():
            id = AttributeBag(item).get('id')
            if id is not None and self._children.find(relation, id) is not None:
                continue
            self.add_child(resource, item)

        self._children.mark_resolved(relation)
        return self._children[relation]

    def add_child(self, resource, data, autocreate=True):
        """
        Adds a child resource to this resource from the given data.

        If the child does not have an id and ``autocreate`` is ``True``, it is sent to the API for creation right away.
        If this resource holds a list of raw children under the plural name, ``data`` is appended to it as well.

        :param str resource: singular relation name, e.g. ``'reservation'``
        :param dict data: child attributes
        """
        self._check_state()
        resource_model = self._relation_resource(resource)
        relation = pluralize(canonical_key(resource))
        cls = self.__class__

        before_add_to_relation.send(cls, item=self, attribute=relation, child=data)

        if autocreate and AttributeBag(data).get('id') is None:
            child = resource_model.create(data, self)
        else:
            child = resource_model(data, self)

        self._children.append(relation, child)

        raw = self.attributes.get(relation)
        if isinstance(raw, list):
            raw.append(data)

        after_add_to_relation.send(cls, item=self, attribute=relation, child=child)
        return child

    def child(self, resource, id):
        """
        Returns a child by id. Children already loaded are searched first; on a miss the child is loaded on its own
        and added to the relation. This never loads the whole relation.

        :param str resource: singular relation name
        :param id: child id
        """
        self._check_state()
        relation = pluralize(canonical_key(resource))

        found = self._children.find(relation, id)
        if found is not None:
            return found

        child = self._relation_resource(resource).find(id, {}, self)
        return self._children.append(relation, child)

    def reset_children(self, relation=None):
        """
        Forgets the cached children of one relation, or of all relations, so they are loaded again on next access.
        """
        self._children.reset(relation)

    __eq__ = object.__eq__
    __ne__ = object.__ne__
    __hash__ = object.__hash__

    def __repr__(self):
        return '<{} id={!r}>'.format(self.__class__.__name__, self.id)
