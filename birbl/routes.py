from functools import partial

from .naming import pluralize, singularize


class Route(object):
    """
    Base class for the relations and routes declared as class attributes on a :class:`Resource`.

    .. attribute:: attribute

        Name of the attribute the route is declared as; set by the resource metaclass when not given.

    """

    def __init__(self, attribute=None):
        self.attribute = attribute

    def __repr__(self):
        return '{}(attribute={})'.format(self.__class__.__name__, repr(self.attribute))


class Children(Route):
    """
    Exposes a lazily loaded child relation as a list attribute.

    ::

        class Partner(Resource):
            activities = Children('activity')

        partner.activities  # same as partner.children('activities')

    :param str resource: singular name of the child resource, defaults to the singular of the attribute name
    """

    def __init__(self, resource=None, **kwargs):
        super(Children, self).__init__(**kwargs)
        self.resource = resource

    @property
    def relation(self):
        return pluralize(self.resource or singularize(self.attribute))

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.children(self.relation)


class Child(Route):
    """
    Exposes a single child lookup by id as a method.

    ::

        class Partner(Resource):
            activity = Child()

        partner.activity(1225)  # same as partner.child('activity', 1225)

    :param str resource: singular name of the child resource, defaults to the attribute name
    """

    def __init__(self, resource=None, **kwargs):
        super(Child, self).__init__(**kwargs)
        self.resource = resource

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return partial(instance.child, self.resource or self.attribute)


class CollectionRoute(Route):
    """
    A ``GET`` route below the collection path returning a list of items, exposed as a class method.

    ::

        class Activity(Resource):
            active = CollectionRoute()

        Activity.active()  # GET activities/active

    :param str rule: path segment, defaults to the attribute name
    """

    def __init__(self, rule=None, **kwargs):
        super(CollectionRoute, self).__init__(**kwargs)
        self.rule = rule

    def rule_factory(self, resource, *args):
        return '/'.join([resource.collection_path(), self.rule or self.attribute] + [str(arg) for arg in args])

    def __get__(self, instance, owner):
        return partial(self.view, owner)

    def view(self, resource):
        results = resource.get_client().get(self.rule_factory(resource))
        return [resource(attributes) for attributes in results or ()]


class FinderRoute(CollectionRoute):
    """
    A ``GET`` route looking up a single item by an attribute value.

    ::

        class User(Resource):
            find_by_email = FinderRoute()

        User.find_by_email('aaron@birbl.com')  # GET users/find_by_email/aaron@birbl.com

    """

    def view(self, resource, value):
        return resource(resource.get_client().get(self.rule_factory(resource, value)))
