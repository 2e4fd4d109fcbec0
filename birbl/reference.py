from importlib import import_module
import inspect

from .exceptions import UnknownRelation


class ResourceReference(object):
    """
    A reference to a resource class by name, resolved lazily so that relations can name resources that are
    registered later.
    """

    def __init__(self, value):
        self.value = value

    def resolve(self, binding=None):
        """
        Returns the :class:`Resource` class the reference points to.

        The value may be a resource class, ``'self'``, the singular name of a resource registered with the
        :class:`Api` of ``binding``, or a dotted ``module.ClassName`` path.

        :raises UnknownRelation: if the value cannot be resolved
        """
        name = self.value

        if name == 'self':
            return binding

        from .resource import Resource
        if inspect.isclass(name) and issubclass(name, Resource):
            return name

        api = getattr(binding, 'api', None)
        if api is not None and name in api.resources:
            return api.resources[name]

        if '.' in name:
            module_name, class_name = name.rsplit('.', 1)
            try:
                return getattr(import_module(module_name), class_name)
            except (ImportError, AttributeError):
                pass

        raise UnknownRelation(name)

    def __repr__(self):
        return "<ResourceReference '{}'>".format(self.value)
