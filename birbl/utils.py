from collections.abc import MutableMapping
from types import MethodType


def canonical_key(key):
    """
    Returns the canonical form of an attribute key. Keys may be strings in any case or any object with a ``name``
    attribute, such as an :class:`enum.Enum` member.
    """
    if not isinstance(key, str):
        key = getattr(key, 'name', key)
    return str(key).lower()


class AttributeDict(dict):
    __getattr__ = dict.__getitem__
    __setattr__ = dict.__setitem__


class AttributeBag(MutableMapping):
    """
    A mapping of attribute names to values. Keys are matched case-insensitively and attribute-style access is
    equivalent to item access. Missing keys resolve to ``None``.

    >>> bag = AttributeBag()
    >>> bag['Name'] = 'Yoga'
    >>> bag.name, bag.get('NAME')
    ('Yoga', 'Yoga')
    """

    def __init__(self, data=None):
        object.__setattr__(self, '_data', {})
        if data:
            self.update(data)

    def __getitem__(self, key):
        return self._data[canonical_key(key)]

    def __setitem__(self, key, value):
        self._data[canonical_key(key)] = value

    def __delitem__(self, key):
        del self._data[canonical_key(key)]

    def __contains__(self, key):
        return canonical_key(key) in self._data

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __getattr__(self, name):
        if name.startswith('__'):
            raise AttributeError(name)
        return self._data.get(canonical_key(name))

    def __setattr__(self, name, value):
        self[name] = value

    def get(self, key, default=None):
        return self._data.get(canonical_key(key), default)

    def as_dict(self):
        """
        Returns a plain ``dict`` copy for serialization. Owned value objects (anything with an ``as_json()``
        method) are left out; their owner serializes them under their own key.
        """
        return {key: value for key, value in self._data.items() if not hasattr(value, 'as_json')}

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self._data)


class hybridmethod(object):
    """
    A method with separate implementations when called on the class and on an instance.

    ::

        class Resource(object):
            @hybridmethod
            def delete(cls, id):
                ...

            @delete.instancemethod
            def delete(self):
                ...

    """

    def __init__(self, classmethod_func, instancemethod_func=None):
        self.classmethod_func = classmethod_func
        self.instancemethod_func = instancemethod_func
        self.__doc__ = classmethod_func.__doc__

    def instancemethod(self, func):
        self.instancemethod_func = func
        return self

    def __get__(self, instance, owner):
        if instance is None or self.instancemethod_func is None:
            return MethodType(self.classmethod_func, owner)
        return MethodType(self.instancemethod_func, instance)
