from collections import OrderedDict

from .utils import canonical_key


class Relation(object):
    """
    The cached children of one relation. ``items`` is the list handed out to callers; it is only ever appended to so
    that repeated lookups return the same object.
    """
    __slots__ = ('items', 'resolved')

    def __init__(self):
        self.items = []
        self.resolved = False

    def __repr__(self):
        return '<Relation items={} resolved={}>'.format(len(self.items), self.resolved)


class ChildGraph(object):
    """
    Per-instance memo of child resources, keyed by plural relation name.

    A relation is *resolved* once it has been loaded from the API. With ``refetch_empty=True`` resolution is inferred
    from the entry being non-empty instead, so a relation without children is fetched again on every access.
    """

    def __init__(self, refetch_empty=False):
        self.refetch_empty = refetch_empty
        self._relations = OrderedDict()

    def _relation(self, name):
        key = canonical_key(name)
        try:
            return self._relations[key]
        except KeyError:
            self._relations[key] = relation = Relation()
            return relation

    def __contains__(self, name):
        return canonical_key(name) in self._relations

    def __iter__(self):
        return iter(self._relations)

    def __getitem__(self, name):
        return self._relation(name).items

    def is_resolved(self, name):
        if name not in self:
            return False
        relation = self._relation(name)
        if self.refetch_empty:
            return bool(relation.items)
        return relation.resolved

    def mark_resolved(self, name):
        self._relation(name).resolved = True

    def append(self, name, child):
        self._relation(name).items.append(child)
        return child

    def find(self, name, id):
        """
        Scans the cached children of a relation for an item with the given id. Never loads anything.
        """
        if name not in self:
            return None
        for child in self._relation(name).items:
            if child.id is not None and str(child.id) == str(id):
                return child
        return None

    def reset(self, name=None):
        if name is None:
            self._relations.clear()
        else:
            self._relations.pop(canonical_key(name), None)
