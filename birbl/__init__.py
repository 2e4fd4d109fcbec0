import logging

from .client import Client
from .exceptions import ConfigurationError, UnknownRelation
from .naming import singularize
from .resource import Resource, ValueObject
from .utils import canonical_key

__all__ = (
    'Api',
    'Client',
    'Resource',
    'ValueObject',
    'connect',
    'client',
    'exceptions',
    'fields',
    'graph',
    'naming',
    'resources',
    'routes',
    'schema',
    'signals',
)

logger = logging.getLogger(__name__)


class Api(object):
    """
    The registry that binds resource classes to a :class:`Client`.

    Every resource registered with an :class:`Api` uses its client for all requests, and child relations are
    resolved to resource classes by looking up their singular name in :attr:`resources`. A resource class can only
    be registered with one :class:`Api` at a time; :meth:`close` releases the client and the resources.

    :param Client client: an optional client; may also be set later using :meth:`init_client`
    :param resources: optional resource classes to register
    """

    def __init__(self, client=None, resources=None):
        self.client = None
        self.resources = {}

        for resource in resources or ():
            self.add_resource(resource)

        if client is not None:
            self.init_client(client)

    def init_client(self, client):
        if self.client is not None and self.client is not client:
            raise ConfigurationError('Api is already initialized with {!r}'.format(self.client))
        self.client = client
        logger.debug('Api initialized with %r', client)

    def add_resource(self, resource):
        """
        Register a :class:`Resource` class with the API.

        :param Resource resource: resource
        """
        # prevent resources from being added twice
        if resource in self.resources.values():
            return

        if resource.api is not None and resource.api is not self:
            raise RuntimeError("Attempted to register a resource that is already registered with a different Api.")

        resource.api = self
        self.resources[resource.meta.name] = resource

    def resource(self, name):
        """
        :param str name: singular or plural resource name
        :return: the registered resource class
        :raises UnknownRelation: if no resource is registered with that name
        """
        name = canonical_key(name)
        for key in (name, singularize(name)):
            if key in self.resources:
                return self.resources[key]
        raise UnknownRelation(name)

    def close(self):
        """
        Closes the client and unregisters all resources.
        """
        if self.client is not None:
            self.client.close()
            self.client = None

        for resource in self.resources.values():
            resource.api = None
        self.resources = {}

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()


def connect(environment='production', config=None, session=None):
    """
    Creates an :class:`Api` with a new :class:`Client` and all built-in resources registered.

    ::

        with birbl.connect('development', {'BIRBL_DEV_URL': 'http://localhost:8080'}) as api:
            partner = Partner.find(456)

    """
    from .resources import RESOURCES
    return Api(Client(environment, config=config, session=session), RESOURCES)
