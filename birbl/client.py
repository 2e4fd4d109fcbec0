import logging
import os

import requests

from .exceptions import ConfigurationError, TransportError, error_for_status

logger = logging.getLogger(__name__)

PRODUCTION_URL = 'https://api.birbl.com'
SANDBOX_URL = 'https://sandbox.birbl.com'

ENVIRONMENTS = ('production', 'development')


class Client(object):
    """
    The transport used by every resource registered with an :class:`birbl.Api`. Performs blocking JSON requests
    against one Birbl endpoint and returns decoded response bodies.

    Configuration is read once, when the client is created:

    =====================  ==============================  =================================================
    Key                    Default                         Description
    =====================  ==============================  =================================================
    BIRBL_USE_SANDBOX      ``False``                       Use the sandbox endpoint in ``production``
    BIRBL_DEV_URL          ``None``                        Endpoint used in ``development``; required there
    BIRBL_TIMEOUT          ``30``                          Request timeout in seconds
    =====================  ==============================  =================================================

    :param str environment: ``'production'`` or ``'development'``
    :param dict config: optional configuration values
    :param session: an optional :class:`requests.Session`
    """

    def __init__(self, environment='production', config=None, session=None):
        if environment not in ENVIRONMENTS:
            raise ConfigurationError('Unknown environment "{}"; expected one of {}'.format(
                environment, ', '.join(ENVIRONMENTS)))

        self.environment = environment
        self.config = config = dict(config or {})
        config.setdefault('BIRBL_USE_SANDBOX', False)
        config.setdefault('BIRBL_DEV_URL', None)
        config.setdefault('BIRBL_TIMEOUT', 30)

        if environment == 'development' and not config['BIRBL_DEV_URL']:
            raise ConfigurationError('BIRBL_DEV_URL must be set in the development environment')

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    @classmethod
    def from_env(cls, environ=None, **kwargs):
        """
        Creates a client configured from ``BIRBL_*`` environment variables. ``BIRBL_ENV`` selects the environment.
        """
        environ = os.environ if environ is None else environ
        config = {}

        if 'BIRBL_USE_SANDBOX' in environ:
            config['BIRBL_USE_SANDBOX'] = environ['BIRBL_USE_SANDBOX'].lower() in ('1', 'true', 'yes', 'on')
        if 'BIRBL_DEV_URL' in environ:
            config['BIRBL_DEV_URL'] = environ['BIRBL_DEV_URL']
        if 'BIRBL_TIMEOUT' in environ:
            config['BIRBL_TIMEOUT'] = float(environ['BIRBL_TIMEOUT'])

        return cls(environ.get('BIRBL_ENV', 'production'), config=config, **kwargs)

    @property
    def use_sandbox(self):
        return self.config['BIRBL_USE_SANDBOX']

    @property
    def dev_url(self):
        return self.config['BIRBL_DEV_URL']

    @property
    def base_url(self):
        if self.environment == 'development':
            return self.dev_url
        return SANDBOX_URL if self.use_sandbox else PRODUCTION_URL

    def url(self, path):
        return '{}/{}'.format(self.base_url.rstrip('/'), str(path).lstrip('/'))

    def request(self, method, path, payload=None):
        """
        Performs a request and returns the decoded JSON body, or ``None`` for an empty body.

        :raises TransportError: on connection errors and non-2xx responses
        """
        url = self.url(path)

        try:
            response = self.session.request(method, url, json=payload, timeout=self.config['BIRBL_TIMEOUT'])
        except requests.RequestException as e:
            logger.debug('%s %s failed: %s', method, url, e)
            raise TransportError(method, url, message=str(e)) from e

        logger.debug('%s %s -> %s', method, url, response.status_code)

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text

        if not 200 <= response.status_code < 300:
            raise error_for_status(response.status_code)(method, url,
                                                         status_code=response.status_code,
                                                         response=body)
        return body

    def get(self, path):
        return self.request('GET', path)

    def post(self, path, payload):
        return self.request('POST', path, payload)

    def put(self, path, payload):
        return self.request('PUT', path, payload)

    def delete(self, path):
        self.request('DELETE', path)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def __repr__(self):
        return '<Client {}>'.format(self.base_url)
