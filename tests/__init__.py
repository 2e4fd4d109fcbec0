from collections import defaultdict
from copy import deepcopy
from pprint import pformat
from unittest import TestCase
from urllib.parse import urlsplit

from flask import Flask, json, jsonify, request, abort

from birbl import Api, Client
from birbl.exceptions import ItemNotFound
from birbl.naming import singularize


class RecordingClient(object):
    """
    A stand-in for :class:`birbl.Client` that records every call and answers from a dictionary of canned responses
    keyed by ``(method, path)``. Unanswered ``POST`` requests echo the payload with a new id; unanswered ``GET``
    requests raise :class:`ItemNotFound`. A canned response that is an exception is raised.
    """

    def __init__(self, responses=None):
        self.calls = []
        self.responses = dict(responses or {})
        self.id_sequence = 1000
        self.closed = False

    def _respond(self, method, path, payload=None):
        self.calls.append((method, path, payload))

        try:
            response = self.responses[(method, path)]
        except KeyError:
            if method == 'POST':
                self.id_sequence += 1
                return dict(payload or {}, id=self.id_sequence)
            if method == 'GET':
                raise ItemNotFound(method, path, status_code=404)
            return None

        if isinstance(response, Exception):
            raise response
        return deepcopy(response)

    def get(self, path):
        return self._respond('GET', path)

    def post(self, path, payload):
        return self._respond('POST', path, payload)

    def put(self, path, payload):
        return self._respond('PUT', path, payload)

    def delete(self, path):
        self._respond('DELETE', path)

    def close(self):
        self.closed = True

    def methods(self):
        return [method for method, path, payload in self.calls]

    def display_all(self):
        return 'Calls: {}'.format(pformat(self.calls))

    def assert_calls(self, expected):
        actual = [(method, path) for method, path, payload in self.calls]
        assert actual == expected, self.display_all()


class BaseTestCase(TestCase):
    """
    Registers ``resources`` with an :class:`Api` backed by a :class:`RecordingClient` and tears both down again.
    """
    resources = ()

    def setUp(self):
        super(BaseTestCase, self).setUp()
        self.client = RecordingClient()
        self.api = Api(self.client, self.resources)

    def tearDown(self):
        self.api.close()
        super(BaseTestCase, self).tearDown()

    def _without(self, dct, without):
        return {k: v for k, v in dct.items() if k not in without}

    def assertEqualWithout(self, first, second, without, msg=None):
        if isinstance(first, list) and isinstance(second, list):
            self.assertEqual(
                [self._without(v, without) for v in first],
                [self._without(v, without) for v in second],
                msg=msg
            )
        else:
            self.assertEqual(self._without(first, without), self._without(second, without), msg=msg)


class MemoryStore(object):
    """
    In-memory collections for the test API, keyed by collection name and item id.
    """

    def __init__(self):
        self.id_sequence = 0
        self.collections = defaultdict(dict)

    def _new_item_id(self):
        self.id_sequence += 1
        return self.id_sequence

    def instances(self, collection, where=None):
        items = self.collections[collection].values()
        if where:
            items = [item for item in items if all(item.get(k) == v for k, v in where.items())]
        return sorted(items, key=lambda item: item['id'])

    def create(self, collection, properties):
        item = dict(properties)
        item['id'] = self._new_item_id()
        self.collections[collection][item['id']] = item
        return item

    def read(self, collection, id):
        try:
            return self.collections[collection][id]
        except KeyError:
            abort(404)

    def update(self, collection, id, changes):
        item = self.read(collection, id)
        item.update(changes)
        return item

    def delete(self, collection, id):
        self.read(collection, id)
        del self.collections[collection][id]


def create_api_app(store):
    """
    A Flask application emulating the parts of the Birbl API used by the tests.
    """
    app = Flask(__name__)
    app.debug = True

    @app.route('/activities/active', methods=['GET'])
    def active_activities():
        return jsonify([item for item in store.instances('activities') if item.get('dates')])

    @app.route('/reservations/payment_due', methods=['GET'])
    def payment_due_reservations():
        return jsonify(store.instances('reservations', {'state': 'payment_due'}))

    @app.route('/<collection>/find_by_email/<email>', methods=['GET'])
    def find_by_email(collection, email):
        for item in store.instances(collection, {'email': email}):
            return jsonify(item)
        abort(404)

    @app.route('/activities/<int:id>/reserve', methods=['POST'])
    def reserve(id):
        store.read('activities', id)
        return jsonify(store.create('reservations', {
            'activity_id': id,
            'date': request.get_json()['date'],
            'state': 'opt_in'
        }))

    @app.route('/<collection>', methods=['GET'])
    def instances(collection):
        return jsonify(store.instances(collection))

    @app.route('/<collection>', methods=['POST'])
    def create(collection):
        return jsonify(store.create(collection, request.get_json()))

    @app.route('/<collection>/<int:id>', methods=['GET'])
    def read(collection, id):
        return jsonify(store.read(collection, id))

    @app.route('/<collection>/<int:id>', methods=['PUT'])
    def update(collection, id):
        return jsonify(store.update(collection, id, request.get_json()))

    @app.route('/<collection>/<int:id>', methods=['DELETE'])
    def destroy(collection, id):
        store.delete(collection, id)
        return '', 204

    @app.route('/<collection>/<int:id>/<relation>', methods=['GET'])
    def relation_instances(collection, id, relation):
        store.read(collection, id)
        return jsonify(store.instances(relation, {'{}_id'.format(singularize(collection)): id}))

    return app


class ApiResponse(object):
    def __init__(self, response):
        self.status_code = response.status_code
        self.content = response.get_data()
        self.text = response.get_data(as_text=True)

    def json(self):
        return json.loads(self.content)


class ApiSession(object):
    """
    Sends the requests of a :class:`birbl.Client` to a Flask application through its test client.
    """

    def __init__(self, app):
        self.test_client = app.test_client()
        self.headers = {}
        self.requests = []
        self.closed = False

    def request(self, method, url, json=None, timeout=None):
        path = urlsplit(url).path
        self.requests.append((method, path))
        return ApiResponse(self.test_client.open(path, method=method, json=json, headers=self.headers))

    def close(self):
        self.closed = True


class ApiTestCase(TestCase):
    """
    Registers ``resources`` with an :class:`Api` whose client talks to the in-memory test API.
    """
    resources = ()

    def setUp(self):
        super(ApiTestCase, self).setUp()
        self.store = MemoryStore()
        self.app = create_api_app(self.store)
        self.session = ApiSession(self.app)
        self.client = Client('development', {'BIRBL_DEV_URL': 'http://birbl.test'}, session=self.session)
        self.api = Api(self.client, self.resources)

    def tearDown(self):
        self.api.close()
        super(ApiTestCase, self).tearDown()
