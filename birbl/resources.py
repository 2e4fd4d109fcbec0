from datetime import datetime

import aniso8601

from . import fields
from .resource import Resource, ValueObject
from .routes import Children, Child, CollectionRoute, FinderRoute


class Address(ValueObject):
    """
    A postal address. Owned by the resource it belongs to and serialized inline in that resource's ``address``.
    """

    class Schema:
        street = fields.String(nullable=True)
        street2 = fields.String(nullable=True)
        city = fields.String(nullable=True)
        region = fields.String(nullable=True)
        postal_code = fields.String(nullable=True)
        country = fields.String(nullable=True)
        latitude = fields.Number(nullable=True)
        longitude = fields.Number(nullable=True)


class Partner(Resource):
    activities = Children()
    activity = Child()

    find_by_email = FinderRoute()

    class Schema:
        name = fields.String(nullable=True)
        email = fields.Email(nullable=True)
        website = fields.String(nullable=True)
        description = fields.String(nullable=True)
        telephone = fields.String(nullable=True)
        address = fields.Nested(Address, nullable=True)
        activities = fields.Array(fields.Any(), io="r", nullable=True)


class Activity(Resource):
    reservations = Children()
    reservation = Child()

    active = CollectionRoute()

    class Schema:
        name = fields.String(nullable=True)
        description = fields.String(nullable=True)
        base_price = fields.Integer(minimum=0, nullable=True)
        minimum_price = fields.Integer(minimum=0, nullable=True)
        maximum_capacity = fields.PositiveInteger(nullable=True)
        minimum_participants = fields.PositiveInteger(nullable=True)
        variation_limit = fields.Integer(minimum=0, nullable=True)
        cost_per_participant = fields.Integer(minimum=0, nullable=True)
        fixed_costs = fields.Integer(minimum=0, nullable=True)
        digital_asset_urls = fields.Array(fields.String(), nullable=True)
        dates = fields.Any(io="r", nullable=True)
        partner_id = fields.Raw({"type": ["integer", "string"]}, nullable=True)
        address = fields.Nested(Address, nullable=True)
        reservations = fields.Array(fields.Any(), io="r", nullable=True)

    def reserve(self, date):
        """
        Reserves this activity for the given date and adds the reservation to :attr:`reservations`.

        :param date: a :class:`datetime.datetime` or an ISO 8601 date-time string
        :return: the new :class:`Reservation`
        """
        if not isinstance(date, datetime):
            date = aniso8601.parse_datetime(date)

        data = self.get_client().post('{}/reserve'.format(self.path()), {'date': date.isoformat()})
        return self.add_child('reservation', data, autocreate=False)


class Reservation(Resource):
    payment_due = CollectionRoute()

    class Schema:
        name = fields.String(nullable=True)
        date = fields.DateTimeString(nullable=True)
        state = fields.String(nullable=True)
        participants = fields.PositiveInteger(nullable=True)
        price = fields.Integer(minimum=0, nullable=True)
        activity_id = fields.Raw({"type": ["integer", "string"]}, nullable=True)
        user_id = fields.Raw({"type": ["integer", "string"]}, nullable=True)


class User(Resource):
    find_by_email = FinderRoute()

    class Schema:
        email = fields.Email()
        username = fields.String(nullable=True)
        first_name = fields.String(nullable=True)
        last_name = fields.String(nullable=True)
        address = fields.Nested(Address, nullable=True)

    class Meta:
        required_fields = ('email',)


RESOURCES = (Partner, Activity, Reservation, User)
