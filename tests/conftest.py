import pytest
from datetime import timedelta
from faker import Faker
from flask_jwt_extended import create_access_token

from estatedesk import create_app
from estatedesk.billing.gateway import PaymentRequestResult, VerificationResult
from estatedesk.domain.billing import utcnow
from estatedesk.domain.subscriptions import PaymentStatus, Plan, SubscriptionStatus, price_in_rials
from estatedesk.extensions import db as _db
from estatedesk.models import AdminOfficeAssignment, Office, PaymentRecord, Subscription, User
from estatedesk.security.roles import Role

# Initialize Faker for generating test data
fake = Faker()


class FakeGateway:
    """In-memory stand-in for the payment gateway. Records every call."""

    def __init__(self):
        self.request_result = PaymentRequestResult(
            success=True,
            authority="A000000001234",
            pay_url="https://www.zarinpal.com/pg/StartPay/A000000001234",
        )
        self.verify_result = VerificationResult(success=True, ref_id="REF1")
        self.verify_side_effect = None
        self.request_calls = []
        self.verify_calls = []

    def request_payment(self, plan, callback_url):
        self.request_calls.append((plan, callback_url))
        return self.request_result

    def verify_payment(self, plan, authority):
        self.verify_calls.append((plan, authority))
        if self.verify_side_effect is not None:
            self.verify_side_effect(plan, authority)
        return self.verify_result


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(gateway):
    """Application on an in-memory database with the fake gateway installed"""
    app = create_app("testing")
    app.extensions["payment_gateway"] = gateway

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_office(db):
    """Factory for an office with its subscription"""

    def _make_office(
        name=None,
        plan=Plan.TRIAL,
        status=SubscriptionStatus.ACTIVE,
        current_period_end=None,
        trial_ends_at=None,
        created_at=None,
    ):
        office = Office(name=name or fake.company(), city=fake.city())
        if created_at is not None:
            office.created_at = created_at
        office.subscription = Subscription(
            plan=Plan(plan).value,
            status=SubscriptionStatus(status).value,
            current_period_end=current_period_end,
            trial_ends_at=trial_ends_at,
        )
        db.session.add(office)
        db.session.commit()
        return office

    return _make_office


@pytest.fixture
def make_payment(db):
    """Factory for a payment record"""

    def _make_payment(office, plan=Plan.SMALL, authority=None, status=PaymentStatus.PENDING):
        record = PaymentRecord(
            office_id=office.id,
            plan=Plan(plan).value,
            amount=price_in_rials(plan),
            authority=authority or f"A{fake.random_number(digits=12, fix_len=True)}",
            status=PaymentStatus(status).value,
        )
        db.session.add(record)
        db.session.commit()
        return record

    return _make_payment


@pytest.fixture
def make_user(db):
    """Factory for a user profile"""

    def _make_user(role=Role.AGENT, office=None):
        user = User(
            username=fake.unique.user_name()[:32],
            display_name=fake.name(),
            email=fake.email(),
            role=Role(role).value,
            office_id=office.id if office else None,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def assign(db):
    def _assign(admin, *offices):
        for office in offices:
            db.session.add(AdminOfficeAssignment(admin_user_id=admin.id, office_id=office.id))
        db.session.commit()

    return _assign


@pytest.fixture
def auth_headers(app):
    """Bearer headers for a token as issued by the auth provider"""

    def _auth_headers(role, user_id=None, office_id=None):
        claims = {"role": Role(role).value}
        if office_id is not None:
            claims["office_id"] = office_id
        token = create_access_token(
            identity=user_id or fake.uuid4(),
            additional_claims=claims,
            expires_delta=timedelta(hours=1),
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def now():
    return utcnow()
