import hashlib
import hmac
import json
import os
import sys
import time
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('STRIPE_SECRET_KEY', 'sk_test_x')
os.environ.setdefault('STRIPE_WEBHOOK_SECRET', 'whsec_test_secret')
os.environ.setdefault('MAILTRAP_API_TOKEN', 'mt_test_token')

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import get_db  # noqa: E402
from app.integrations.stripe_gateway import StripeGateway, get_stripe_gateway  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Base, User  # noqa: E402

WEBHOOK_SECRET = 'whsec_test_secret'
BASIC_PRICE = 'price_1Q8GrCCQHfIPWrkpj21Uyewa'
PRO_PRICE = 'price_1Q8Gt3CQHfIPWrkpTXpuoabK'
PERIOD_START = 1727740800
PERIOD_END = 1730419200


class FakeStripeGateway(StripeGateway):
    """Real signature verification, canned subscription lookups."""

    def __init__(self):
        super().__init__(api_key='sk_test_x', webhook_secret=WEBHOOK_SECRET)
        self.subscriptions = {}
        self.retrieved = []

    def retrieve_subscription(self, subscription_id):
        self.retrieved.append(subscription_id)
        return self.subscriptions[subscription_id]


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode('utf-8')
    digest = hmac.new(secret.encode('utf-8'), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def make_event(event_type: str, obj: dict) -> bytes:
    return json.dumps(
        {
            'id': 'evt_test_1',
            'object': 'event',
            'type': event_type,
            'data': {'object': obj},
        }
    ).encode('utf-8')


def make_subscription(price_id: str = BASIC_PRICE, on_item: bool = True) -> dict:
    item = {'id': 'si_1', 'price': {'id': price_id}}
    subscription = {'id': 'sub_123', 'items': {'data': [item]}}
    period = {'current_period_start': PERIOD_START, 'current_period_end': PERIOD_END}
    if on_item:
        item.update(period)
    else:
        subscription.update(period)
    return subscription


@pytest.fixture
def db_session():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user(db_session):
    row = User(id='user_42', email='user42@example.com', name='User 42', points=0)
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def gateway():
    return FakeStripeGateway()


@pytest.fixture
def client(db_session, gateway):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
