"""
Pytest fixtures for FinanTech backend tests.

Provides an app on in-memory SQLite (seed catalog disabled), a test client,
the app's PosState and small product factories.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from finantech import create_app
from finantech.extensions import db
from finantech.models import Product
from finantech.services.state import get_state


def make_product(
    id: str = "P-1",
    name: str = "Kopi Kapal Api 165g",
    category: str = "Minuman",
    price="15000",
    cost_price="12000",
    stock: int = 50,
    min_stock: int = 10,
) -> Product:
    return Product(
        id=id,
        name=name,
        category=category,
        price=Decimal(str(price)),
        cost_price=Decimal(str(cost_price)),
        stock=stock,
        min_stock=min_stock,
    )


class FixedClock:
    """Deterministic clock for checkout; advances one minute per call."""

    def __init__(self, start: datetime = datetime(2026, 1, 5, 8, 0)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SEED_CATALOG_ENABLED': False,
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def state(app):
    return get_state()


@pytest.fixture(scope='function')
def kopi(state):
    """Coffee: price 15000, cost 12000, stock 50, min 10."""
    product = make_product()
    state.catalog.add(product)
    return product


@pytest.fixture(scope='function')
def minyak(state):
    """Cooking oil, already at low stock: 5 <= 10."""
    product = make_product(
        id="P-2",
        name="Minyak Goreng Filma 2L",
        category="Sembako",
        price="38000",
        cost_price="34000",
        stock=5,
        min_stock=10,
    )
    state.catalog.add(product)
    return product
