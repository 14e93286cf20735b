"""
Pytest fixtures for the VentasPro ledger tests.

Provides the test database, a test client and product factories.
"""

import pytest
from ventaspro import create_app
from ventaspro.extensions import db
from ventaspro.services import products_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'WRITE_RETRY_ATTEMPTS': 1,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: create an active product and return its id."""
    def _make(name="Empanada", price="2.50", stock=10, image=None):
        return products_service.add_product(name=name, price=price, initial_stock=stock, image=image)
    return _make


@pytest.fixture(scope='function')
def product_a(make_product):
    """Product A: price 10.00, stock 5."""
    return make_product(name="Product A", price="10.00", stock=5)


@pytest.fixture(scope='function')
def product_b(make_product):
    """Product B: price 4.00, out of stock."""
    return make_product(name="Product B", price="4.00", stock=0)
