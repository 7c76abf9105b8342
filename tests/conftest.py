import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the persistence overlay and a signing secret for tokens.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("SOLESTORE_JWT_SECRET", "test-secret")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def shop_bed():
    from solestore.domain import shop

    bed = DomainFixture(shop)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(shop_bed):
    from solestore.domain import shop
    from solestore.utils.db import drop_db, setup_db

    setup_db(shop)

    yield

    drop_db(shop)


@pytest.fixture(autouse=True)
def run_around_tests(shop_bed):
    """Push the domain context for each test, cleanup after."""
    with shop_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
# Keeps account fixtures fast; production uses the settings default
HASH_ITERATIONS = 1000

_ADDRESS = {
    "street": "12 Market St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "USA",
}


@pytest.fixture()
def make_product():
    """Add a product to the catalogue and return it as persisted."""
    from protean import current_domain

    from solestore.catalogue.product.product import Product

    def _make(**overrides):
        values = {
            "name": "Trail Runner",
            "description": "Lightweight trail running shoe",
            "price": 20.0,
            "quantity": 5,
            "sizes": ["9", "10"],
            "color": "Black",
            "categories": ["Men"],
        }
        values.update(overrides)
        product = Product.add(**values)
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make


@pytest.fixture()
def make_user():
    """Register an account through the registration command and return it."""
    from protean import current_domain

    from solestore.identity.user.registration import RegisterUser
    from solestore.identity.user.user import Role, User

    counter = {"n": 0}

    def _make(role=Role.USER.value, password="Sneakers2024", **overrides):
        counter["n"] += 1
        values = {
            "username": f"shopper{counter['n']}",
            "email": f"shopper{counter['n']}@example.com",
            "password": password,
            "phone_number": "555-010-2030",
            "password_hash_iterations": HASH_ITERATIONS,
            **_ADDRESS,
        }
        values.update(overrides)
        user_id = current_domain.process(RegisterUser(**values), asynchronous=False)

        repo = current_domain.repository_for(User)
        user = repo.get(user_id)
        if role != Role.USER.value:
            user.change_role(role)
            repo.add(user)
        return repo.get(user_id)

    return _make


@pytest.fixture()
def address():
    return dict(_ADDRESS)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from solestore.settings import ShopSettings

    return ShopSettings(jwt_secret="test-secret", password_hash_iterations=HASH_ITERATIONS)


@pytest.fixture()
def app(settings):
    from solestore.api.app import create_app

    return create_app(settings)


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture()
def auth_headers(app):
    """Bearer headers for a given user."""

    def _headers(user):
        return {"Authorization": f"Bearer {app.state.tokens.issue(user)}"}

    return _headers
