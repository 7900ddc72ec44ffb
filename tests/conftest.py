import os
from datetime import UTC, datetime, timedelta
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
    """Select the configuration environment before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


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
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    """Run every test inside the domain context and start from empty stores."""
    from protean import current_domain

    from marketplace.notifications import reset_mailer

    with marketplace_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()

    reset_mailer()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    from marketplace.access import Actor, Role

    return Actor(id="cust-001", role=Role.CUSTOMER, name="Asha Rao", email="asha@example.com")


@pytest.fixture()
def other_customer():
    from marketplace.access import Actor, Role

    return Actor(id="cust-002", role=Role.CUSTOMER, name="Vikram Shah", email="vikram@example.com")


@pytest.fixture()
def admin():
    from marketplace.access import Actor, Role

    return Actor(id="admin-001", role=Role.ADMIN, name="Admin")


@pytest.fixture()
def vendor(store_id):
    from marketplace.access import Actor, Role

    return Actor(id="vendor-001", role=Role.VENDOR, store_id=store_id, name="Fresh Farms")


@pytest.fixture()
def other_vendor(other_store_id):
    from marketplace.access import Actor, Role

    return Actor(id="vendor-002", role=Role.VENDOR, store_id=other_store_id, name="City Mart")


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@pytest.fixture()
def store_id():
    from protean import current_domain

    from marketplace.catalogue.listing import RegisterStore

    return current_domain.process(
        RegisterStore(owner_id="vendor-001", name="Fresh Farms", pin_code="411001"),
        asynchronous=False,
    )


@pytest.fixture()
def other_store_id():
    from protean import current_domain

    from marketplace.catalogue.listing import RegisterStore

    return current_domain.process(
        RegisterStore(owner_id="vendor-002", name="City Mart"),
        asynchronous=False,
    )


@pytest.fixture()
def make_product(store_id):
    """Factory: list a product and return its id."""
    from protean import current_domain

    from marketplace.catalogue.listing import ListProduct

    def _make(name="Alphonso Mangoes", price=100.0, stock=10, unit="kg", store=None, image=None):
        return current_domain.process(
            ListProduct(
                store_id=store or store_id,
                name=name,
                image=image,
                price=price,
                unit=unit,
                stock=stock,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_coupon():
    """Factory: create a coupon and return its id."""
    from protean import current_domain

    from marketplace.coupon.management import CreateCoupon

    def _make(code="SAVE10", discount_type="percentage", discount_value=10.0, **overrides):
        fields = {
            "code": code,
            "discount_type": discount_type,
            "discount_value": discount_value,
            "expiry_date": datetime.now(UTC) + timedelta(days=30),
        }
        fields.update(overrides)
        return current_domain.process(CreateCoupon(**fields), asynchronous=False)

    return _make


@pytest.fixture()
def address():
    return {
        "house_no": "12B",
        "landmark": "Near the temple",
        "city": "Pune",
        "state": "MH",
        "pin_code": "411001",
    }


@pytest.fixture()
def fake_mailer():
    from marketplace.notifications import get_mailer

    return get_mailer()
