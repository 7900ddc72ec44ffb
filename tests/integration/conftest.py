import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from marketplace.api import cart_router, coupon_router, order_router, register_error_handlers, wishlist_router
from marketplace.domain import marketplace


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with marketplace.domain_context():
            return await call_next(request)

    app.include_router(cart_router)
    app.include_router(wishlist_router)
    app.include_router(coupon_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


def _headers(actor):
    headers = {"X-Actor-Id": actor.id, "X-Actor-Role": actor.role.value}
    if actor.store_id:
        headers["X-Store-Id"] = actor.store_id
    if actor.name:
        headers["X-Actor-Name"] = actor.name
    if actor.email:
        headers["X-Actor-Email"] = actor.email
    return headers


@pytest.fixture()
def as_customer(customer):
    return _headers(customer)


@pytest.fixture()
def as_other_customer(other_customer):
    return _headers(other_customer)


@pytest.fixture()
def as_vendor(vendor):
    return _headers(vendor)


@pytest.fixture()
def as_other_vendor(other_vendor):
    return _headers(other_vendor)


@pytest.fixture()
def as_admin(admin):
    return _headers(admin)
