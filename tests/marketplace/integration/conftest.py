import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from marketplace.api import ROUTERS, register_error_handlers
from marketplace.identity.model import Customer, ShopOwner


def build_app() -> FastAPI:
    from marketplace.domain import marketplace

    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with marketplace.domain_context():
            return await call_next(request)

    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def app():
    return build_app()


@pytest.fixture()
def client(app, resolver):
    return TestClient(app)


@pytest.fixture()
def auth(resolver):
    """Factory: Authorization headers for an identity."""

    def _headers(identity):
        return {"Authorization": f"Bearer {resolver.issue_token(identity)}"}

    return _headers


@pytest.fixture()
def customer_headers(auth):
    return auth(Customer(id="cust-api-001"))


@pytest.fixture()
def owner_headers(auth):
    """Factory: headers for the owner of ``shop``."""

    def _headers(shop):
        return auth(ShopOwner(id=str(shop.id)))

    return _headers
