"""
Root conftest for the pytest test suite.

Each test runs against a fresh in-memory SQLite database that is created
and torn down by an async, autouse fixture.

Key Fixtures:
- `initialize_test_db`: (autouse) Creates a fresh DB schema and the fixture users for each test.
- `app_for_testing`: Provides the FastAPI application instance with its production
  lifespan disabled so that `initialize_test_db` manages the test DB.
- `client`: Provides a non-authenticated TestClient.
- `admin_client`: Provides a TestClient authenticated as the admin fixture user.
- `customer_client`: Provides a TestClient authenticated as the customer fixture user.
- `admin_user` / `customer_user`: The fixture User objects.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tortoise import Tortoise

from order_analytics.features.auth.models import User
from order_analytics.features.auth.security import get_password_hash
from order_analytics.main import MODEL_MODULES, app as actual_app

ADMIN_USERNAME = "adminfixture"
ADMIN_PASSWORD = "adminpassword123"
CUSTOMER_USERNAME = "customerfixture"
CUSTOMER_PASSWORD = "customerpassword123"

TEST_DB_CONFIG = {
    "connections": {"default": "sqlite://:memory:"},
    "apps": {
        "models": {
            "models": MODEL_MODULES,
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}


async def add_admin_user() -> User:
    return await User.create(
        username=ADMIN_USERNAME,
        name="Admin Fixture",
        email="adminfixture@example.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role="admin",
    )


async def add_customer_user() -> User:
    return await User.create(
        username=CUSTOMER_USERNAME,
        name="Customer Fixture",
        email="customerfixture@example.com",
        hashed_password=get_password_hash(CUSTOMER_PASSWORD),
        role="customer",
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def initialize_test_db() -> AsyncGenerator[None, None]:
    """
    Initializes the database for each test function.

    Creates a fresh in-memory database and schema with one admin and one
    customer user, and closes the connections afterwards.
    """
    await Tortoise.init(config=TEST_DB_CONFIG)
    await Tortoise.generate_schemas()
    await add_customer_user()
    await add_admin_user()

    yield

    await Tortoise.close_connections()


@pytest_asyncio.fixture(scope="function")
async def admin_user() -> User:
    return await User.get(username=ADMIN_USERNAME)


@pytest_asyncio.fixture(scope="function")
async def customer_user() -> User:
    return await User.get(username=CUSTOMER_USERNAME)


@pytest.fixture(scope="function")
def app_for_testing() -> Generator[FastAPI, Any, None]:
    """
    Provides the FastAPI application with its production lifespan replaced,
    so that the test DB fixture owns the database connection.
    """
    original_lifespan = actual_app.router.lifespan_context

    @asynccontextmanager
    async def dummy_lifespan(app: FastAPI):
        yield

    actual_app.router.lifespan_context = dummy_lifespan

    yield actual_app

    # Restore the original lifespan context after the test
    actual_app.router.lifespan_context = original_lifespan


@pytest.fixture(scope="function")
def client(app_for_testing: FastAPI) -> Generator[TestClient, Any, None]:
    """
    Provides a non-authenticated starlette TestClient.
    """
    with TestClient(app_for_testing) as tc:
        yield tc


def _authenticated_client(app: FastAPI, username: str, password: str) -> Generator[TestClient, Any, None]:
    with TestClient(app) as tc:
        response = tc.post(
            "/api/v1/auth/token",
            data={"username": username, "password": password},
        )
        if response.status_code != 200:
            raise Exception(f"Authentication failed for {username}")

        auth_token = response.json()["access_token"]
        tc.headers = {"Authorization": f"Bearer {auth_token}"}
        yield tc


@pytest.fixture(scope="function")
def admin_client(app_for_testing: FastAPI) -> Generator[TestClient, Any, None]:
    """
    Provides a TestClient authenticated as the admin fixture user.
    """
    yield from _authenticated_client(app_for_testing, ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture(scope="function")
def customer_client(app_for_testing: FastAPI) -> Generator[TestClient, Any, None]:
    """
    Provides a TestClient authenticated as the customer fixture user.
    """
    yield from _authenticated_client(app_for_testing, CUSTOMER_USERNAME, CUSTOMER_PASSWORD)
