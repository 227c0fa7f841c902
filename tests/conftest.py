import pytest
from dateutil.relativedelta import relativedelta

from shopfront.app import create_app
from shopfront.core.config import Config, SecurityConfig, StorageConfig
from shopfront.core.dependencies import CONTAINER_EXTENSION
from shopfront.utils.date_utils import DateUtils

TEST_SECRET = "test-signing-secret-that-is-long-enough"


def dob_years_ago(years: int) -> str:
    return (DateUtils.today_utc() - relativedelta(years=years)).isoformat()


@pytest.fixture
def config():
    return Config(
        environment="testing",
        storage=StorageConfig(backend="memory"),
        security=SecurityConfig(jwt_secret_key=TEST_SECRET, password_hash_rounds=4),
    )


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def container(app):
    return app.extensions[CONTAINER_EXTENSION]


@pytest.fixture
def signup_payload():
    return {
        "username": "alice",
        "phoneNumber": "+1-2345678901",
        "dob": dob_years_ago(30),
        "password": "Abcdefg1",
    }


@pytest.fixture
def registered_user(client, signup_payload):
    response = client.post("/signup", json=signup_payload)
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture
def auth_headers(client, registered_user, signup_payload):
    response = client.post(
        "/signin",
        json={"username": signup_payload["username"], "password": signup_payload["password"]},
    )
    assert response.status_code == 200
    return {"Authorization": response.headers["Authorization"]}
