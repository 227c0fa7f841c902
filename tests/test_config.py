import pytest

from shopfront.app import create_app
from shopfront.core.config import DEFAULT_JWT_SECRET, Config, SecurityConfig, StorageConfig


def test_from_env_reads_storage_and_security_settings(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("PRODUCT_BUCKET_NAME", "images")
    monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localhost:4566")
    monkeypatch.setenv("JWT_SECRET_KEY", "rotated-secret-value-long-enough-1")
    monkeypatch.setenv("JWT_PREVIOUS_SECRET_KEYS", "old-one, old-two ,")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "12")

    config = Config.from_env()

    assert config.storage.backend == "memory"
    assert config.storage.product_bucket == "images"
    assert config.storage.endpoint_url == "http://localhost:4566"
    assert config.security.jwt_secret_key == "rotated-secret-value-long-enough-1"
    assert config.security.jwt_previous_secret_keys == ("old-one", "old-two")
    assert config.security.password_hash_rounds == 12
    assert config.security.jwt_expiration_hours == 24


def test_production_requires_a_real_signing_secret():
    config = Config(environment="production", security=SecurityConfig(jwt_secret_key=DEFAULT_JWT_SECRET))

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        config.validate()


@pytest.mark.parametrize("config", [
    Config(storage=StorageConfig(backend="postgres")),
    Config(security=SecurityConfig(password_hash_rounds=2)),
])
def test_invalid_settings_are_rejected(config):
    with pytest.raises(ValueError):
        config.validate()


def test_upload_limit_comes_from_config(config):
    config.upload.max_upload_mb = 3
    app = create_app(config)

    assert app.config["MAX_CONTENT_LENGTH"] == 3 * 1024 * 1024


def test_oversized_upload_is_rejected(app, client, auth_headers):
    product = client.post("/product", json={"name": "Lamp"}, headers=auth_headers).get_json()
    app.config["MAX_CONTENT_LENGTH"] = 1024

    response = client.post(
        f"/product/{product['id']}/image",
        data=b"x" * 4096,
        content_type="multipart/form-data; boundary=abc",
        headers=auth_headers,
    )

    assert response.status_code == 413
    assert "errorMessage" in response.get_json()
