from typing import TypeVar, Type, Dict, Any, Callable
from functools import lru_cache
import logging

import boto3
from flask import current_app

from shopfront.core.config import Config
from shopfront.core.security import PasswordHasher, TokenService
from shopfront.repositories.image_store import ImageStore, InMemoryImageStore, S3ImageStore
from shopfront.repositories.product_repository import (
    DynamoProductRepository, InMemoryProductRepository, ProductRepository
)
from shopfront.repositories.token_repository import (
    DynamoTokenRepository, InMemoryTokenRepository, TokenRepository
)
from shopfront.repositories.user_repository import (
    DynamoUserRepository, InMemoryUserRepository, UserRepository
)
from shopfront.services.auth_service import AuthService
from shopfront.services.image_service import ImageUploadService
from shopfront.services.product_service import ProductService

T = TypeVar('T')

logger = logging.getLogger(__name__)

CONTAINER_EXTENSION = "shopfront.container"


class DependencyContainer:
    """Type-keyed registry of the process-wide stores, primitives and flows"""

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._factories: Dict[str, Callable] = {}

    def register_singleton(self, service_class: Type[T], instance: T) -> None:
        """Register a ready-made instance"""
        key = self._key(service_class)
        self._services[key] = instance

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        """Register a zero-argument factory, resolved lazily on first get"""
        key = self._key(service_class)
        self._factories[key] = factory

    def get(self, service_class: Type[T]) -> T:
        """Resolve a registered instance; factories run once and are then cached"""
        key = self._key(service_class)
        if key not in self._services:
            if key not in self._factories:
                raise ValueError(f"Service {service_class.__name__} not registered")
            self._services[key] = self._factories[key]()
        return self._services[key]

    @staticmethod
    def _key(service_class: type) -> str:
        return f"{service_class.__module__}.{service_class.__qualname__}"


def _register_dynamodb_stores(container: DependencyContainer, config: Config) -> None:
    storage = config.storage
    client_kwargs = {"region_name": storage.region}
    if storage.endpoint_url:
        client_kwargs["endpoint_url"] = storage.endpoint_url

    # One client per service for the lifetime of the process
    dynamodb = boto3.client("dynamodb", **client_kwargs)
    s3 = boto3.client("s3", **client_kwargs)

    container.register_singleton(UserRepository, DynamoUserRepository(
        dynamodb,
        table_name=storage.users_table,
        username_index=storage.username_index,
        phone_number_index=storage.phone_number_index,
    ))
    container.register_singleton(TokenRepository, DynamoTokenRepository(dynamodb, storage.auth_tokens_table))
    container.register_singleton(ProductRepository, DynamoProductRepository(dynamodb, storage.products_table))
    container.register_singleton(ImageStore, S3ImageStore(s3, storage.product_bucket, storage.public_asset_base_url))


def _register_memory_stores(container: DependencyContainer, config: Config) -> None:
    storage = config.storage
    container.register_singleton(UserRepository, InMemoryUserRepository())
    container.register_singleton(TokenRepository, InMemoryTokenRepository())
    container.register_singleton(ProductRepository, InMemoryProductRepository())
    container.register_singleton(ImageStore, InMemoryImageStore(storage.product_bucket, storage.public_asset_base_url))


def build_container(config: Config) -> DependencyContainer:
    """Construct stores, security primitives and flows once for the process"""
    container = DependencyContainer()
    container.register_singleton(Config, config)

    if config.storage.backend == "memory":
        _register_memory_stores(container, config)
    else:
        _register_dynamodb_stores(container, config)
    logger.info(f"Using '{config.storage.backend}' storage backend")

    security = config.security
    container.register_singleton(PasswordHasher, PasswordHasher(security.password_hash_rounds))
    container.register_singleton(TokenService, TokenService(
        secret_key=security.jwt_secret_key,
        algorithm=security.jwt_algorithm,
        expiration_hours=security.jwt_expiration_hours,
        previous_secret_keys=security.jwt_previous_secret_keys,
    ))

    container.register_factory(AuthService, lambda: AuthService(
        container.get(UserRepository),
        container.get(TokenRepository),
        container.get(PasswordHasher),
        container.get(TokenService),
    ))
    container.register_factory(ProductService, lambda: ProductService(container.get(ProductRepository)))
    container.register_factory(ImageUploadService, lambda: ImageUploadService(
        container.get(ProductService),
        container.get(ImageStore),
        allowed_types=config.upload.allowed_image_types,
        chunk_size=config.upload.chunk_size,
    ))
    return container


@lru_cache()
def get_config() -> Config:
    """Process-wide configuration loaded from the environment"""
    config = Config.from_env()
    config.validate()
    return config


def get_container() -> DependencyContainer:
    """Dependency container of the current Flask application"""
    return current_app.extensions[CONTAINER_EXTENSION]
