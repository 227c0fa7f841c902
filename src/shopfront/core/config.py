import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


@dataclass
class StorageConfig:
    """Key-value and object store settings"""
    backend: str = "dynamodb"  # dynamodb, memory
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None  # LocalStack or other emulators
    users_table: str = "users"
    auth_tokens_table: str = "auth_tokens"
    products_table: str = "products"
    username_index: str = "UsernameIndex"
    phone_number_index: str = "PhoneNumberIndex"
    product_bucket: str = "product-bucket"
    public_asset_base_url: str = "http://localhost:4566"


@dataclass
class SecurityConfig:
    """Security-related configuration"""
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_previous_secret_keys: Tuple[str, ...] = ()
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    password_hash_rounds: int = 10


@dataclass
class UploadConfig:
    """Product image upload limits"""
    max_upload_mb: int = 10
    allowed_image_types: Tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")
    chunk_size: int = 64 * 1024

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@dataclass
class AppConfig:
    """Application configuration"""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"


@dataclass
class Config:
    environment: str = "development"  # development, staging, production
    storage: StorageConfig = field(default_factory=StorageConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    app: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Build configuration from environment variables (and a .env file if present)"""
        load_dotenv()

        previous_keys = os.getenv("JWT_PREVIOUS_SECRET_KEYS", "")
        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            storage=StorageConfig(
                backend=os.getenv("STORAGE_BACKEND", "dynamodb").lower(),
                region=os.getenv("AWS_REGION", "us-east-1"),
                endpoint_url=os.getenv("AWS_ENDPOINT_URL") or None,
                users_table=os.getenv("USERS_TABLE_NAME", "users"),
                auth_tokens_table=os.getenv("AUTH_TOKENS_TABLE_NAME", "auth_tokens"),
                products_table=os.getenv("PRODUCT_TABLE_NAME", "products"),
                username_index=os.getenv("USERNAME_INDEX_NAME", "UsernameIndex"),
                phone_number_index=os.getenv("PHONE_NUMBER_INDEX_NAME", "PhoneNumberIndex"),
                product_bucket=os.getenv("PRODUCT_BUCKET_NAME", "product-bucket"),
                public_asset_base_url=os.getenv("PUBLIC_ASSET_BASE_URL", "http://localhost:4566"),
            ),
            security=SecurityConfig(
                jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
                jwt_previous_secret_keys=tuple(k.strip() for k in previous_keys.split(",") if k.strip()),
                jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
                jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "24")),
                password_hash_rounds=int(os.getenv("PASSWORD_HASH_ROUNDS", "10")),
            ),
            upload=UploadConfig(
                max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10")),
            ),
            app=AppConfig(
                debug=os.getenv("DEBUG", "false").lower() == "true",
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "5000")),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
            ),
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> None:
        """Validate critical configuration"""
        if self.is_production and self.security.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")

        if not self.security.jwt_secret_key:
            raise ValueError("JWT_SECRET_KEY cannot be empty")

        if self.storage.backend not in ("dynamodb", "memory"):
            raise ValueError(f"Unsupported STORAGE_BACKEND: {self.storage.backend}")

        # bcrypt accepts cost factors between 4 and 31
        if not 4 <= self.security.password_hash_rounds <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
