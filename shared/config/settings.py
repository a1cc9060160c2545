import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _default_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    host = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
    port = os.getenv("POSTGRES_PORT", "5432")
    name = os.getenv("POSTGRES_DB", "ecommerce")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"


@dataclass(frozen=True)
class Settings:
    """Process configuration, read from the environment (and .env) once at startup."""

    database_url: str = field(default_factory=_default_database_url)
    db_pool_size: int = field(default_factory=lambda: int(os.getenv("DB_POOL_SIZE", "10")))
    db_pool_timeout: float = field(default_factory=lambda: float(os.getenv("DB_POOL_TIMEOUT", "30")))
    db_echo: bool = field(default_factory=lambda: _flag("DB_ECHO", "false"))

    redis_url: str = field(default_factory=lambda: os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    user_cache_ttl: int = field(default_factory=lambda: int(os.getenv("USER_CACHE_TTL", "3600")))
    merchant_cache_ttl: int = field(default_factory=lambda: int(os.getenv("MERCHANT_CACHE_TTL", "3600")))
    # Products change more often than users and merchants
    product_cache_ttl: int = field(default_factory=lambda: int(os.getenv("PRODUCT_CACHE_TTL", "1800")))
    order_cache_ttl: int = field(default_factory=lambda: int(os.getenv("ORDER_CACHE_TTL", "1800")))

    user_service_url: str = field(default_factory=lambda: os.getenv("USER_SERVICE_URL", "http://user-service:8081"))
    merchant_service_url: str = field(
        default_factory=lambda: os.getenv("MERCHANT_SERVICE_URL", "http://merchant-service:8082")
    )
    product_service_url: str = field(
        default_factory=lambda: os.getenv("PRODUCT_SERVICE_URL", "http://product-service:8083")
    )
    lookup_timeout: float = field(default_factory=lambda: float(os.getenv("LOOKUP_TIMEOUT", "5.0")))

    otlp_endpoint: str = field(default_factory=lambda: os.getenv("OTLP_ENDPOINT", "http://localhost:4317"))
    tracing_enabled: bool = field(default_factory=lambda: _flag("TRACING_ENABLED"))
    metrics_enabled: bool = field(default_factory=lambda: _flag("METRICS_ENABLED"))

    @property
    def service_urls(self) -> dict[str, str]:
        return {
            "user": self.user_service_url,
            "merchant": self.merchant_service_url,
            "product": self.product_service_url,
        }
