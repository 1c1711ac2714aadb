"""Configuration management for the housing listings core."""

from dataclasses import dataclass, field

from housing.exceptions import ConfigurationError

ENV_LOCAL = "local"
ENV_DEV = "dev"

# Logging defaults per environment: (level, format)
ENV_LOGGING = {
    ENV_LOCAL: ("DEBUG", "standard"),
    ENV_DEV: ("INFO", "json"),
}


@dataclass
class StoreConfig:
    """Relational store configuration."""

    storage_path: str = "storage.db"
    echo: bool = False
    timeout_seconds: float = 5.0

    @property
    def url(self) -> str:
        """Get SQLAlchemy URL for the configured path."""
        if "://" in self.storage_path:
            return self.storage_path
        return f"sqlite:///{self.storage_path}"


@dataclass
class ListingsConfig:
    """Main configuration for the listings core."""

    env: str = ENV_LOCAL
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str | None = None
    log_format: str | None = None

    @classmethod
    def from_env(cls) -> "ListingsConfig":
        """Create config from environment variables."""
        import os

        store = StoreConfig(
            storage_path=os.getenv("STORAGE_PATH", "storage.db"),
            echo=os.getenv("STORE_ECHO", "false").lower() == "true",
            timeout_seconds=float(os.getenv("STORE_TIMEOUT", "5")),
        )

        return cls(
            env=os.getenv("ENV", ENV_LOCAL),
            store=store,
            log_level=os.getenv("LOG_LEVEL") or None,
            log_format=os.getenv("LOG_FORMAT") or None,
        )

    def validate(self) -> None:
        """Raise ConfigurationError if the configuration cannot be used."""
        if self.env not in ENV_LOGGING:
            raise ConfigurationError(
                f"Unknown env {self.env!r}, expected one of {sorted(ENV_LOGGING)}"
            )
        if not self.store.storage_path.strip():
            raise ConfigurationError("Storage path is empty")
        if self.store.timeout_seconds <= 0:
            raise ConfigurationError("Store timeout must be positive")

    def logging_options(self) -> tuple[str, str]:
        """Return (level, format_type) for setup_logging."""
        level, format_type = ENV_LOGGING.get(self.env, ENV_LOGGING[ENV_DEV])
        return self.log_level or level, self.log_format or format_type
