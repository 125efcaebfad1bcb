"""Configuration management with environment variable support."""

import logging
import os
import secrets
from dataclasses import dataclass, field

from engine.rules import TableRules

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass(frozen=True)
class GameConfig:
    """Table configuration for new sessions."""

    starting_bankroll: int = field(
        default_factory=lambda: int(os.getenv("P77_STARTING_BANKROLL", "10000"))
    )
    max_bet: int = field(default_factory=lambda: int(os.getenv("P77_MAX_BET", "50")))

    def rules(self) -> TableRules:
        """Build the engine rules for this configuration."""
        return TableRules(
            starting_bankroll=self.starting_bankroll,
            max_bet=self.max_bet,
            cta_bet=min(TableRules.cta_bet, self.max_bet),
        )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Set the root log level and attach a stream handler if none exists.

    The state-machine library logs every transition at INFO; it is held at
    WARNING so requests stay quiet.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    logging.getLogger("transitions").setLevel(logging.WARNING)
    return root


# Global configuration instance
config = AppConfig()
