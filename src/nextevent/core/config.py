"""Configuration management for the NextEvent SDK"""

import os
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv
from loguru import logger

from nextevent.shared.exceptions import ConfigurationError

DEFAULT_ENVIRONMENT = "PROD"


class Env:
    """Registry of service URLs and variables per NextEvent environment

    The active environment is process wide. ``DEV`` has no defaults and is
    meant to be filled with ``set_var`` for local service stacks.
    """

    _environment = DEFAULT_ENVIRONMENT
    _defaults: dict[str, dict[str, Any]] = {
        "PROD": {
            "iam_service_url": "https://iam.nextevent.com/",
            "payment_service_url": "https://payment.nextevent.com/",
        },
        "TEST": {
            "iam_service_url": "https://iam.test.nextevent.com/",
            "payment_service_url": "https://payment.test.nextevent.com/",
        },
        "INT": {
            "iam_service_url": "https://iam.int.nextevent.com/",
            "payment_service_url": "https://payment.int.nextevent.com/",
        },
        "DEV": {},
    }
    _variables: dict[str, dict[str, Any]] = {
        env: dict(values) for env, values in _defaults.items()
    }

    @classmethod
    def set_env(cls, environment: str) -> None:
        """Switch the active environment (PROD, INT, TEST or DEV)"""
        environment = environment.upper()
        if environment not in cls._variables:
            raise ConfigurationError(f"Unknown environment: {environment}")
        cls._environment = environment

    @classmethod
    def get_env(cls) -> str:
        return cls._environment

    @classmethod
    def set_var(
        cls, key: str, value: Any, environment: str | None = "*"
    ) -> None:
        """Set a variable for one environment, or for all with ``*``

        ``None`` targets the active environment.
        """
        if environment is None:
            environment = cls._environment
        if environment == "*":
            for variables in cls._variables.values():
                variables[key] = value
        else:
            cls._variables.setdefault(environment.upper(), {})[key] = value

    @classmethod
    def get_var(cls, key: str) -> Any:
        return cls._variables.get(cls._environment, {}).get(key)

    @classmethod
    def verify_tls(cls) -> bool:
        """TLS verification is disabled for TEST and DEV service stacks"""
        return cls._environment not in ("TEST", "DEV")

    @classmethod
    def default_headers(cls) -> dict[str, str]:
        """Headers shared by all service clients"""
        headers = {"Accept": "application/json"}
        locale = cls.get_var("locale")
        if locale:
            headers["Accept-Language"] = locale
        return headers

    @classmethod
    def reset(cls) -> None:
        """Restore the built-in environment defaults"""
        cls._environment = DEFAULT_ENVIRONMENT
        cls._variables = {
            env: dict(values) for env, values in cls._defaults.items()
        }


@dataclass
class Config:
    """Client configuration loaded from environment variables"""

    app_id: str
    app_url: str
    auth_username: str
    auth_password: str

    env: str = DEFAULT_ENVIRONMENT
    locale: str | None = None
    cache_path: str | None = None

    REQUIRED_VARS = (
        "NEXTEVENT_APP_ID",
        "NEXTEVENT_APP_URL",
        "NEXTEVENT_AUTH_USERNAME",
        "NEXTEVENT_AUTH_PASSWORD",
    )

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Config":
        """Load configuration from environment variables

        Args:
            env_file: Optional dotenv file read before the environment

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)

        missing = [key for key in cls.REQUIRED_VARS if not os.getenv(key)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        config = cls(
            app_id=os.environ["NEXTEVENT_APP_ID"],
            app_url=os.environ["NEXTEVENT_APP_URL"].rstrip("/"),
            auth_username=os.environ["NEXTEVENT_AUTH_USERNAME"],
            auth_password=os.environ["NEXTEVENT_AUTH_PASSWORD"],
            env=os.getenv("NEXTEVENT_ENV", DEFAULT_ENVIRONMENT).upper(),
            locale=os.getenv("NEXTEVENT_LOCALE") or None,
            cache_path=os.getenv("NEXTEVENT_CACHE_PATH") or None,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  App ID: {config.app_id}")
        logger.info(f"  App URL: {config.app_url}")
        logger.info(f"  Auth Username: {config.auth_username}")
        logger.info("  Auth Password: ***")
        logger.info(f"  Environment: {config.env}")
        logger.info(f"  Locale: {config.locale or 'Not configured'}")
        logger.info(f"  Cache: {config.cache_path or 'Default file store'}")

        return config
