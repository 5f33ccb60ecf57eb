"""Configuration and logging setup for the Datadog API client."""

import json
import logging
import os
import pathlib

import pydantic
import structlog

from .client import DEFAULT_HOST, DEFAULT_TIMEOUT, DogApiClient

CONFIG_ENV_VAR = "DOGAPI_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "dogapi.json"
LOGGER_NAME = "dogapi_client"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the Datadog API client."""

    api_key: str = pydantic.Field(description="Datadog API key", min_length=1)
    app_key: str | None = pydantic.Field(
        None,
        description="Datadog application key",
    )
    host: str = pydantic.Field(
        DEFAULT_HOST,
        description="Base URL for the Datadog API",
        min_length=1,
    )
    timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Route structlog events through the ``dogapi_client`` stdlib logger.

    Events are rendered as logfmt and handed to :mod:`logging`, so the host
    application keeps control of handlers. The level applies to this
    package's loggers only; unknown level names fall back to INFO.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    logging.getLogger(LOGGER_NAME).setLevel(log_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "logger", "msg"),
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def load_config(config_path: str | pathlib.Path) -> ClientConfig:
    """Load configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file contents are invalid.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def build_client(config: ClientConfig) -> DogApiClient:
    """Construct a client from validated config."""
    client = DogApiClient(
        api_key=config.api_key,
        app_key=config.app_key,
        host=config.host,
        timeout=config.timeout,
    )
    logger.info(
        "Created API client",
        host=config.host,
        application_key_configured=config.app_key is not None,
    )
    return client


def create_client(config_path: str | pathlib.Path | None = None) -> DogApiClient:
    """Create a client using a config path or environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return build_client(config)
