from .config import ConfigManager
from .session import SessionManager
from .logger import setup_logger
from .exceptions import (
    AuthError,
    CloudOpsError,
    ConfigError,
    NotAuthenticatedError,
    NotFoundError,
    ProvisionError,
    SecretClientError,
    StateTransitionError,
    TaggingError,
    TransportError,
    ValidationRules,
)

__all__ = [
    "ConfigManager",
    "SessionManager",
    "setup_logger",
    "AuthError",
    "CloudOpsError",
    "ConfigError",
    "NotAuthenticatedError",
    "NotFoundError",
    "ProvisionError",
    "SecretClientError",
    "StateTransitionError",
    "TaggingError",
    "TransportError",
    "ValidationRules",
]
