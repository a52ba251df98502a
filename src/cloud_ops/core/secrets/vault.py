"""Vault client using App ID authentication.

The client logs in once with a registered application id plus a user id read
from a local file, keeps the returned client token, and uses it for every
subsequent secret read.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests

from cloud_ops.core.constants import (
    VAULT_API_VERSION,
    VAULT_APP_ID_LOGIN_PATH,
    VAULT_DEFAULT_TIMEOUT,
    VAULT_TOKEN_HEADER,
)
from cloud_ops.utils.config import ConfigManager
from cloud_ops.utils.exceptions import (
    AuthError,
    NotAuthenticatedError,
    NotFoundError,
    SecretClientError,
)
from cloud_ops.utils.logger import setup_logger

AUTH_REJECTED_STATUSES = {400, 401, 403}


class VaultClient:
    """Synchronous Vault client for App ID login and secret reads.

    A client authenticates exactly once; ``get_secret`` requires it. Calls
    to ``authenticate`` from several threads on one client must be
    serialized by the caller.
    """

    def __init__(
        self,
        addr: str,
        app_id: str,
        user_id_path: Union[str, Path],
        verify: Union[bool, str] = True,
        timeout: float = VAULT_DEFAULT_TIMEOUT,
        http_session: Optional[requests.Session] = None,
        log_level: str = "INFO",
    ):
        """
        Initialize VaultClient.

        Args:
            addr: Vault server address, e.g. https://vault.example.com:8200
            app_id: Registered application id
            user_id_path: File holding this host's user id
            verify: TLS verification flag or CA bundle path
            timeout: Seconds to wait for each HTTP request
            http_session: Session to send requests with; one is created
                (and closed by ``close``) when omitted
            log_level: Level for the client logger
        """
        if not addr:
            raise ValueError("Vault address is required")
        if not app_id:
            raise ValueError("Vault app id is required")

        self.addr = addr.rstrip("/")
        self.app_id = app_id
        self.user_id_path = Path(user_id_path)
        self.verify = verify
        self.timeout = timeout
        self._owns_session = http_session is None
        self._http = http_session if http_session is not None else requests.Session()
        self._token: Optional[str] = None
        self.logger = setup_logger(__name__, "vault_client.log", log_level)

    @classmethod
    def from_config(
        cls, config_manager: Optional[ConfigManager] = None, **kwargs
    ) -> "VaultClient":
        """Build a client from the ``vault`` configuration section."""
        config_manager = config_manager or ConfigManager()
        settings = config_manager.get_vault_config()
        settings["log_level"] = config_manager.get_logging_level()
        settings.update(kwargs)
        return cls(**settings)

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def _url(self, path: str) -> str:
        return f"{self.addr}/{VAULT_API_VERSION}/{path.lstrip('/')}"

    def _read_user_id(self) -> str:
        try:
            user_id = self.user_id_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise AuthError(
                f"Cannot read user id from {self.user_id_path}: {e}",
                operation="authenticate",
            ) from e
        if not user_id:
            raise AuthError(
                f"User id file {self.user_id_path} is empty", operation="authenticate"
            )
        return user_id

    def authenticate(self) -> None:
        """Log in with App ID and keep the client token."""
        if self._token is not None:
            raise AuthError(
                "Session is already authenticated", operation="authenticate"
            )

        payload = {"app_id": self.app_id, "user_id": self._read_user_id()}
        url = self._url(VAULT_APP_ID_LOGIN_PATH)

        try:
            response = self._http.post(
                url, json=payload, verify=self.verify, timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Vault login request to {self.addr} failed: {e}")
            raise AuthError(
                f"Vault unreachable at {self.addr}: {e}", operation="authenticate"
            ) from e

        if not response.ok:
            message = _error_text(response)
            self.logger.error(
                f"Vault login for app id {self.app_id} rejected: "
                f"{response.status_code} {message}"
            )
            if response.status_code in AUTH_REJECTED_STATUSES:
                reason = "Credentials rejected"
            else:
                reason = "Login failed"
            raise AuthError(
                f"{reason} ({response.status_code}): {message}",
                operation="authenticate",
                error_code=str(response.status_code),
            )

        token = (_json_body(response).get("auth") or {}).get("client_token")
        if not token:
            raise AuthError(
                "Login response did not contain a client token",
                operation="authenticate",
            )

        self._token = token
        self.logger.info(f"Authenticated to {self.addr} with app id {self.app_id}")

    def get_secret(self, path: str) -> Any:
        """
        Read the secret stored at ``path``.

        Returns the ``value`` field when the secret holds only that field,
        otherwise the whole data mapping.
        """
        if self._token is None:
            raise NotAuthenticatedError(
                "authenticate() must succeed before reading secrets",
                operation="get_secret",
                resource_ids=[path],
            )

        try:
            response = self._http.get(
                self._url(path),
                headers={VAULT_TOKEN_HEADER: self._token},
                verify=self.verify,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"Vault read of {path} failed: {e}")
            raise SecretClientError(
                f"Request to {self.addr} failed: {e}",
                operation="get_secret",
                resource_ids=[path],
            ) from e

        if response.status_code == 404:
            raise NotFoundError(
                f"No secret at {path}", operation="get_secret", resource_ids=[path]
            )
        if not response.ok:
            message = _error_text(response)
            self.logger.error(f"Vault read of {path} failed: {response.status_code} {message}")
            raise SecretClientError(
                f"Vault returned {response.status_code}: {message}",
                operation="get_secret",
                resource_ids=[path],
                error_code=str(response.status_code),
            )

        data = _json_body(response).get("data")
        if data is None:
            raise NotFoundError(
                f"No secret at {path}", operation="get_secret", resource_ids=[path]
            )

        self.logger.debug(f"Read secret {path}")
        if isinstance(data, dict) and set(data) == {"value"}:
            return data["value"]
        return data

    def close(self) -> None:
        if self._owns_session:
            self._http.close()

    def __enter__(self) -> "VaultClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _json_body(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_text(response: requests.Response) -> str:
    errors = _json_body(response).get("errors")
    if errors:
        return "; ".join(str(e) for e in errors)
    return response.reason or response.text or "unknown error"


def create_vault_client(config_manager: Optional[ConfigManager] = None) -> VaultClient:
    """Create VaultClient from configuration."""
    return VaultClient.from_config(config_manager)
