"""Credentials for Google API access.

Supports two authentication modes:
1. API key - sent as the ``key`` query parameter, read-only access to
   publicly shared spreadsheets
2. Service account - short-lived bearer tokens minted with google-auth
   from a JSON key (dict or file path)
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from loguru import logger

from sheettable.exceptions import MissingCredentialError

DEFAULT_SCOPES = (
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
)


class Credential(ABC):
    """Something that can authenticate a Google API request."""

    async def ensure_valid(self) -> None:
        """Refresh the credential if it has expired."""
        return None

    @abstractmethod
    def request_params(self) -> dict[str, str]:
        """Query parameters to add to each request."""
        ...

    @abstractmethod
    def request_headers(self) -> dict[str, str]:
        """Headers to add to each request."""
        ...


@dataclass(frozen=True)
class ApiKeyCredential(Credential):
    """API key credential.

    The key is not validated locally; an invalid key surfaces as an
    AuthenticationError on first use.
    """

    key: str

    def __post_init__(self) -> None:
        if not self.key:
            raise MissingCredentialError("apikey")

    def request_params(self) -> dict[str, str]:
        return {"key": self.key}

    def request_headers(self) -> dict[str, str]:
        return {}

    def __repr__(self) -> str:
        return "ApiKeyCredential(key=***)"


class ServiceAccountCredential(Credential):
    """Service account credential backed by google-auth.

    Example:
        >>> credential = ServiceAccountCredential.from_key("/path/to/sa.json")
        >>> await credential.ensure_valid()
    """

    def __init__(self, credentials: service_account.Credentials) -> None:
        self._credentials = credentials

    @classmethod
    def from_key(
        cls,
        key: Mapping[str, Any] | str | Path | None,
        scopes: Sequence[str] | None = None,
    ) -> ServiceAccountCredential:
        """Build a credential from a service account key.

        Args:
            key: Parsed key info (needs ``client_email`` and ``private_key``)
                or a path to the JSON key file
            scopes: OAuth scopes, defaults to read-only Sheets and Drive metadata

        Raises:
            MissingCredentialError: If key is empty
            FileNotFoundError: If key is a path that does not exist
        """
        if not key:
            raise MissingCredentialError("key")

        scopes = list(scopes or DEFAULT_SCOPES)
        if isinstance(key, (str, Path)):
            path = Path(key)
            if not path.exists():
                raise FileNotFoundError(f"Service account file not found: {path}")
            credentials = service_account.Credentials.from_service_account_file(
                str(path), scopes=scopes
            )
        else:
            credentials = service_account.Credentials.from_service_account_info(
                dict(key), scopes=scopes
            )
        return cls(credentials)

    @property
    def service_account_email(self) -> str:
        return self._credentials.service_account_email

    async def refresh(self) -> None:
        """Mint a new access token. google-auth refreshes synchronously."""
        logger.debug("Refreshing token for {}", self.service_account_email)
        await asyncio.to_thread(self._credentials.refresh, Request())

    async def ensure_valid(self) -> None:
        if not self._credentials.valid:
            await self.refresh()

    def request_params(self) -> dict[str, str]:
        return {}

    def request_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._credentials.token}"}
