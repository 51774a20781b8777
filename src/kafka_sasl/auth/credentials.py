"""
AWS credential providers for the AWS_MSK_IAM mechanism.

A credential provider returns a frozen access key / secret key / session
token triple on demand. The mechanism asks for credentials once per
handshake and never caches them; refresh policy belongs to the provider
(botocore's refreshable credentials already handle it).

Supported sources:
    - Static: Explicit access key / secret / session token (tests, CI)
    - Botocore: The standard AWS credential chain (env vars, shared config
      and credentials files, SSO, container and instance metadata)

Example:
    >>> provider = BotocoreCredentialsProvider(profile="msk-producer")
    >>> creds = await provider.retrieve()
    >>> creds.access_key
    'ASIA...'
"""

import asyncio
import logging
from typing import Optional

import botocore.session
from botocore.credentials import ReadOnlyCredentials

from kafka_sasl.errors.exceptions import CredentialsUnavailableError

logger = logging.getLogger(__name__)


class StaticCredentialsProvider:
    """Returns the same credentials on every call."""

    auth_mode = "static"

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        session_token: Optional[str] = None,
    ):
        self._credentials = ReadOnlyCredentials(access_key, secret_key, session_token)

    async def retrieve(self) -> ReadOnlyCredentials:
        if not self._credentials.access_key or not self._credentials.secret_key:
            raise CredentialsUnavailableError(
                "static credentials are missing an access key or secret key"
            )
        return self._credentials


class BotocoreCredentialsProvider:
    """
    Resolves credentials through botocore's default credential chain.

    Resolution may hit the network (SSO, STS, instance metadata), so it runs
    in a worker thread to keep the event loop responsive and to let callers
    cancel a slow lookup.

    Attributes:
        profile: Named profile from the shared AWS config, or None for default
    """

    def __init__(
        self,
        session: Optional[botocore.session.Session] = None,
        profile: Optional[str] = None,
    ):
        self.profile = profile
        if session is None:
            session = botocore.session.Session(profile=profile) if profile else botocore.session.get_session()
        self._session = session

    @property
    def auth_mode(self) -> str:
        """Credential chain in use, for diagnostics."""
        return f"profile:{self.profile}" if self.profile else "default_chain"

    def _resolve(self) -> ReadOnlyCredentials:
        credentials = self._session.get_credentials()
        if credentials is None:
            raise CredentialsUnavailableError(
                "no credentials found in the AWS credential chain",
                context={"auth_mode": self.auth_mode},
            )
        return credentials.get_frozen_credentials()

    async def retrieve(self) -> ReadOnlyCredentials:
        credentials = await asyncio.to_thread(self._resolve)
        logger.debug(
            "Resolved AWS credentials",
            extra={"auth_mode": self.auth_mode},
        )
        return credentials


__all__ = [
    "BotocoreCredentialsProvider",
    "StaticCredentialsProvider",
]
