"""
Access token verification.

``CredentialVerifier.verify`` only reports what the token can do;
``CredentialVerifier.connect`` applies the write-scope policy and opens a
Session.
"""

import httpx

from gitzip.client import HostingClient
from gitzip.config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from gitzip.exceptions import ConfigurationError, GitZipError
from gitzip.logging import get_logger, truncate_token
from gitzip.result import Err, ErrorKind, Ok, Result
from gitzip.session import Session
from gitzip.types.auth import CredentialScopes

logger = get_logger("auth")

MISSING_SCOPE_MESSAGE = (
    "Token missing 'repo' scope. Please create a new token with full repo permissions."
)


class CredentialVerifier:
    """Checks access tokens against the identity endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._http_transport = transport

    def _client(self, token: str) -> HostingClient:
        return HostingClient(
            token=token,
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._http_transport,
        )

    async def verify(self, token: str) -> CredentialScopes:
        """
        Verify a token and report its identity and granted scopes.

        Never raises: every failure is returned as an invalid result carrying
        a human-readable reason.

        Args:
            token: Personal access token

        Returns:
            CredentialScopes for the token
        """
        try:
            client = self._client(token)
        except ConfigurationError as e:
            return CredentialScopes(is_valid=False, error=e.message)

        async with client:
            try:
                user, scopes = await client.users.get_authenticated()
            except GitZipError as e:
                logger.info("Token %s rejected: %s", truncate_token(token), e.message)
                return CredentialScopes(is_valid=False, error=e.message)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Unexpected identity response: %r", e)
                return CredentialScopes(
                    is_valid=False, error="Unexpected response from identity endpoint"
                )

        logger.info("Verified token for %s with scopes %s", user.login, scopes)
        return CredentialScopes(is_valid=True, scopes=scopes, user=user)

    async def connect(self, token: str) -> Result[Session]:
        """
        Verify a token and open a write-capable session.

        Returns:
            Ok(Session), Err(CREDENTIAL) for a rejected token, or
            Err(INSUFFICIENT_SCOPE) when neither "repo" nor "public_repo"
            is granted
        """
        credentials = await self.verify(token)
        if not credentials.is_valid:
            return Err(ErrorKind.CREDENTIAL, credentials.error or "Token Invalid")
        if not credentials.can_write:
            return Err(ErrorKind.INSUFFICIENT_SCOPE, MISSING_SCOPE_MESSAGE)
        return Ok(Session(self._client(token), credentials))
