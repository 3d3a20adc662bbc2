"""AEZA billing API client.

One authenticated GET per call to `<base_url>/desktop`. Outcomes:
- error body (any status) or HTTP error  -> failure snapshot (application)
- valid account payload                  -> success snapshot
- no response (DNS/connect/timeout)      -> failure snapshot (transport)
The timeout bounds the whole request, body included, not each socket read.
- unusable 2xx body                      -> MalformedPayloadError
No retries here; the monitor simply tries again on its next tick.
"""

import asyncio
from typing import Mapping, Optional

import httpx

from logger import logger
from utils.log_sanitizer import sanitize_for_log
from .exceptions import ConfigurationError, MalformedPayloadError
from .models import AccountBalance, BalanceSnapshot, Credentials, FailureKind
from .realms import AccountRealm, BALANCE_ENDPOINT

DEFAULT_TIMEOUT = 10.0
NO_RESPONSE_MESSAGE = "No response from AEZA"


class AccountClient:
    """Balance client for every configured AEZA realm."""

    def __init__(
        self,
        credentials: Mapping[AccountRealm, Credentials],
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            credentials: Realm -> credentials; realms without an entry are unavailable
            timeout: Total time limit per request in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._credentials = dict(credentials)
        self.timeout = timeout
        self._transport = transport

        for realm in self.available_realms():
            logger.info(f"AEZA client configured for {realm.value}: {self._credentials[realm].base_url}")

    def available_realms(self) -> list[AccountRealm]:
        """Configured realms, in declaration order."""
        return [realm for realm in AccountRealm if realm in self._credentials]

    def has_credentials(self, realm: AccountRealm) -> bool:
        return realm in self._credentials

    async def fetch_balance(self, realm: AccountRealm) -> BalanceSnapshot:
        """Fetch the account summary for one realm.

        Raises:
            ConfigurationError: realm has no API key
            MalformedPayloadError: 2xx response that is not an account payload
        """
        creds = self._credentials.get(realm)
        if creds is None:
            raise ConfigurationError(realm)

        url = creds.base_url.rstrip("/") + BALANCE_ENDPOINT
        logger.info(f"AEZA request ({realm.value}): GET {url}")

        try:
            response = await asyncio.wait_for(self._get(url, creds.api_key), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"AEZA request ({realm.value}) timed out after {self.timeout}s")
            return BalanceSnapshot.failed(realm, FailureKind.TRANSPORT, NO_RESPONSE_MESSAGE)
        except httpx.TransportError as e:
            logger.error(f"AEZA request ({realm.value}) got no response: {type(e).__name__}: {e}")
            return BalanceSnapshot.failed(realm, FailureKind.TRANSPORT, NO_RESPONSE_MESSAGE)

        logger.info(f"AEZA response ({realm.value}): {response.status_code} ({len(response.content)} bytes)")
        return self._classify(realm, response)

    async def _get(self, url: str, api_key: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.get(
                url,
                headers={
                    "X-API-Key": api_key,
                    "Content-Type": "application/json"
                }
            )

    def _classify(self, realm: AccountRealm, response: httpx.Response) -> BalanceSnapshot:
        """Turn a received response into a snapshot."""
        try:
            body = response.json()
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            slug = error.get("slug")
            message = error.get("message") or slug or "Unknown API error"
            logger.warning(
                f"AEZA API error ({realm.value}): HTTP {response.status_code}, "
                f"slug={slug}, body={sanitize_for_log(body)}"
            )
            return BalanceSnapshot.failed(
                realm, FailureKind.APPLICATION, message,
                status_code=response.status_code, slug=slug
            )

        if not response.is_success:
            logger.warning(
                f"AEZA HTTP error ({realm.value}): {response.status_code}, "
                f"body={sanitize_for_log(response.content)}"
            )
            return BalanceSnapshot.failed(
                realm, FailureKind.APPLICATION,
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code, slug="http_error"
            )

        if body is None:
            raise MalformedPayloadError(f"AEZA {realm.value} returned a non-JSON body")

        return BalanceSnapshot.success(realm, AccountBalance.from_payload(body))
