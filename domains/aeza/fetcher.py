"""Concurrent balance fetching across all configured realms."""

import asyncio

from logger import logger
from .client import AccountClient
from .models import BalanceSnapshot, FailureKind
from .realms import AccountRealm


class BalanceFetcher:
    """Fetch every configured realm at once; one realm never breaks another."""

    def __init__(self, client: AccountClient):
        self.client = client

    def realms(self) -> list[AccountRealm]:
        return self.client.available_realms()

    async def fetch(self, realm: AccountRealm) -> BalanceSnapshot:
        """Fetch one realm, converting any exception into a failure snapshot."""
        try:
            return await self.client.fetch_balance(realm)
        except Exception as e:
            logger.error(f"Balance fetch for {realm.value} failed: {type(e).__name__}: {e}")
            return BalanceSnapshot.failed(realm, FailureKind.UNEXPECTED, str(e) or type(e).__name__)

    async def fetch_all(self) -> dict[AccountRealm, BalanceSnapshot]:
        """Fetch all configured realms concurrently.

        Returns:
            Realm -> snapshot in declaration order; unconfigured realms are absent
        """
        realms = self.realms()
        if not realms:
            logger.warning("No AEZA realms configured, nothing to fetch")
            return {}

        snapshots = await asyncio.gather(*(self.fetch(realm) for realm in realms))

        failed = [s.realm.value for s in snapshots if not s.ok]
        if failed:
            logger.warning(f"Fetched {len(snapshots)} realm(s), failed: {', '.join(failed)}")
        else:
            logger.info(f"Fetched {len(snapshots)} realm(s)")

        return dict(zip(realms, snapshots))
