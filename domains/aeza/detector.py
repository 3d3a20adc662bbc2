"""Referral balance change detection."""

from decimal import Decimal
from typing import Mapping

from logger import logger
from .models import BalanceSnapshot, ChangeNotification
from .realms import AccountRealm

# Realm -> last observed referral balance; a missing realm means "unknown"
BalanceHistory = dict[AccountRealm, Decimal]


def detect_changes(
    snapshots: Mapping[AccountRealm, BalanceSnapshot],
    history: Mapping[AccountRealm, Decimal],
    announce_first_observation: bool = False,
) -> tuple[list[ChangeNotification], BalanceHistory]:
    """Compare fresh snapshots against the last known referral balances.

    Failed snapshots are skipped and leave history untouched. The first
    successful observation of a realm only sets the baseline unless
    `announce_first_observation` is set.

    Args:
        snapshots: Latest fetch results
        history: Previous balances (not modified)
        announce_first_observation: Also notify when a realm is seen for the first time

    Returns:
        (notifications in realm declaration order, updated history)
    """
    notifications: list[ChangeNotification] = []
    updated: BalanceHistory = dict(history)

    for realm in AccountRealm:
        snapshot = snapshots.get(realm)
        if snapshot is None:
            continue

        if not snapshot.ok:
            logger.info(f"Skipping {realm.value} this cycle: {snapshot.failure.message}")
            continue

        current = snapshot.account.referral_amount
        previous = history.get(realm)

        if previous is None:
            updated[realm] = current
            logger.info(f"{realm.value} referral balance baseline: {current}")
            if announce_first_observation:
                notifications.append(ChangeNotification(realm, None, current, snapshot.account.account_id))
            continue

        if current != previous:
            logger.info(f"{realm.value} referral balance changed: {previous} -> {current}")
            notifications.append(ChangeNotification(realm, previous, current, snapshot.account.account_id))
            updated[realm] = current

    return notifications, updated
