"""AEZA billing domain: account realms, balance fetching and change detection.

Only logger-free modules are re-exported here, since `config` imports this
package. Import the client, fetcher and detector from their submodules.
"""

from .exceptions import AezaError, ConfigurationError, MalformedPayloadError
from .models import (
    AccountBalance,
    BalanceSnapshot,
    ChangeNotification,
    Credentials,
    CycleReport,
    FailureKind,
    FetchFailure,
)
from .realms import AccountRealm, RealmProfile, REALMS

__all__ = [
    "AezaError",
    "ConfigurationError",
    "MalformedPayloadError",
    "AccountBalance",
    "BalanceSnapshot",
    "ChangeNotification",
    "Credentials",
    "CycleReport",
    "FailureKind",
    "FetchFailure",
    "AccountRealm",
    "RealmProfile",
    "REALMS",
]
