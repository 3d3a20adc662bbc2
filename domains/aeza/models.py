"""Data model for AEZA balance fetching and change detection."""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional

from .exceptions import MalformedPayloadError
from .realms import AccountRealm

CENT = Decimal("0.01")


def to_amount(minor_units: int) -> Decimal:
    """Convert an API integer amount (kopecks/cents) to a 2-place Decimal."""
    return (Decimal(minor_units) / 100).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Credentials:
    """API key and base URL for one realm."""
    api_key: str
    base_url: str

    def __repr__(self) -> str:
        # Never leak the key through logs or tracebacks
        return f"Credentials(api_key='***', base_url={self.base_url!r})"


class FailureKind(str, Enum):
    """Why a fetch produced no balance."""
    APPLICATION = "application"  # API answered with an error body / HTTP error
    TRANSPORT = "transport"      # No response at all (DNS, connect, timeout)
    UNEXPECTED = "unexpected"    # Anything else, e.g. a malformed payload


@dataclass(frozen=True)
class FetchFailure:
    """Failure descriptor carried by a failed snapshot."""
    kind: FailureKind
    message: str
    status_code: Optional[int] = None
    slug: Optional[str] = None

    @property
    def is_auth_error(self) -> bool:
        return self.slug == "not_auth"


def _minor(source: dict, key: str) -> int:
    """Read an integer money field, treating missing/null as 0."""
    value = source.get(key) or 0
    if isinstance(value, bool):
        raise MalformedPayloadError(f"Field '{key}' is not a number: {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise MalformedPayloadError(f"Field '{key}' is not an integer amount: {value!r}")
    return value


@dataclass(frozen=True)
class AccountBalance:
    """Successful `/desktop` payload. Money fields are in minor units."""
    account_id: Optional[str]
    balance: int
    withdraw_balance: int
    bonus_balance: int = 0
    month_earned: int = 0
    referral_percent: Optional[float] = None
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, body: Any) -> "AccountBalance":
        """Parse `{data: {account: {...}}}`.

        Raises:
            MalformedPayloadError: body is not an account payload
        """
        data = body.get("data") if isinstance(body, dict) else None
        account = data.get("account") if isinstance(data, dict) else None
        if not isinstance(account, dict):
            raise MalformedPayloadError("Response has no data.account object")

        referral_state = account.get("referralState") or {}
        if not isinstance(referral_state, dict):
            raise MalformedPayloadError("referralState is not an object")

        percent = None
        state = referral_state.get("state") or {}
        current = state.get("current") if isinstance(state, dict) else None
        if isinstance(current, dict) and current.get("percent") is not None:
            try:
                percent = float(current["percent"])
            except (TypeError, ValueError) as e:
                raise MalformedPayloadError(f"Referral percent is not a number: {current['percent']!r}") from e

        account_id = account.get("id")
        return cls(
            account_id=str(account_id) if account_id is not None else None,
            balance=_minor(account, "balance"),
            withdraw_balance=_minor(account, "withdrawBalance"),
            bonus_balance=_minor(account, "bonusBalance"),
            month_earned=_minor(referral_state, "monthEarned"),
            referral_percent=percent,
            email=account.get("email") or None,
        )

    @property
    def referral_amount(self) -> Decimal:
        """Referral (withdrawable) balance in currency units."""
        return to_amount(self.withdraw_balance)


@dataclass(frozen=True)
class BalanceSnapshot:
    """Result of one fetch for one realm: either `account` or `failure` is set."""
    realm: AccountRealm
    account: Optional[AccountBalance] = None
    failure: Optional[FetchFailure] = None

    def __post_init__(self):
        if (self.account is None) == (self.failure is None):
            raise ValueError("BalanceSnapshot needs exactly one of account / failure")

    @classmethod
    def success(cls, realm: AccountRealm, account: AccountBalance) -> "BalanceSnapshot":
        return cls(realm=realm, account=account)

    @classmethod
    def failed(
        cls,
        realm: AccountRealm,
        kind: FailureKind,
        message: str,
        status_code: Optional[int] = None,
        slug: Optional[str] = None,
    ) -> "BalanceSnapshot":
        return cls(realm=realm, failure=FetchFailure(kind, message, status_code, slug))

    @property
    def ok(self) -> bool:
        return self.account is not None


@dataclass(frozen=True)
class ChangeNotification:
    """A referral balance change for one realm.

    `previous` is None only for first-observation announcements, which are
    off unless explicitly enabled on the monitor.
    """
    realm: AccountRealm
    previous: Optional[Decimal]
    current: Decimal
    account_id: Optional[str] = None


@dataclass
class CycleReport:
    """Outcome of one poll-detect-notify cycle."""
    notifications: list[ChangeNotification] = field(default_factory=list)
    delivered: int = 0
    failed_deliveries: int = 0
    failed_realms: list[AccountRealm] = field(default_factory=list)
    skipped: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed_deliveries == 0 and not self.failed_realms
