"""Discord message rendering for AEZA balances and balance changes."""

from decimal import Decimal
from typing import Optional

from .models import BalanceSnapshot, ChangeNotification, FailureKind, to_amount
from .realms import AccountRealm, REALMS

__all__ = [
    "mask_account_id",
    "to_amount",
    "format_amount",
    "render_change",
    "render_balance",
    "render_failure",
    "render_summary",
    "render_not_configured",
    "match_realms",
    "USAGE_HINT",
]

# Query words that select a realm in /balance <account>
REALM_KEYWORDS = {
    AccountRealm.DOMESTIC: ("ru", "russia", "россия"),
    AccountRealm.INTERNATIONAL: ("net", "international", "международный"),
}

USAGE_HINT = (
    "❓ **Unknown account**\n\n"
    "Available accounts:\n"
    "• `ru` - Russian account\n"
    "• `net` - International account"
)


def mask_account_id(account_id) -> str:
    """Hide all but the first and last two characters of an account id.

    Ids of four characters or fewer are fully masked; missing ids become "****".
    """
    if account_id is None or account_id == "" or account_id == "N/A":
        return "****"

    id_str = str(account_id)
    if len(id_str) <= 4:
        return "*" * len(id_str)

    return f"{id_str[:2]}{'*' * (len(id_str) - 4)}{id_str[-2:]}"


def format_amount(amount: Decimal, realm: AccountRealm, spaced: bool = False) -> str:
    """Format a currency amount to 2 decimals with the realm's symbol."""
    currency = REALMS[realm].currency
    return f"{amount:.2f} {currency}" if spaced else f"{amount:.2f}{currency}"


def _header(realm: AccountRealm, account_id: Optional[str] = None, mask_id: bool = True) -> str:
    profile = REALMS[realm]
    if account_id is None:
        return f"{profile.flag} **{profile.label}**"
    display_id = mask_account_id(account_id) if mask_id else account_id
    return f"{profile.flag} **{profile.label} #{display_id}**"


def render_change(notification: ChangeNotification) -> str:
    """Render a referral balance change for the subscriber."""
    profile = REALMS[notification.realm]
    masked = mask_account_id(notification.account_id)
    new_formatted = format_amount(notification.current, notification.realm)

    lines = [
        "🔔 **Your referral balance has changed**",
        "",
        f"{profile.flag} {profile.domain} #{masked}",
    ]
    if notification.previous is None:
        lines.append(f"Now **{new_formatted}**")
    else:
        old_formatted = format_amount(notification.previous, notification.realm)
        lines.append(f"From ~~{old_formatted}~~ → **{new_formatted}**")
    return "\n".join(lines)


def render_failure(snapshot: BalanceSnapshot) -> str:
    """Render a failed fetch as realm header plus error text."""
    failure = snapshot.failure
    if failure.is_auth_error:
        reason = "Authorization error - API key is invalid"
    elif failure.kind == FailureKind.TRANSPORT:
        reason = "No response from AEZA, try again later"
    else:
        reason = f"API error: {failure.message}"
    return f"{_header(snapshot.realm)}\n\n❌ {reason}"


def render_balance(snapshot: BalanceSnapshot, mask_id: bool = False) -> str:
    """Render the full balance card for one realm (or its error)."""
    if not snapshot.ok:
        return render_failure(snapshot)

    account = snapshot.account
    realm = snapshot.realm
    lines = [
        _header(realm, account.account_id or "N/A", mask_id=mask_id),
        "",
        f"💵 Main balance: **{format_amount(to_amount(account.balance), realm, spaced=True)}**",
        f"💸 Referral balance: **{format_amount(account.referral_amount, realm, spaced=True)}**",
        f"📈 Earned all time: **{format_amount(to_amount(account.month_earned), realm, spaced=True)}**",
    ]

    if account.bonus_balance > 0:
        lines.append(f"🎁 Bonus balance: **{format_amount(to_amount(account.bonus_balance), realm, spaced=True)}**")

    if account.referral_percent is not None:
        lines.append(f"🎯 Referral rate: **{account.referral_percent * 100:.1f}%**")

    lines.append(f"📧 Email: ||{account.email or 'not set'}||")
    return "\n".join(lines)


def render_summary(snapshot: BalanceSnapshot) -> str:
    """One-line summary: referral balance | earned | rate."""
    profile = REALMS[snapshot.realm]
    if not snapshot.ok:
        return f"{profile.flag} {profile.domain.upper()}: ❌ {snapshot.failure.message}"

    account = snapshot.account
    percent = f"{account.referral_percent * 100:.1f}" if account.referral_percent else "0.0"
    return (
        f"{profile.flag} {profile.domain.upper()}: "
        f"💸 {format_amount(account.referral_amount, snapshot.realm)} | "
        f"📈 {format_amount(to_amount(account.month_earned), snapshot.realm)} | "
        f"🎯 {percent}%"
    )


def render_not_configured(realms: list[AccountRealm]) -> str:
    """Tell the user which recognized accounts have no API key set."""
    lines = ["⚠️ **Account not configured**", ""]
    for realm in realms:
        env_name = f"AEZA_API_KEY_{realm.value.upper()}"
        lines.append(f"{REALMS[realm].flag} {REALMS[realm].label}: set `{env_name}`")
    return "\n".join(lines)


def match_realms(query: Optional[str]) -> list[AccountRealm]:
    """Pick the realms named in free text. Empty query selects every realm."""
    text = (query or "").lower().strip()
    if not text:
        return list(AccountRealm)

    matched = []
    for realm in AccountRealm:
        if any(word in text for word in REALM_KEYWORDS[realm]):
            matched.append(realm)
    return matched
