"""AEZA account realms and their per-realm presentation/endpoint data."""

from dataclasses import dataclass
from enum import Enum


class AccountRealm(str, Enum):
    """Independent AEZA account contexts. Declaration order is display order."""
    DOMESTIC = "ru"        # my.aeza.ru, billed in roubles
    INTERNATIONAL = "net"  # my.aeza.net, billed in euros


@dataclass(frozen=True)
class RealmProfile:
    """Static per-realm data used by the client and the formatters."""
    flag: str
    label: str
    domain: str
    currency: str
    base_url: str


REALMS: dict[AccountRealm, RealmProfile] = {
    AccountRealm.DOMESTIC: RealmProfile(
        flag="🇷🇺",
        label="Russian account (.ru)",
        domain="ru",
        currency="₽",
        base_url="https://my.aeza.ru/api",
    ),
    AccountRealm.INTERNATIONAL: RealmProfile(
        flag="🌍",
        label="International account (.net)",
        domain="net",
        currency="€",
        base_url="https://my.aeza.net/api",
    ),
}

# Endpoint returning the account summary (balance, referral state, email)
BALANCE_ENDPOINT = "/desktop"
