"""Pytest configuration and fixtures."""

import os
import sys
from unittest.mock import Mock, AsyncMock

import httpx
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.aeza.models import AccountBalance, BalanceSnapshot, Credentials, FailureKind
from domains.aeza.realms import AccountRealm


def account_payload(
    withdraw_balance=500,
    account_id=123456,
    balance=10000,
    bonus_balance=0,
    month_earned=2500,
    percent=0.1,
    email="user@example.com",
) -> dict:
    """Build a /desktop success body in the API's shape."""
    return {
        "data": {
            "account": {
                "id": account_id,
                "balance": balance,
                "withdrawBalance": withdraw_balance,
                "bonusBalance": bonus_balance,
                "email": email,
                "referralState": {
                    "monthEarned": month_earned,
                    "state": {"current": {"percent": percent}},
                },
            }
        }
    }


def ok_snapshot(realm, withdraw_balance, account_id="123456") -> BalanceSnapshot:
    return BalanceSnapshot.success(
        realm,
        AccountBalance(account_id=account_id, balance=0, withdraw_balance=withdraw_balance),
    )


def failed_snapshot(realm, kind=FailureKind.TRANSPORT, message="No response from AEZA") -> BalanceSnapshot:
    return BalanceSnapshot.failed(realm, kind, message)


@pytest.fixture(name="account_payload")
def account_payload_fixture():
    """Factory for /desktop success bodies."""
    return account_payload


@pytest.fixture(name="ok_snapshot")
def ok_snapshot_fixture():
    """Factory for successful snapshots."""
    return ok_snapshot


@pytest.fixture(name="failed_snapshot")
def failed_snapshot_fixture():
    """Factory for failed snapshots."""
    return failed_snapshot


@pytest.fixture
def credentials():
    """Credentials for both realms."""
    return {
        AccountRealm.DOMESTIC: Credentials(api_key="ru-key", base_url="https://my.aeza.ru/api"),
        AccountRealm.INTERNATIONAL: Credentials(api_key="net-key", base_url="https://my.aeza.net/api"),
    }


@pytest.fixture
def mock_transport():
    """Factory for an httpx MockTransport that records requests."""
    def _make(handler):
        requests = []

        def _handle(request: httpx.Request):
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(_handle)
        transport.requests = requests
        return transport

    return _make


@pytest.fixture
def mock_discord_bot():
    """Create a mock Discord bot."""
    bot = Mock()
    bot.get_channel = Mock(return_value=Mock(send=AsyncMock()))
    bot.fetch_channel = AsyncMock()
    bot.user = Mock(name="TestBot#1234")
    return bot


@pytest.fixture
def mock_fetcher():
    """Fetcher whose fetch_all results are scripted per test via side_effect."""
    fetcher = Mock()
    fetcher.fetch_all = AsyncMock(return_value={})
    return fetcher
