"""End-to-end poll-detect-notify scenarios with a stubbed AEZA API."""

from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from domains.aeza.client import AccountClient
from domains.aeza.fetcher import BalanceFetcher
from domains.aeza.realms import AccountRealm
from jobs.balance_monitor import BalanceMonitor

RU = AccountRealm.DOMESTIC
CHANNEL_ID = 1465761699582972142


class ScriptedApi:
    """Serves one scripted outcome per request: an int balance or an exception."""

    def __init__(self, account_payload, outcomes):
        self._payload = account_payload
        self._outcomes = list(outcomes)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(200, json=self._payload(withdraw_balance=outcome, account_id=123456))


@pytest.mark.asyncio
async def test_four_cycle_scenario(credentials, account_payload):
    """500 -> 700 -> no response -> 700 on the domestic account."""
    del credentials[AccountRealm.INTERNATIONAL]
    api = ScriptedApi(account_payload, [500, 700, httpx.ConnectTimeout("timed out"), 700])
    fetcher = BalanceFetcher(AccountClient(credentials, transport=httpx.MockTransport(api)))
    send = AsyncMock(return_value=True)
    monitor = BalanceMonitor(AsyncIOScheduler(), fetcher, send)

    # Cycle 1: baseline only
    await monitor.start(CHANNEL_ID)
    assert monitor.history == {RU: Decimal("5.00")}
    send.assert_not_awaited()

    # Cycle 2: change 5.00 -> 7.00
    report = await monitor.run_cycle()
    assert len(report.notifications) == 1
    assert report.notifications[0].previous == Decimal("5.00")
    assert report.notifications[0].current == Decimal("7.00")
    assert monitor.history == {RU: Decimal("7.00")}
    text = send.await_args.args[1]
    assert "🇷🇺 ru #12**56" in text
    assert "~~5.00₽~~ → **7.00₽**" in text

    # Cycle 3: no response, nothing sent, history kept
    report = await monitor.run_cycle()
    assert report.notifications == []
    assert report.failed_realms == [RU]
    assert monitor.history == {RU: Decimal("7.00")}

    # Cycle 4: same value again
    report = await monitor.run_cycle()
    assert report.notifications == []
    assert monitor.history == {RU: Decimal("7.00")}

    assert send.await_count == 1


@pytest.mark.asyncio
async def test_one_realm_down_other_still_notifies(credentials, account_payload):
    def handler(request):
        if request.url.host == "my.aeza.ru":
            return httpx.Response(401, json={"error": {"message": "Invalid key", "slug": "not_auth"}})
        handler.net_balance += 100
        return httpx.Response(200, json=account_payload(withdraw_balance=handler.net_balance))

    handler.net_balance = 1000
    fetcher = BalanceFetcher(AccountClient(credentials, transport=httpx.MockTransport(handler)))
    send = AsyncMock(return_value=True)
    monitor = BalanceMonitor(AsyncIOScheduler(), fetcher, send)

    await monitor.start(CHANNEL_ID)
    report = await monitor.run_cycle()

    assert [n.realm for n in report.notifications] == [AccountRealm.INTERNATIONAL]
    assert report.failed_realms == [RU]
    assert "~~11.00€~~ → **12.00€**" in send.await_args.args[1]
    assert RU not in monitor.history
