"""Tests for the /balance and /summary slash command handlers."""

from unittest.mock import AsyncMock, Mock

import pytest

import bot
import config
from domains.aeza.client import AccountClient
from domains.aeza.models import Credentials
from domains.aeza.realms import AccountRealm

NET = AccountRealm.INTERNATIONAL
CHANNEL_ID = 1465761699582972142


@pytest.fixture
def interaction():
    """Mock discord.Interaction with response and followup senders."""
    interaction = Mock()
    interaction.user.id = 12345
    interaction.channel_id = CHANNEL_ID
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def bot_state(monkeypatch, mock_fetcher):
    """Only the .net account configured; monitor and fetcher mocked."""
    monkeypatch.setattr(config, "ALLOWED_USER_ID", None)
    client = AccountClient({NET: Credentials(api_key="net-key", base_url="https://my.aeza.net/api")})
    monitor = Mock(is_running=False)
    monitor.start = AsyncMock(return_value=True)
    monkeypatch.setattr(bot, "aeza_client", client)
    monkeypatch.setattr(bot, "fetcher", mock_fetcher)
    monkeypatch.setattr(bot, "monitor", monitor)
    return monitor


class TestBalanceCommand:

    @pytest.mark.asyncio
    async def test_unconfigured_account_says_not_configured(self, interaction, bot_state):
        await bot.cmd_balance.callback(interaction, "ru")

        text = interaction.response.send_message.await_args.args[0]
        assert "Account not configured" in text
        assert "Unknown account" not in text
        interaction.response.defer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unconfigured_account_still_starts_monitoring(self, interaction, bot_state):
        await bot.cmd_balance.callback(interaction, "ru")

        bot_state.start.assert_awaited_once_with(CHANNEL_ID)

    @pytest.mark.asyncio
    async def test_unknown_account_shows_usage_and_starts_monitoring(self, interaction, bot_state):
        await bot.cmd_balance.callback(interaction, "mars")

        assert "Unknown account" in interaction.response.send_message.await_args.args[0]
        bot_state.start.assert_awaited_once_with(CHANNEL_ID)


class TestSummaryCommand:

    @pytest.mark.asyncio
    async def test_fetch_error_is_reported(self, interaction, bot_state, mock_fetcher):
        mock_fetcher.fetch_all.side_effect = RuntimeError("boom")

        await bot.cmd_summary.callback(interaction)

        text = interaction.followup.send.await_args.args[0]
        assert "Failed to get summary" in text
        assert "boom" in text

    @pytest.mark.asyncio
    async def test_summary_lines(self, interaction, bot_state, mock_fetcher, ok_snapshot):
        mock_fetcher.fetch_all.return_value = {NET: ok_snapshot(NET, 4200)}

        await bot.cmd_summary.callback(interaction)

        assert interaction.followup.send.await_args.args[0].startswith("🌍 NET: 💸 42.00€")
