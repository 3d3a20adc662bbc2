"""AEZA Balance Bot - Main Bot.

Shows AEZA account balances on demand and watches the referral balance
of every configured account, posting a message when it changes.
"""

import signal
import sys

import discord
from discord import app_commands
from discord.ext import commands
from apscheduler.schedulers.asyncio import AsyncIOScheduler

import config
from logger import logger
from domains.aeza.client import AccountClient
from domains.aeza.fetcher import BalanceFetcher
from domains.aeza.formatting import (
    USAGE_HINT,
    match_realms,
    render_balance,
    render_not_configured,
    render_summary,
)
from domains.aeza.notifier import send_to_channel
from domains.aeza.realms import AccountRealm
from jobs import BalanceMonitor

ABOUT_TEXT = (
    "**About:**\n"
    "Uses the official AEZA API (GET /desktop) to read balances.\n"
    "Checks the referral balance for changes every "
    f"{config.MONITOR_INTERVAL_SECONDS // 60} minutes."
)

WELCOME_TEXT = (
    "🤖 **Welcome to AEZA Balance Bot!**\n\n"
    "Shows your balances and referral balance, and tells you when the referral balance changes.\n\n"
    "**Commands:**\n"
    "`/balance` - Show the balance of every account\n"
    "`/help` - Show help\n\n"
    + ABOUT_TEXT
)

HELP_TEXT = (
    "🆘 **Help:**\n\n"
    "`/start` - Welcome message\n"
    "`/balance [account]` - Show balances (`ru`, `net` or both)\n"
    "`/summary` - One-line summary per account\n"
    "`/monitor-status` - Show referral balance monitoring status\n"
    "`/monitor-stop` - Stop referral balance monitoring\n"
    "`/help` - Show this help\n\n"
    + ABOUT_TEXT
)

ACCESS_DENIED_TEXT = "You do not have access to this bot."

# Initialize bot (slash commands only, no message content needed)
intents = discord.Intents.default()
bot = commands.Bot(command_prefix="/", intents=intents)

# Initialize scheduler
scheduler = AsyncIOScheduler()

# AEZA client, fetcher and monitor
aeza_client = AccountClient(config.build_credentials(), timeout=config.AEZA_REQUEST_TIMEOUT)
fetcher = BalanceFetcher(aeza_client)


async def _send(channel_id: int, text: str) -> bool:
    return await send_to_channel(bot, channel_id, text)


monitor = BalanceMonitor(
    scheduler,
    fetcher,
    _send,
    interval_seconds=config.MONITOR_INTERVAL_SECONDS,
    announce_first_observation=config.ANNOUNCE_FIRST_OBSERVATION,
)


def check_user_access(user_id: int) -> bool:
    """Everyone is allowed when ALLOWED_USER_ID is unset."""
    if not config.ALLOWED_USER_ID:
        return True
    return str(user_id) == config.ALLOWED_USER_ID


async def _ensure_access(interaction: discord.Interaction) -> bool:
    if check_user_access(interaction.user.id):
        return True
    logger.warning(f"Access denied for user {interaction.user.id}")
    await interaction.response.send_message(ACCESS_DENIED_TEXT, ephemeral=True)
    return False


async def _ensure_monitoring(channel_id: int):
    """Start monitoring on first qualifying interaction."""
    if monitor.is_running:
        return
    try:
        await monitor.start(channel_id)
    except Exception as e:
        logger.error(f"Failed to start balance monitor: {e}")


@bot.event
async def on_ready():
    """Called when bot is connected and ready."""
    logger.info(f"Logged in as {bot.user}")

    # Sync slash commands with Discord
    try:
        synced = await bot.tree.sync()
        logger.info(f"Synced {len(synced)} slash commands")
    except Exception as e:
        logger.error(f"Failed to sync slash commands: {e}")

    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")

    realms = ", ".join(realm.value for realm in aeza_client.available_realms())
    logger.info(f"Bot ready - AEZA accounts: {realms}")


@bot.tree.command(name="start", description="Welcome message; starts balance monitoring")
async def cmd_start(interaction: discord.Interaction):
    """Welcome message and lazy monitor start."""
    if not await _ensure_access(interaction):
        return

    await interaction.response.send_message(WELCOME_TEXT)
    await _ensure_monitoring(interaction.channel_id)


@bot.tree.command(name="help", description="Show help")
async def cmd_help(interaction: discord.Interaction):
    """Command reference."""
    if not await _ensure_access(interaction):
        return

    await interaction.response.send_message(HELP_TEXT)


@bot.tree.command(name="balance", description="Show AEZA account balances")
@app_commands.describe(account="Which account: ru, net (default: all)")
async def cmd_balance(interaction: discord.Interaction, account: str = None):
    """Fetch and show balances, one message per account."""
    if not await _ensure_access(interaction):
        return

    logger.info(f"Balance requested by {interaction.user} (ID: {interaction.user.id})")

    requested = match_realms(account)
    realms = [realm for realm in requested if aeza_client.has_credentials(realm)]
    if not requested:
        await interaction.response.send_message(USAGE_HINT, ephemeral=True)
    elif not realms:
        await interaction.response.send_message(render_not_configured(requested), ephemeral=True)
    else:
        await interaction.response.defer()  # API calls may take a few seconds

        try:
            if len(realms) == len(aeza_client.available_realms()):
                snapshots = list((await fetcher.fetch_all()).values())
            else:
                snapshots = [await fetcher.fetch(realm) for realm in realms]

            for snapshot in snapshots:
                await interaction.followup.send(render_balance(snapshot, mask_id=False))
            logger.info(f"Sent {len(snapshots)} balance message(s)")
        except Exception as e:
            logger.error(f"Balance command failed: {e}")
            await interaction.followup.send(f"❌ **Failed to get balance:** `{e}`\n\nCheck your API keys.")

    await _ensure_monitoring(interaction.channel_id)


@bot.tree.command(name="monitor-status", description="Show referral balance monitoring status")
async def cmd_monitor_status(interaction: discord.Interaction):
    """Monitoring state, next check and last known balances."""
    if not await _ensure_access(interaction):
        return

    status = monitor.get_status()
    lines = ["📊 **Balance monitor**", ""]
    if status["state"] == "running":
        lines.append(f"**State:** running (every {status['interval_seconds'] // 60} min)")
        if status["next_run_time"]:
            lines.append(f"**Next check:** {status['next_run_time'].strftime('%d.%m.%Y %H:%M:%S')}")
    else:
        lines.append("**State:** stopped")

    if status["history"]:
        lines.append("")
        lines.append("**Last known referral balances:**")
        for realm, amount in status["history"].items():
            lines.append(f"• {realm}: {amount}")

    await interaction.response.send_message("\n".join(lines))


@bot.tree.command(name="monitor-stop", description="Stop referral balance monitoring")
async def cmd_monitor_stop(interaction: discord.Interaction):
    """Stop the monitor; /start or /balance starts it again."""
    if not await _ensure_access(interaction):
        return

    if monitor.stop():
        await interaction.response.send_message("🔕 Balance monitoring stopped.")
    else:
        await interaction.response.send_message("Balance monitoring is not running.")


@bot.tree.command(name="summary", description="One-line balance summary per account")
async def cmd_summary(interaction: discord.Interaction):
    """Compact one-line summary for every account."""
    if not await _ensure_access(interaction):
        return

    await interaction.response.defer()

    try:
        snapshots = await fetcher.fetch_all()
        if not snapshots:
            await interaction.followup.send(render_not_configured(list(AccountRealm)))
            return
        await interaction.followup.send("\n".join(render_summary(s) for s in snapshots.values()))
    except Exception as e:
        logger.error(f"Summary command failed: {e}")
        await interaction.followup.send(f"❌ **Failed to get summary:** `{e}`")


@bot.event
async def on_error(event, *args, **kwargs):
    """Log unhandled errors in event handlers."""
    logger.exception(f"Unhandled error in {event}")


def _shutdown(signum, frame):
    logger.info(f"Received signal {signum}, shutting down...")
    monitor.stop()
    if scheduler.running:
        scheduler.shutdown(wait=False)
    sys.exit(0)


if __name__ == "__main__":
    problems = config.validate()
    if problems:
        for problem in problems:
            logger.error(problem)
        sys.exit(1)

    signal.signal(signal.SIGTERM, _shutdown)
    logger.info("Starting AEZA Balance Bot...")
    bot.run(config.DISCORD_TOKEN)
