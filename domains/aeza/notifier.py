"""Delivery of rendered messages to a Discord channel."""

from logger import logger

# Discord rejects messages over this length
DISCORD_MESSAGE_LIMIT = 2000


async def send_to_channel(bot, channel_id: int, text: str) -> bool:
    """Send text to a channel, resolving it from cache or the API.

    Fire-and-forget: failures are logged and reported as False, never raised.
    """
    channel = bot.get_channel(channel_id)
    if not channel:
        # Try fetching the channel if not in cache
        try:
            channel = await bot.fetch_channel(channel_id)
        except Exception as e:
            logger.error(f"Could not find or fetch channel {channel_id}: {e}")
            return False

    try:
        for i in range(0, len(text), DISCORD_MESSAGE_LIMIT):
            await channel.send(text[i:i + DISCORD_MESSAGE_LIMIT])
        return True
    except Exception as e:
        logger.error(f"Failed to send message to channel {channel_id}: {e}")
        return False
