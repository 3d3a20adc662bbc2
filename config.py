"""Global configuration for the AEZA balance bot."""

import os
from pathlib import Path
from dotenv import load_dotenv

from domains.aeza.models import Credentials
from domains.aeza.realms import AccountRealm, REALMS

load_dotenv()

# Discord
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")

# Only this Discord user may talk to the bot (empty = everyone)
ALLOWED_USER_ID = os.getenv("ALLOWED_USER_ID")

# AEZA API - one key per account realm, either may be omitted
AEZA_API_KEY_RU = os.getenv("AEZA_API_KEY_RU")
AEZA_API_KEY_NET = os.getenv("AEZA_API_KEY_NET")
AEZA_BASE_URL_RU = os.getenv("AEZA_BASE_URL_RU", REALMS[AccountRealm.DOMESTIC].base_url)
AEZA_BASE_URL_NET = os.getenv("AEZA_BASE_URL_NET", REALMS[AccountRealm.INTERNATIONAL].base_url)
AEZA_REQUEST_TIMEOUT = float(os.getenv("AEZA_REQUEST_TIMEOUT", "10"))

# Referral balance monitoring
MONITOR_INTERVAL_SECONDS = int(os.getenv("MONITOR_INTERVAL_SECONDS", "3600"))  # hourly
ANNOUNCE_FIRST_OBSERVATION = os.getenv("ANNOUNCE_FIRST_OBSERVATION", "false").lower() in ("1", "true", "yes")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOCALAPPDATA", ".")) / "aeza-balance-bot" / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)


def build_credentials() -> dict[AccountRealm, Credentials]:
    """Map each realm with a non-empty API key to its credentials."""
    keys = {
        AccountRealm.DOMESTIC: (AEZA_API_KEY_RU, AEZA_BASE_URL_RU),
        AccountRealm.INTERNATIONAL: (AEZA_API_KEY_NET, AEZA_BASE_URL_NET),
    }
    credentials = {}
    for realm, (api_key, base_url) in keys.items():
        if api_key and api_key.strip():
            credentials[realm] = Credentials(api_key=api_key.strip(), base_url=base_url)
    return credentials


def validate() -> list[str]:
    """Return a list of configuration problems (empty when usable)."""
    problems = []
    if not DISCORD_TOKEN:
        problems.append("DISCORD_TOKEN is not set")
    if not build_credentials():
        problems.append("Set at least one AEZA API key (AEZA_API_KEY_RU or AEZA_API_KEY_NET)")
    return problems
